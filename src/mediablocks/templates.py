"""Page templates: user overrides first, bundled defaults second."""

import importlib.resources
from pathlib import Path

from jinja2 import ChoiceLoader, FileSystemLoader, PackageLoader

DEFAULT_TEMPLATES_PACKAGE = "mediablocks.defaults.templates"


def get_template_loader(templates_dir: Path | None) -> ChoiceLoader:
    """Loader that prefers templates in ``templates_dir`` when given."""
    loaders = []
    if templates_dir and templates_dir.is_dir():
        loaders.append(FileSystemLoader(str(templates_dir)))
    loaders.append(PackageLoader("mediablocks", "defaults/templates"))
    return ChoiceLoader(loaders)


def copy_default_templates(target_dir: Path, force: bool = False) -> list[str]:
    """Copy the bundled ``*.html`` templates into target_dir.

    Existing files are kept unless ``force`` is set.

    Returns:
        Paths of the files written
    """
    target_dir.mkdir(parents=True, exist_ok=True)
    created = []
    for resource in importlib.resources.files(DEFAULT_TEMPLATES_PACKAGE).iterdir():
        if not resource.name.endswith(".html"):
            continue
        target_file = target_dir / resource.name
        if target_file.exists() and not force:
            continue
        target_file.write_text(resource.read_text(encoding="utf-8"), encoding="utf-8")
        created.append(str(target_file))
    return sorted(created)
