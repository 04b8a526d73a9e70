"""Site build: markdown documents with media callouts -> HTML pages."""

from datetime import datetime
from pathlib import Path

from jinja2 import Environment

from .assets import copy_user_assets, robust_rmtree
from .config import CONFIG_DIR, Config
from .markdown_utils import parse_markdown_file, render_markdown
from .postprocess import postprocess_html
from .reading_time import annotate
from .templates import get_template_loader


def is_path_ignored(
    file_path: Path, base_dir: Path, ignored_folders: list[str]
) -> bool:
    """Check if file is in an ignored or hidden folder.

    Args:
        file_path: Path to the file to check
        base_dir: Base directory for computing relative path
        ignored_folders: List of folder names to ignore

    Returns:
        True if the file should be skipped
    """
    try:
        rel_path = file_path.relative_to(base_dir)
    except ValueError:
        return False
    # Check directories only (not the filename)
    for part in rel_path.parts[:-1]:
        if part in ignored_folders or part.startswith("."):
            return True
    return False


def iter_documents(vault_path: Path, config: Config):
    """Iterate over the documents to build.

    Yields:
        Tuples of (source_file, page_path)
    """
    extensions = set(config.build.extensions)
    for source in sorted(vault_path.glob("**/*")):
        if not source.is_file() or source.suffix.lower() not in extensions:
            continue
        if is_path_ignored(source, vault_path, config.build.ignored_folders):
            continue
        page_path = source.relative_to(vault_path).with_suffix("").as_posix()
        yield source, page_path


def create_page_object(
    page_path: str, meta: dict, content: str, config: Config
) -> dict:
    """Create a page object with rendered, post-processed HTML."""
    annotate(meta, content, config)
    html = postprocess_html(render_markdown(content), config)
    return {
        "path": page_path,
        "title": meta.get("title", Path(page_path).name),
        "meta": meta,
        "body": content,
        "html": html,
        "url": f"/{page_path}/",
    }


def render_page_to_file(
    page: dict, build_dir: Path, env: Environment, config: Config
) -> Path:
    """Render a page object to <build_dir>/<page>/index.html."""
    page_dir = build_dir / page["path"]
    page_dir.mkdir(parents=True, exist_ok=True)

    template = env.get_template("page.html")
    html = template.render(
        page=page,
        title=page["title"],
        content=page["html"],
        **config.to_template_context(),
    )

    output_file = page_dir / "index.html"
    output_file.write_text(html, encoding="utf-8")
    return output_file


def build(config: Config, force_rebuild: bool = False) -> int:
    """Build HTML pages from the vault's markdown documents.

    Args:
        config: Configuration object
        force_rebuild: Clean the build directory first

    Returns:
        Number of pages built
    """
    from .logging import debug, error, info

    vault_path = config.vault_path
    if not vault_path:
        error("No vault path configured")
        return 0

    if not vault_path.exists():
        error(f"Vault directory '{vault_path}' does not exist")
        return 0

    build_dir = config.get_build_dir()
    if force_rebuild and build_dir.exists():
        debug("Force rebuild: Cleaning build directory...")
        robust_rmtree(build_dir)
    build_dir.mkdir(parents=True, exist_ok=True)

    copied = copy_user_assets(
        vault_path, build_dir, config.build.assets_dir, force_rebuild
    )
    if copied:
        debug(f"  Copied {copied} asset files")

    env = Environment(loader=get_template_loader(config.get_templates_dir()))

    timestamp = datetime.now().strftime("%H:%M:%S")
    info(f"[{timestamp}] Building...")

    built = 0
    skipped = 0
    for source, page_path in iter_documents(vault_path, config):
        meta, content = parse_markdown_file(source)
        if config.build.require_public and not meta.get("public", False):
            skipped += 1
            continue

        debug(f"  Building: {page_path}")
        try:
            page = create_page_object(page_path, meta, content, config)
            render_page_to_file(page, build_dir, env, config)
        except Exception as e:
            error(f"Building {source}: {e}")
            continue
        built += 1

    debug(f"  - {skipped} private pages skipped")
    debug(f"  - Output directory: {build_dir.absolute()}")
    info(f"Done: {built} pages built in {CONFIG_DIR}/build")

    return built
