"""Configuration for mediablocks projects.

A project is a vault directory holding ``.mediablocks/config.toml``. Every
section maps onto a dataclass; missing keys keep their defaults and unknown
keys produce a warning with a suggestion for likely typos.
"""

import difflib
import sys
import tomllib
from collections.abc import Callable
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

CONFIG_DIR = ".mediablocks"
CONFIG_FILE = "config.toml"


def suggest_key(key: str, valid_keys: set[str]) -> str | None:
    """Closest valid key for a probable typo, if any."""
    matches = difflib.get_close_matches(key.lower(), sorted(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def warn_unknown_keys(
    data: dict, valid_keys: set[str], section: str, config_path: Path | None = None
) -> None:
    """Print a warning to stderr for every key not in ``valid_keys``."""
    location = f" in {config_path}" if config_path else ""
    for key in sorted(set(data) - valid_keys):
        msg = f"Warning: Unknown config key '{key}' in [{section}]{location}"
        suggestion = suggest_key(key, valid_keys)
        if suggestion:
            msg += f". Did you mean '{suggestion}'?"
        print(msg, file=sys.stderr)


def _normalize_extensions(extensions: list[str]) -> list[str]:
    """Lowercase extensions and make sure each starts with a dot."""
    return ["." + e.lower().lstrip(".") for e in extensions]


def _lowercase_keys(table: dict) -> dict:
    return {k.lower(): v for k, v in table.items()}


@dataclass
class SiteConfig:
    """Site-level configuration."""

    name: str = "My Site"
    url: str = "https://example.com"
    lang: str = "en"


@dataclass
class BuildConfig:
    """Build-related configuration."""

    ignored_folders: list[str] = field(default_factory=lambda: ["_private"])
    # Documents the media-block pass applies to
    extensions: list[str] = field(default_factory=lambda: [".md", ".markdown"])
    assets_dir: str = "assets"
    require_public: bool = False


@dataclass
class PostprocessConfig:
    """HTML post-processing passes."""

    external_links: bool = True
    heading_permalinks: bool = True
    callouts: bool = True


@dataclass
class ReadingTimeConfig:
    """Reading time estimation.

    ``labels`` maps a language code to ``{"pattern": "{m} {unit}",
    "units": {"one": ..., "few": ..., "many": ..., "other": ...}}``.
    """

    wpm: int = 220
    labels: dict[str, dict] = field(default_factory=dict)


# Per-field normalizers applied after loading a section
FIELD_NORMALIZERS: dict[str, dict[str, Callable]] = {
    "build": {"extensions": _normalize_extensions},
    "reading_time": {"labels": _lowercase_keys},
}


def load_section(section: str, current, data: dict, config_path: Path | None = None):
    """Overlay a TOML table onto a section dataclass instance.

    Returns:
        A new instance; ``current`` is not modified
    """
    valid_keys = {f.name for f in fields(current)}
    warn_unknown_keys(data, valid_keys, section, config_path)

    normalizers = FIELD_NORMALIZERS.get(section, {})
    values = {}
    for key in valid_keys & set(data):
        value = data[key]
        if key in normalizers:
            value = normalizers[key](value)
        values[key] = value
    return replace(current, **values)


@dataclass
class Config:
    """Main configuration container."""

    site: SiteConfig = field(default_factory=SiteConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    postprocess: PostprocessConfig = field(default_factory=PostprocessConfig)
    reading_time: ReadingTimeConfig = field(default_factory=ReadingTimeConfig)

    # Set by load()
    vault_path: Path | None = None
    config_path: Path | None = None

    SECTIONS = ("site", "build", "postprocess", "reading_time")

    @classmethod
    def load(cls, config_path: Path) -> "Config":
        """Load configuration from a TOML file.

        A missing file yields the defaults. The vault is the directory that
        contains ``.mediablocks/``.

        Raises:
            tomllib.TOMLDecodeError: If the file is not valid TOML
        """
        config = cls(config_path=config_path, vault_path=config_path.parent.parent)
        if not config_path.exists():
            return config

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        warn_unknown_keys(data, set(cls.SECTIONS), "top-level", config_path)

        for section in cls.SECTIONS:
            if section in data:
                current = getattr(config, section)
                setattr(
                    config,
                    section,
                    load_section(section, current, data[section], config_path),
                )

        return config

    @classmethod
    def find_and_load(cls, start_path: Path | None = None) -> "Config":
        """Find and load the nearest project config.

        Raises:
            FileNotFoundError: If no .mediablocks/config.toml is found
        """
        config_path = cls.find_config(start_path or Path.cwd())
        if config_path is None:
            raise FileNotFoundError(
                f"No {CONFIG_DIR}/{CONFIG_FILE} found. Run 'mediablocks init' first."
            )
        return cls.load(config_path)

    @staticmethod
    def find_config(start_path: Path) -> Path | None:
        """Look for .mediablocks/config.toml in start_path and its parents."""
        start = start_path.resolve()
        for directory in (start, *start.parents):
            candidate = directory / CONFIG_DIR / CONFIG_FILE
            if candidate.exists():
                return candidate
        return None

    def get_build_dir(self) -> Path:
        return (self.vault_path or Path.cwd()) / CONFIG_DIR / "build"

    def get_templates_dir(self) -> Path | None:
        """User template overrides, if the project has any."""
        if not self.vault_path:
            return None
        templates_dir = self.vault_path / CONFIG_DIR / "templates"
        return templates_dir if templates_dir.exists() else None

    def to_template_context(self) -> dict:
        """Site values exposed to page templates."""
        return {
            "site_name": self.site.name,
            "site_url": self.site.url,
            "site_lang": self.site.lang,
        }
