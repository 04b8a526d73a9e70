"""Front matter parsing and the markdown pipeline used for pages."""

from functools import lru_cache
from pathlib import Path

import frontmatter
import markdown

from .logging import warning

# Order matters: fenced code (from "extra") is stashed before media blocks run
MARKDOWN_EXTENSIONS = [
    "codehilite",
    "mdx_wikilink_plus",
    "extra",
    "smarty",
    "sane_lists",
    "toc",
    "mediablocks.markdown_ext",
]


def extension_configs(base_url: str) -> dict[str, dict]:
    """Per-extension settings; wikilinks resolve against ``base_url``."""
    return {
        "mdx_wikilink_plus": {
            "base_url": base_url,
            "end_url": "/",
            "url_whitespace": " ",
            "label_case": "none",
        },
        "codehilite": {"css_class": "highlight", "guess_lang": False},
        "toc": {
            "permalink": "#",
            "permalink_class": "header-anchor",
            "permalink_title": "Link to this section",
        },
    }


def parse_markdown_file(filepath: Path) -> tuple[dict, str]:
    """Read a document and split off its YAML front matter.

    Returns:
        Tuple of (metadata, markdown body). A document whose front matter
        cannot be parsed yields ``({}, "")`` and a warning.
    """
    try:
        post = frontmatter.load(str(filepath), encoding="utf-8")
    except Exception as e:
        warning(f"YAML parsing error in {filepath}: {e}")
        return {}, ""
    return dict(post.metadata), post.content


@lru_cache(maxsize=8)
def get_markdown_converter(base_url: str) -> markdown.Markdown:
    return markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs=extension_configs(base_url),
    )


def render_markdown(content: str, base_url: str = "/") -> str:
    """Render a page body to HTML, picture/figure callouts included."""
    return get_markdown_converter(base_url).reset().convert(content)
