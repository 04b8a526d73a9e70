"""Post-processing of rendered HTML pages.

- Marks links to other hosts as external (class, target, rel)
- Moves leading heading permalinks after the heading text
- Converts Obsidian callout blockquotes into asides
"""

from pathlib import Path
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from .callouts import transform_callouts
from .config import Config

SPECIAL_SCHEMES = ("mailto:", "tel:", "javascript:")
EXTERNAL_REL_TOKENS = ("noopener", "noreferrer", "external")


def normalize_host(host: str | None) -> str | None:
    """Lowercase a host name and drop a leading ``www.``."""
    if not host:
        return None
    host = host.lower()
    return host[4:] if host.startswith("www.") else host


def site_host(site_url: str | None) -> str | None:
    """Normalized host of the configured site URL."""
    raw = (site_url or "").strip()
    if not raw:
        return None
    try:
        return normalize_host(urlsplit(raw).hostname)
    except ValueError:
        return None


def _absolute_host(href: str) -> str | None:
    try:
        return normalize_host(urlsplit(href).hostname)
    except ValueError:
        return None


def should_mark_external(href: str | None, own_host: str | None) -> bool:
    """Check whether a link points to another site.

    Fragments, special schemes and relative links are internal. Absolute
    and protocol-relative links are external unless their host matches the
    site's; a malformed absolute link counts as external.
    """
    if not href:
        return False
    if href.startswith("#") or href.startswith(SPECIAL_SCHEMES):
        return False

    if href.startswith(("http://", "https://")):
        host = _absolute_host(href)
    elif href.startswith("//"):
        host = _absolute_host(f"http:{href}")
    else:
        return False

    if host is None:
        return True
    if own_host:
        return host != own_host
    return True


def _add_token(element, attr_name: str, token: str) -> None:
    existing = element.get(attr_name, [])
    parts = existing.split() if isinstance(existing, str) else list(existing)
    if token not in parts:
        parts.append(token)
        element[attr_name] = parts


def mark_external_links(html: str, site_url: str | None = None) -> str:
    """Add ``class="external"``, ``target="_blank"`` and rel tokens to external links.

    Args:
        html: Rendered HTML
        site_url: Site URL; links to this host stay internal

    Returns:
        The rewritten HTML, or the input unchanged if nothing was marked
    """
    if not html or "href" not in html:
        return html

    soup = BeautifulSoup(html, "html.parser")
    own_host = site_host(site_url)
    modified = False

    for link in soup.find_all("a", href=True):
        href = link["href"].strip()
        if not href or link.has_attr("download"):
            continue
        if not should_mark_external(href, own_host):
            continue

        _add_token(link, "class", "external")
        if not link.get("target") or link.get("target") == "_self":
            link["target"] = "_blank"
        for token in EXTERNAL_REL_TOKENS:
            _add_token(link, "rel", token)
        modified = True

    return str(soup) if modified else html


def move_heading_permalinks(html: str) -> str:
    """Move a heading's leading ``#`` anchor after the heading text."""
    if not html or "<h" not in html:
        return html

    soup = BeautifulSoup(html, "html.parser")
    modified = False

    for heading in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"]):
        first = next(
            (c for c in heading.contents if not (isinstance(c, str) and not c.strip())),
            None,
        )
        if first is None or getattr(first, "name", None) != "a":
            continue
        if not first.get("href", "").startswith("#"):
            continue
        heading.append(first.extract())
        modified = True

    return str(soup) if modified else html


def postprocess_html(html: str, config: Config) -> str:
    """Apply the post-processing passes enabled in the config."""
    if config.postprocess.callouts:
        html = transform_callouts(html)
    if config.postprocess.heading_permalinks:
        html = move_heading_permalinks(html)
    if config.postprocess.external_links:
        html = mark_external_links(html, config.site.url)
    return html


def process_html_file(
    html_file: Path, config: Config, build_dir: Path | None = None
) -> bool:
    """Post-process a single HTML file in place.

    Returns:
        True if the file was modified, False otherwise
    """
    from .logging import debug, error

    try:
        content = html_file.read_text(encoding="utf-8")
        processed = postprocess_html(content, config)

        if processed != content:
            html_file.write_text(processed, encoding="utf-8")
            display_path = (
                html_file.relative_to(build_dir) if build_dir else html_file.name
            )
            debug(f"  Post-processed: {display_path}")
            return True
        return False

    except Exception as e:
        error(f"Processing {html_file}: {e}")
        return False
