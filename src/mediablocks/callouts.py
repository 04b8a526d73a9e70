"""Conversion of rendered Obsidian callouts into accessible asides.

A blockquote whose first paragraph starts with ``[!type]`` becomes::

    <aside class="callout type" data-callout="type" role="note"
           aria-labelledby="type-1a2b3c4d5e6f">
      <h4 class="callout-title" id="type-1a2b3c4d5e6f">
        <span class="callout-icon" aria-hidden="true"></span>Title
      </h4>
      <p>body...</p>
    </aside>

The title is the text before the first line break of the first paragraph,
or the capitalized type when there is none.
"""

import hashlib
import re

from bs4 import BeautifulSoup, Tag

# Soft hyphen variants a typographer may have inserted into the marker
SOFT_HYPHEN_PATTERN = re.compile(r"\u00ad|&shy;|&#173;")
MARKER_PREFIX_PATTERN = re.compile(r"\A\s*\[![^\]]+\]")
MARKER_PATTERN = re.compile(r"\A\s*\[!([A-Za-z0-9_-]+)\]\s*(.*)\Z", re.DOTALL)
MARKER_STRIP_PATTERN = re.compile(r"\A\s*\[![^\]]+\][^\S\n]*")
TITLE_SEPARATOR_PATTERN = re.compile(r"<br\s*/?>|\r?\n")


def generate_callout_id(content: str, callout_type: str = "warning") -> str:
    """Stable id derived from the callout type and content."""
    digest = hashlib.sha256(f"{callout_type}:{content}".encode("utf-8")).hexdigest()
    return f"{callout_type}-{digest[:12]}"


def _first_element(tag: Tag) -> Tag | None:
    for child in tag.children:
        if isinstance(child, Tag):
            return child
        if str(child).strip():
            return None
    return None


def _parse_fragment(html: str) -> list:
    return list(BeautifulSoup(html, "html.parser").contents)


def _build_aside(
    soup: BeautifulSoup, callout_type: str, title_html: str, callout_id: str
) -> Tag:
    aside = soup.new_tag("aside")
    aside["class"] = ["callout", callout_type]
    aside["data-callout"] = callout_type
    aside["role"] = "note"
    aside["aria-labelledby"] = callout_id

    title = soup.new_tag("h4")
    title["class"] = ["callout-title"]
    title["id"] = callout_id

    icon = soup.new_tag("span")
    icon["class"] = ["callout-icon"]
    icon["aria-hidden"] = "true"

    title.append(icon)
    for node in _parse_fragment(title_html):
        title.append(node)
    aside.append(title)
    return aside


def transform_callouts(html: str) -> str:
    """Replace callout blockquotes with ``<aside>`` elements.

    Args:
        html: Rendered HTML document or fragment

    Returns:
        The rewritten HTML, or the input unchanged if it holds no callouts
    """
    if not html or "[!" not in html:
        return html

    soup = BeautifulSoup(html, "html.parser")
    changed = False

    for blockquote in soup.find_all("blockquote"):
        first = _first_element(blockquote)
        if first is None or first.name != "p":
            continue

        first_html = first.decode_contents()

        # Match against a marker with soft hyphens removed, keep the rest as is
        prefix = MARKER_PREFIX_PATTERN.match(first_html)
        if prefix:
            cleaned = SOFT_HYPHEN_PATTERN.sub("", prefix.group(0))
            match_html = cleaned + first_html[prefix.end() :]
        else:
            match_html = first_html

        m = MARKER_PATTERN.match(match_html)
        if not m:
            continue

        callout_type = m.group(1).lower()
        remainder = MARKER_STRIP_PATTERN.sub("", first_html, count=1)

        # Only a line break makes the first line a title
        separator = TITLE_SEPARATOR_PATTERN.search(remainder)
        if separator:
            title_html = remainder[: separator.start()].strip()
            body_html = remainder[separator.end() :]
            if not title_html:
                title_html = callout_type.capitalize()
        else:
            title_html = callout_type.capitalize()
            body_html = remainder

        callout_id = generate_callout_id(remainder, callout_type)
        aside = _build_aside(soup, callout_type, title_html, callout_id)

        first.decompose()

        if body_html.strip():
            for node in _parse_fragment(f"<p>{body_html}</p>"):
                aside.append(node)

        for child in list(blockquote.children):
            aside.append(child.extract())

        blockquote.replace_with(aside)
        changed = True

    return str(soup) if changed else html
