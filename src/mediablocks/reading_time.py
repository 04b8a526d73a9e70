"""Reading time estimation for markdown documents.

Writes three keys into a page's metadata:

- ``reading_time_minutes`` (int)
- ``reading_time_seconds`` (int)
- ``reading_time`` (str), a localized label such as ``"5 min read"``

Labels for languages other than English come from the ``[reading_time.labels]``
config table::

    [reading_time.labels.ru]
    pattern = "{m} {unit}"
    units = { one = "минута", few = "минуты", many = "минут" }
"""

import math
import re

from .config import Config

MARKDOWN_IMAGE_PATTERN = re.compile(r"!\[[^\]]*\]\([^)]*\)")
MARKDOWN_LINK_PATTERN = re.compile(r"\[[^\]]*\]\([^)]*\)")
OBSIDIAN_IMAGE_PATTERN = re.compile(
    r"""
    !\[\[
      [^\]|\#]+\.(?:png|jpe?g|webp|gif|svg)   # file with image extension
      (?:\#[^\]|]+)?                          # optional #fragment
      (?:\|\s*[^\]]+)?                        # optional |alt or |size
    \]\]
    """,
    re.IGNORECASE | re.VERBOSE,
)
CODE_FENCE_PATTERN = re.compile(r"```([\s\S]*?)```")

# Applied in order; each match is replaced by a space
_STRIP_PATTERNS = [
    re.compile(r"```[\s\S]*?```"),
    re.compile(r"<pre[\s\S]*?</pre>", re.IGNORECASE),
    re.compile(r"<[^>]*>"),
    MARKDOWN_IMAGE_PATTERN,
    MARKDOWN_LINK_PATTERN,
    OBSIDIAN_IMAGE_PATTERN,
    re.compile(r"[#>*`~_\-]+"),
]

DEFAULT_WPM = 220
DEFAULT_LABEL = "min read"


def strip_readable(text: str) -> str:
    """Strip code, markup, images and links, leaving approximately readable text."""
    s = text or ""
    for pattern in _STRIP_PATTERNS:
        s = pattern.sub(" ", s)
    return s


def words_count(text: str) -> int:
    """Count whitespace-separated words. CJK text is not segmented."""
    return len(strip_readable(text).split())


def count_images(text: str) -> int:
    return len(MARKDOWN_IMAGE_PATTERN.findall(text)) + len(
        OBSIDIAN_IMAGE_PATTERN.findall(text)
    )


def count_code_lines(text: str) -> int:
    blocks = CODE_FENCE_PATTERN.findall(text)
    return len("\n".join(blocks).splitlines())


def estimate(
    text: str, wpm: int = DEFAULT_WPM, image_count: int = 0, code_lines: int = 0
) -> dict[str, int]:
    """Estimate reading time.

    Images cost 12 seconds for the first, one second less for each next one,
    and never less than 3 seconds (only the first 60 images count). Each
    line of code adds 2 seconds.

    Returns:
        Dict with ``words``, ``seconds`` and ``minutes`` (at least 1)
    """
    words = words_count(text)
    seconds = math.ceil(words / wpm * 60)

    image_penalty = sum(max(12 - i, 3) for i in range(min(image_count, 60)))
    seconds += image_penalty + code_lines * 2

    minutes = max(1, math.ceil(seconds / 60))
    return {"words": words, "seconds": seconds, "minutes": minutes}


def _plural_key(minutes: int, lang: str) -> str:
    if lang == "ru":
        rem100 = minutes % 100
        rem10 = minutes % 10
        if 11 <= rem100 <= 14:
            return "many"
        if rem10 == 1:
            return "one"
        if 2 <= rem10 <= 4:
            return "few"
        return "many"
    if lang in ("he", "iw"):
        return "one" if minutes == 1 else "many"
    return "other"


def label_for(minutes: int, lang: str, labels: dict[str, dict] | None = None) -> str:
    """Build a localized reading time label.

    Args:
        minutes: Estimated minutes
        lang: ISO 639-1 language code
        labels: Per-language ``{"pattern": ..., "units": {...}}`` tables

    Returns:
        Label such as ``"5 min read"``
    """
    m = int(minutes)
    lang = (lang or "en").lower()
    if lang == "en":
        return f"{m} {DEFAULT_LABEL}"

    i18n = (labels or {}).get(lang, {})
    pattern = i18n.get("pattern", "{m} {unit}")
    units = i18n.get("units", {})
    unit = units.get(_plural_key(m, lang)) or units.get("other") or DEFAULT_LABEL

    try:
        return pattern.format(m=m, unit=unit)
    except (KeyError, IndexError, ValueError):
        return f"{m} {DEFAULT_LABEL}"


def annotate(meta: dict, content: str, config: Config) -> dict:
    """Store reading time fields in ``meta`` and return it.

    Language precedence: front matter ``lang``, then ``[site] lang``, then
    English.
    """
    est = estimate(
        content,
        wpm=config.reading_time.wpm,
        image_count=count_images(content),
        code_lines=count_code_lines(content),
    )
    lang = meta.get("lang") or config.site.lang or "en"

    meta["reading_time_minutes"] = est["minutes"]
    meta["reading_time_seconds"] = est["seconds"]
    meta["reading_time"] = label_for(
        est["minutes"], str(lang), config.reading_time.labels
    )
    return meta
