"""Recognition and extraction of picture/figure callouts and media lines.

Three block shapes are recognized, all anchored at a line start::

    > [!picture] jpt-webp | --img class="rounded"
    > ![[images/foo.png|Caption]]

    > [!figure] jpt-webp | --wrap class="wide"
    > ![[images/bar.jpg|Caption]]
    > Extra caption text.

    ![[images/baz.png]]
"""

import re
from dataclasses import dataclass
from enum import Enum


class BlockKind(Enum):
    """Kind of a recognized block."""

    PICTURE = "picture"
    FIGURE = "figure"
    BARE_MEDIA = "bareMedia"


PICTURE_BLOCK_PATTERN = re.compile(
    r"""
    ^[ \t]*>+[ \t]*\[!picture\][ \t]*(?P<header>[^\n]*)\n
    (?P<body>(?:[ \t]*>[^\n]*(?:\n|\Z))+)
    """,
    re.IGNORECASE | re.MULTILINE | re.VERBOSE,
)

FIGURE_BLOCK_PATTERN = re.compile(
    r"""
    ^[ \t]*>+[ \t]*\[!figure\][ \t]*(?P<header>[^\n]*)\n
    (?P<body>(?:[ \t]*>[^\n]*(?:\n|\Z))+)
    """,
    re.IGNORECASE | re.MULTILINE | re.VERBOSE,
)

BARE_MEDIA_PATTERN = re.compile(
    r"^[ \t]*(?P<body>!\[\[[^|\]\n]+?(?:\|[^\]\n]*?)?\]\])[ \t]*\r?(?:\n|\Z)",
    re.MULTILINE,
)

# Obsidian embed: ![[path]] or ![[path|caption]]
WIKILINK_IMAGE_PATTERN = re.compile(
    r"!\[\[(?P<path>[^|\]\n]+?)(?:\|(?P<caption>[^\]\n]*?))?\]\]"
)

QUOTE_PREFIX_PATTERN = re.compile(r"^[ \t]*>+[ \t]?", re.MULTILINE)


class TransformError(Exception):
    """A block could not be turned into a directive.

    ``severity`` is ``"warning"`` for blocks the author can fix (recognized
    but invalid markup) and ``"error"`` for unexpected failures.
    """

    severity = "error"


class MissingMediaError(TransformError):
    """A picture/figure block has no usable ``![[...]]`` reference."""

    severity = "warning"

    MESSAGES = {
        BlockKind.PICTURE: "Picture block without wikilink",
        BlockKind.FIGURE: "No valid wikilink found in figure block",
        BlockKind.BARE_MEDIA: "Media embed without a path",
    }

    def __init__(self, kind: BlockKind):
        self.kind = kind
        super().__init__(self.MESSAGES[kind])


@dataclass(frozen=True)
class BlockMatch:
    """One pattern match at the scanner cursor."""

    kind: BlockKind
    header: str
    raw_body: str
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class MediaReference:
    path: str
    caption: str = ""


@dataclass(frozen=True)
class ExtractedBlock:
    media: MediaReference
    additional_content: str = ""


def match_block(
    pattern: re.Pattern, kind: BlockKind, text: str, pos: int
) -> BlockMatch | None:
    """Match ``pattern`` exactly at ``pos`` and wrap the result."""
    m = pattern.match(text, pos)
    if not m:
        return None
    groups = m.groupdict()
    return BlockMatch(
        kind=kind,
        header=(groups.get("header") or "").strip(),
        raw_body=groups.get("body") or "",
        start=m.start(),
        end=m.end(),
        text=m.group(0),
    )


def strip_quote_prefix(body: str) -> str:
    """Remove the ``> `` prefix from every line of a callout body."""
    return QUOTE_PREFIX_PATTERN.sub("", body)


def extract_media(body: str) -> tuple[MediaReference, str] | None:
    """Find the first media embed in ``body``.

    Returns:
        Tuple of (media reference, body with the embed removed and trimmed),
        or None when the body holds no embed with a non-blank path
    """
    m = WIKILINK_IMAGE_PATTERN.search(body)
    if not m:
        return None
    path = m.group("path").strip()
    if not path:
        return None
    caption = (m.group("caption") or "").strip()
    remainder = (body[: m.start()] + body[m.end() :]).strip()
    return MediaReference(path=path, caption=caption), remainder


def extract_block(block: BlockMatch) -> ExtractedBlock:
    """Pull the media reference and leftover text out of a matched block.

    Raises:
        MissingMediaError: If the body contains no usable media reference
    """
    found = extract_media(strip_quote_prefix(block.raw_body))
    if found is None:
        raise MissingMediaError(block.kind)
    media, remainder = found
    return ExtractedBlock(media=media, additional_content=remainder)
