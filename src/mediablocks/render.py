"""Expansion of picture/markdownify directives with Jinja2.

The block transformer only emits directive calls; this module evaluates them
with a Jinja2 environment whose globals are the ``picture`` and
``markdownify`` helpers. Only the directive spans the transformer produces
are evaluated, the rest of the document is left alone.

The reference ``picture`` helper understands the argument string::

    [preset] path [--alt text] [--img attrs] [--picture attrs] [--parent attrs]

and renders a ``<picture>`` element holding a single ``<img>``. Attributes
given with ``--parent`` land on the ``<picture>`` element.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import lru_cache

import markdown
from jinja2 import Environment

from .sanitize import escape_attr, is_allowed_attribute, strip_quotes
from .tokenizer import tokenize

DIRECTIVE_PATTERN = re.compile(
    r"""\{\{ (?:picture\('(?:[^'\\\n]|\\.)*'\)|markdownify\("(?:[^"\\\n]|\\.)*"\)) \}\}"""
)

OPTION_PATTERN = re.compile(r"(?:^|(?<=\s))--(alt|img|picture|parent)(?=\s|$)")
ATTRIBUTE_NAME_PATTERN = re.compile(r"[A-Za-z_:][-A-Za-z0-9_:.]*")
# Preset names are single lowercase words such as ``jpt`` or ``jpt-webp``
PRESET_PATTERN = re.compile(r"[a-z0-9][a-z0-9_-]*")

CAPTION_EXTENSIONS = ["extra", "smarty"]


@dataclass
class PictureArgs:
    path: str
    preset: str = ""
    alt: str = ""
    img_attrs: list[str] = field(default_factory=list)
    picture_attrs: list[str] = field(default_factory=list)


def _is_attribute_group(value: str) -> bool:
    tokens = tokenize(value)
    for token in tokens:
        key, sep, _ = token.partition("=")
        if not ATTRIBUTE_NAME_PATTERN.fullmatch(key):
            return False
        if not sep and not is_allowed_attribute(key):
            return False
    return bool(tokens)


def _option_markers(args: str) -> list[re.Match]:
    """Option markers that start real options.

    Alt text is free-form and may itself contain ``--img`` and friends.
    Only the run of attribute-only options at the end of the string counts
    after ``--alt``; any marker before that run belongs to the alt text.
    """
    markers = list(OPTION_PATTERN.finditer(args))
    alt_at = next((i for i, m in enumerate(markers) if m.group(1) == "alt"), None)
    if alt_at is None:
        return markers

    kept = len(markers)
    while kept > alt_at + 1:
        marker = markers[kept - 1]
        end = markers[kept].start() if kept < len(markers) else len(args)
        if marker.group(1) == "alt" or not _is_attribute_group(
            args[marker.end() : end]
        ):
            break
        kept -= 1
    return markers[: alt_at + 1] + markers[kept:]


def _split_head(head: str) -> tuple[str, str]:
    """Split ``[preset] path`` into (preset, path).

    Paths may contain spaces (``Pasted image 2024.png``), so the preset is
    taken to be at most the first word, and only when it looks like a
    preset name.
    """
    tokens = head.split()
    if len(tokens) > 1 and PRESET_PATTERN.fullmatch(tokens[0]):
        return tokens[0], " ".join(tokens[1:])
    return "", " ".join(tokens)


def parse_picture_args(args: str) -> PictureArgs:
    """Split a picture argument string into its parts."""
    options = _option_markers(args)
    head = args[: options[0].start()] if options else args

    preset, path = _split_head(head)
    parsed = PictureArgs(path=path, preset=preset)

    for current, following in zip(options, options[1:] + [None]):
        end = following.start() if following else len(args)
        value = args[current.end() : end].strip()
        match current.group(1):
            case "alt":
                parsed.alt = value
            case "img":
                parsed.img_attrs.extend(render_attributes(value))
            case "picture" | "parent":
                parsed.picture_attrs.extend(render_attributes(value))

    return parsed


def render_attributes(text: str) -> list[str]:
    """Serialize ``key=value`` tokens as escaped HTML attributes.

    Names that are not valid attribute names, and ``on*`` event handlers,
    are skipped.
    """
    attrs = []
    for token in tokenize(text):
        key, sep, value = token.partition("=")
        if not ATTRIBUTE_NAME_PATTERN.fullmatch(key) or key.lower().startswith("on"):
            continue
        if sep:
            attrs.append(f'{key}="{escape_attr(strip_quotes(value))}"')
        else:
            attrs.append(key)
    return attrs


def picture(args: str) -> str:
    """Render a ``<picture>`` element from a picture argument string.

    The ``--alt`` value arrives HTML-escaped and is inserted as is.
    """
    parsed = parse_picture_args(args)

    picture_attrs = []
    if parsed.preset:
        picture_attrs.append(f'data-preset="{escape_attr(parsed.preset)}"')
    picture_attrs.extend(parsed.picture_attrs)

    img_attrs = [f'src="{escape_attr(parsed.path)}"', f'alt="{parsed.alt}"']
    img_attrs.extend(parsed.img_attrs)

    open_tag = "<picture>"
    if picture_attrs:
        open_tag = f"<picture {' '.join(picture_attrs)}>"
    return f"{open_tag}<img {' '.join(img_attrs)}></picture>"


def markdownify(text: str) -> str:
    """Render a markdown snippet (figure captions) to HTML."""
    return markdown.markdown(text, extensions=CAPTION_EXTENSIONS)


DEFAULT_HELPERS: dict[str, Callable[[str], str]] = {
    "picture": picture,
    "markdownify": markdownify,
}


def _create_environment(helpers: dict[str, Callable[[str], str]]) -> Environment:
    env = Environment(autoescape=False)
    env.globals.update(helpers)
    return env


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    """Get the shared environment with the default helpers."""
    return _create_environment(DEFAULT_HELPERS)


def expand_directives(
    text: str, helpers: dict[str, Callable[[str], str]] | None = None
) -> str:
    """Evaluate every picture/markdownify directive in ``text``.

    Args:
        text: Output of the block transformer
        helpers: Optional replacements for the default helpers

    Returns:
        Text with each directive replaced by the helper's output. A directive
        that fails to evaluate is logged and left in place.
    """
    from .logging import error

    if not text or "{{" not in text:
        return text

    env = (
        _create_environment({**DEFAULT_HELPERS, **helpers})
        if helpers
        else get_environment()
    )

    def replace(match: re.Match) -> str:
        try:
            return env.from_string(match.group(0)).render()
        except Exception as e:
            error(f"Could not expand directive {match.group(0)[:60]}: {e}")
            return match.group(0)

    return DIRECTIVE_PATTERN.sub(replace, text)
