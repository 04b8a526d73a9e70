"""Assembly of Jinja directives for pictures and figures.

Three escaping layers are involved, applied in this order:

1. HTML attribute escaping of individual values (the alt text, wrapper
   attributes), since the picture helper inserts them into HTML as is.
2. Single-quoted Jinja string literal escaping of the fully assembled
   picture argument string.
3. Double-quoted Jinja string literal escaping of the figure caption payload,
   which is markdown source and is never HTML-escaped.
"""

import posixpath
import re
from dataclasses import dataclass

from .blocks import ExtractedBlock, MediaReference
from .sanitize import escape_attr, sanitize_attributes
from .tokenizer import split_options

FIGCAPTION_CLASS = "figure-caption"

_EXTENSION_PATTERN = re.compile(r"\.[^.]+$")


@dataclass(frozen=True)
class HeaderParts:
    preset: str | None
    options: str | None


@dataclass(frozen=True)
class FigureComponents:
    picture_args: str
    figure_attrs: str
    caption_payload: str


def split_header(header: str | None) -> HeaderParts:
    """Split a block header on the first ``|`` into preset and options.

    ``options`` is None when the header has no ``|`` at all, and an empty
    string when the ``|`` is followed by nothing.
    """
    header = (header or "").strip()
    if "|" not in header:
        return HeaderParts(preset=header or None, options=None)
    preset, options = header.split("|", 1)
    return HeaderParts(preset=preset.strip() or None, options=options.strip())


def alt_from_filename(path: str) -> str:
    """Derive alt text from a file name: ``assets/my_image-01.png`` -> ``my image 01``."""
    name = posixpath.basename(path.strip())
    name = _EXTENSION_PATTERN.sub("", name)
    return name.replace("_", " ").replace("-", " ").strip()


def escape_single_quoted(value: str) -> str:
    """Escape text for a single-quoted Jinja string literal."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def escape_double_quoted(value: str) -> str:
    """Escape text for a double-quoted Jinja string literal kept on one line."""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\r", "\\r")
        .replace("\n", "\\n")
    )


def build_picture_args(
    header: str | None, media: MediaReference, for_figure: bool
) -> str:
    """Assemble ``[preset] path --alt <alt> [options]`` for the picture helper."""
    parts = split_header(header)
    pass_through, _wrap = split_options(parts.options, for_figure)

    args = []
    if parts.preset:
        args.append(parts.preset)
    args.append(media.path.strip())

    alt = media.caption or alt_from_filename(media.path)
    if alt:
        args.extend(["--alt", escape_attr(alt)])

    if pass_through:
        args.append(pass_through)

    return " ".join(args)


def build_caption_payload(caption: str, additional_content: str) -> str:
    """Join caption and extra body text as markdown paragraphs."""
    return "\n\n".join(p for p in (caption.strip(), additional_content.strip()) if p)


def build_figure_components(
    header: str | None, media: MediaReference, additional_content: str
) -> FigureComponents:
    parts = split_header(header)
    _pass_through, wrap = split_options(parts.options, for_figure=True)
    return FigureComponents(
        picture_args=build_picture_args(header, media, for_figure=True),
        figure_attrs=sanitize_attributes(wrap),
        caption_payload=build_caption_payload(media.caption, additional_content),
    )


def picture_directive(args: str) -> str:
    return "{{ picture('" + escape_single_quoted(args) + "') }}"


def markdownify_directive(payload: str) -> str:
    return '{{ markdownify("' + escape_double_quoted(payload) + '") }}'


def render_picture(header: str | None, extracted: ExtractedBlock) -> str:
    """Directive text for a picture block or a bare media line."""
    return picture_directive(
        build_picture_args(header, extracted.media, for_figure=False)
    )


def render_figure(header: str | None, extracted: ExtractedBlock) -> str:
    """HTML figure wrapping a picture directive and an optional caption."""
    components = build_figure_components(
        header, extracted.media, extracted.additional_content
    )

    open_tag = (
        f"<figure {components.figure_attrs}>" if components.figure_attrs else "<figure>"
    )
    lines = [open_tag, f" {picture_directive(components.picture_args)}"]
    if components.caption_payload:
        lines.append(
            f' <figcaption class="{FIGCAPTION_CLASS}">'
            f"{markdownify_directive(components.caption_payload)}</figcaption>"
        )
    lines.append("</figure>")
    return "\n".join(lines)
