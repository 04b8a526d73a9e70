"""Attribute allow-listing and HTML attribute escaping."""

import html
import re
from collections.abc import Iterable

from .tokenizer import tokenize

# Attribute names that may reach a wrapper element
ALLOWED_ATTRIBUTE_PATTERN = re.compile(
    r"(?:class|id|style|title|role|(?:aria|data)-[A-Za-z0-9:_-]+)"
)


def escape_attr(value: str) -> str:
    """Escape a value for use inside a double-quoted HTML attribute."""
    return html.escape(value, quote=False).replace('"', "&quot;")


def strip_quotes(value: str) -> str:
    """Remove one layer of matching single or double quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def is_allowed_attribute(key: str) -> bool:
    return ALLOWED_ATTRIBUTE_PATTERN.fullmatch(key) is not None


def sanitize_attributes(tokens_or_text: str | Iterable[str] | None) -> str:
    """Filter ``key`` / ``key=value`` tokens down to safe HTML attributes.

    Args:
        tokens_or_text: Pre-split tokens, or a raw string that is tokenized
            with quoted spans kept intact

    Returns:
        Serialized attributes joined by single spaces, e.g.
        ``class="wide hero" data-x="1"``. Keys outside the allow-list are
        dropped.
    """
    if tokens_or_text is None:
        return ""
    if isinstance(tokens_or_text, str):
        tokens = tokenize(tokens_or_text)
    else:
        tokens = list(tokens_or_text)

    attrs = []
    for token in tokens:
        if "=" in token:
            key, value = token.split("=", 1)
            if not is_allowed_attribute(key):
                continue
            attrs.append(f'{key}="{escape_attr(strip_quotes(value))}"')
        elif is_allowed_attribute(token):
            attrs.append(escape_attr(token))

    return " ".join(attrs)
