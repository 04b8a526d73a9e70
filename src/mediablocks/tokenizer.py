"""Quote-aware tokenizing of picture/figure option strings.

Option strings are free-form text such as::

    --img class="rounded" --wrap class="wide hero" --picture decoding="async"

Quoted spans are atomic: whitespace and ``--`` markers inside them are plain
text. A quote character only toggles its own kind while the other kind is
closed, so ``"it's"`` is one double-quoted span. Malformed quoting never
raises; an unterminated quote simply runs to the end of the string.
"""

WRAP_MARKER = "--wrap"
PARENT_MARKER = "--parent"


class QuoteState:
    """Two-flag automaton tracking single- and double-quoted spans."""

    __slots__ = ("single", "double")

    def __init__(self):
        self.single = False
        self.double = False

    @property
    def active(self) -> bool:
        return self.single or self.double

    def feed(self, ch: str) -> None:
        if ch == "'" and not self.double:
            self.single = not self.single
        elif ch == '"' and not self.single:
            self.double = not self.double


def _at_token_start(text: str, i: int) -> bool:
    return i == 0 or text[i - 1].isspace()


def _is_wrap_marker(text: str, i: int) -> bool:
    """Check for a standalone ``--wrap`` token starting at ``i``."""
    if not text.startswith(WRAP_MARKER, i) or not _at_token_start(text, i):
        return False
    end = i + len(WRAP_MARKER)
    return end == len(text) or text[end].isspace()


def _find_segment_end(text: str, start: int) -> int:
    """Return the index of the next unquoted ``--`` token at or after ``start``."""
    quotes = QuoteState()
    for i in range(start, len(text)):
        if (
            not quotes.active
            and text.startswith("--", i)
            and _at_token_start(text, i)
        ):
            return i
        quotes.feed(text[i])
    return len(text)


def split_options(options_text: str | None, for_figure: bool) -> tuple[str, str]:
    """Separate ``--wrap`` segments from the pass-through options.

    Everything following a ``--wrap`` token up to the next unquoted
    ``--``-prefixed token is a wrap segment. Segments are collected into the
    wrapper attribute text. For pictures (``for_figure=False``) each segment
    is also folded back into the pass-through text as ``--parent <attrs>``,
    at the position where it appeared.

    Args:
        options_text: Option string from the block header (after ``|``)
        for_figure: True when the caller renders its own wrapper element

    Returns:
        Tuple of (pass_through_text, wrap_attributes_text)
    """
    if not options_text:
        return "", ""

    text = options_text
    pieces: list[str] = []
    wraps: list[str] = []
    quotes = QuoteState()
    chunk_start = 0
    i = 0

    while i < len(text):
        if not quotes.active and _is_wrap_marker(text, i):
            pieces.append(text[chunk_start:i])
            segment_start = i + len(WRAP_MARKER)
            segment_end = _find_segment_end(text, segment_start)
            segment = text[segment_start:segment_end].strip()
            if segment:
                wraps.append(segment)
                if not for_figure:
                    pieces.append(f"{PARENT_MARKER} {segment}")
            i = chunk_start = segment_end
            continue
        quotes.feed(text[i])
        i += 1

    pieces.append(text[chunk_start:])

    pass_through = " ".join(p.strip() for p in pieces if p.strip())
    return pass_through, " ".join(wraps)


def tokenize(text: str | None) -> list[str]:
    """Split on unquoted whitespace, keeping quote characters in the tokens.

    >>> tokenize('class="wide hero" hidden')
    ['class="wide hero"', 'hidden']
    """
    if not text:
        return []

    tokens: list[str] = []
    current: list[str] = []
    quotes = QuoteState()

    for ch in text:
        if ch.isspace() and not quotes.active:
            if current:
                tokens.append("".join(current))
                current = []
            continue
        quotes.feed(ch)
        current.append(ch)

    if current:
        tokens.append("".join(current))
    return tokens
