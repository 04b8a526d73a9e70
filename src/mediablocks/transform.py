"""Single-pass rewriting of media callouts into Jinja directives.

The scanner walks the document once, left to right. At every line start it
tries the block handlers in order (picture block, figure block, bare media
line); the first match is replaced by its directive and scanning resumes
after it. Lines that match nothing are copied unchanged.

A block that cannot be converted is never dropped or half-written: the
original text is emitted and the problem is reported through the optional
logger.
"""

import re
import traceback
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from .blocks import (
    BARE_MEDIA_PATTERN,
    FIGURE_BLOCK_PATTERN,
    PICTURE_BLOCK_PATTERN,
    BlockKind,
    BlockMatch,
    TransformError,
    extract_block,
    match_block,
)
from .directives import render_figure, render_picture

COMPONENT = "MediaBlocks"


class TransformLogger(Protocol):
    def warn(self, component: str, message: str) -> None: ...

    def error(self, component: str, message: str) -> None: ...

    def debug(self, component: str, message: Callable[[], str]) -> None: ...


@dataclass(frozen=True)
class BlockResult:
    """Outcome of converting one block: replacement text or an error."""

    text: str | None = None
    error: TransformError | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


def render_block(block: BlockMatch) -> str:
    """Convert a matched block into its directive text.

    Raises:
        TransformError: If the block carries no usable media reference
    """
    extracted = extract_block(block)
    match block.kind:
        case BlockKind.PICTURE | BlockKind.BARE_MEDIA:
            return render_picture(block.header, extracted)
        case BlockKind.FIGURE:
            return render_figure(block.header, extracted)
    raise TransformError(f"Unsupported block kind: {block.kind}")


@dataclass(frozen=True)
class BlockHandler:
    kind: BlockKind
    pattern: re.Pattern
    render: Callable[[BlockMatch], str] = render_block

    def match(self, text: str, pos: int) -> BlockMatch | None:
        return match_block(self.pattern, self.kind, text, pos)

    def run(self, block: BlockMatch) -> BlockResult:
        try:
            return BlockResult(text=self.render(block))
        except TransformError as e:
            return BlockResult(error=e)
        except Exception as e:
            detail = "".join(traceback.format_exception(e, limit=-3)).strip()
            return BlockResult(
                error=TransformError(f"{type(e).__name__}: {e}"), detail=detail
            )


# Order matters: the first handler that matches at a position wins.
DEFAULT_HANDLERS: tuple[BlockHandler, ...] = (
    BlockHandler(BlockKind.PICTURE, PICTURE_BLOCK_PATTERN),
    BlockHandler(BlockKind.FIGURE, FIGURE_BLOCK_PATTERN),
    BlockHandler(BlockKind.BARE_MEDIA, BARE_MEDIA_PATTERN),
)


def _line_number(text: str, pos: int) -> int:
    return text.count("\n", 0, pos) + 1


def _report(
    logger: TransformLogger | None, text: str, block: BlockMatch, result: BlockResult
) -> None:
    if logger is None:
        return
    where = f"{block.kind.value} block at line {_line_number(text, block.start)}"
    if result.error.severity == "warning":
        logger.warn(COMPONENT, f"{result.error} ({where}), left unchanged")
    else:
        message = f"Failed to transform {where}: {result.error}"
        if result.detail:
            message += f"\n{result.detail}"
        logger.error(COMPONENT, message)


def transform(
    text: str | None,
    logger: TransformLogger | None = None,
    handlers: tuple[BlockHandler, ...] = DEFAULT_HANDLERS,
) -> str | None:
    """Rewrite picture/figure callouts and bare media lines in a document.

    Args:
        text: Raw markdown source. None is returned as None.
        logger: Optional diagnostics sink with ``warn``/``error``/``debug``
            methods taking a component name. Without one, problems are
            silently left in place.
        handlers: Block handlers tried in order at each line start

    Returns:
        The rewritten document

    Raises:
        TypeError: If ``text`` is neither None nor a string
    """
    if text is None:
        return None
    if not isinstance(text, str):
        raise TypeError(f"transform() expects str, got {type(text).__name__}")
    if not text:
        return text

    output: list[str] = []
    pos = 0
    length = len(text)

    while pos < length:
        for handler in handlers:
            block = handler.match(text, pos)
            if block is not None:
                break
        else:
            # Nothing starts on this line; copy it through
            newline = text.find("\n", pos)
            end = length if newline == -1 else newline + 1
            output.append(text[pos:end])
            pos = end
            continue

        result = handler.run(block)
        if result.ok:
            if logger is not None:
                logger.debug(
                    COMPONENT,
                    lambda block=block, result=result: (
                        f"{block.kind.value} block at line "
                        f"{_line_number(text, block.start)} -> {result.text}"
                    ),
                )
            output.append(f"\n{result.text}\n\n")
        else:
            _report(logger, text, block, result)
            output.append(block.text)
        pos = block.end

    return "".join(output)
