"""
Markdown extension that renders Obsidian picture/figure callouts.
Rewrites the callouts into directives and expands them before raw HTML
blocks are collected, so the resulting <figure>/<picture> markup passes
through the converter untouched.
"""

from markdown import Extension
from markdown.preprocessors import Preprocessor

from .logging import ComponentLogger
from .render import expand_directives
from .transform import transform


class MediaBlocksPreprocessor(Preprocessor):
    """Preprocessor converting media callouts to HTML."""

    def __init__(self, md=None, logger=None):
        super().__init__(md)
        self.logger = logger if logger is not None else ComponentLogger()

    def run(self, lines):
        text = "\n".join(lines)
        text = transform(text, logger=self.logger)
        text = expand_directives(text)
        return text.split("\n")


class MediaBlocksExtension(Extension):
    """Markdown extension for picture/figure callouts."""

    def extendMarkdown(self, md):
        """Register the preprocessor with markdown."""
        processor = MediaBlocksPreprocessor(md)
        # After whitespace normalization (30), before raw HTML blocks (20)
        md.preprocessors.register(processor, "mediablocks", 25)


def makeExtension(**kwargs):
    """Entry point for markdown extension."""
    return MediaBlocksExtension(**kwargs)
