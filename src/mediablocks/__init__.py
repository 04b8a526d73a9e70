"""mediablocks - Obsidian picture/figure callouts for markdown sites."""

from .transform import transform

__version__ = "0.1.0"

__all__ = ["transform", "__version__"]
