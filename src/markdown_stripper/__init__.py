# -*- coding: utf-8 -*-
"""
Markdown Stripper - convert markdown-formatted text to plain text.
"""
__version__ = "1.0.0"

from .exceptions import ConfigurationError, MarkdownStripperError  # noqa: E402
from .models import StripOptions  # noqa: E402
from .pipeline import MarkdownStripper, PipelineResult, strip_markdown  # noqa: E402

__all__ = [
    "ConfigurationError",
    "MarkdownStripper",
    "MarkdownStripperError",
    "PipelineResult",
    "StripOptions",
    "strip_markdown",
    "__version__",
]
