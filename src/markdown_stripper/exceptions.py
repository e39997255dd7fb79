# -*- coding: utf-8 -*-
"""
Exceptions raised by the markdown stripper.
"""


class MarkdownStripperError(Exception):
    """Base class for stripper failures."""


class ConfigurationError(MarkdownStripperError, ValueError):
    """Options that cannot be validated or compiled into a rewrite rule."""
