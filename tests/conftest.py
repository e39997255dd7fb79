# -*- coding: utf-8 -*-
"""
Pytest configuration and fixtures.
"""
import logging

import pytest

from markdown_stripper.pipeline import MarkdownStripper


@pytest.fixture
def stripper() -> MarkdownStripper:
    """Pipeline with default options."""
    return MarkdownStripper()


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level

    yield root_logger

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


@pytest.fixture
def sample_document() -> str:
    """Document mixing most of the supported syntax."""
    return (
        "\n## This is a heading ##\n\n"
        "This is a paragraph with [a link](http://www.disney.com/).\n\n"
        "### This is another heading\n\n"
        "In `Getting Started` we set up `something` foo.\n\n"
        "  * Some list\n"
        "  * With items\n"
        "    * Even indented"
    )
