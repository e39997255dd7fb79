# -*- coding: utf-8 -*-
"""
Markdown to plain text pipeline.

A fixed chain of text rewrite steps, each applied once to the output of the
previous one:

0. Escape Normalizer - unescape backslash-escaped punctuation
1. Horizontal-Rule Remover - delete rule lines
2. List-Leader Stripper - remove or replace bullet/ordinal markers (optional)
3. GFM Normalizer - setext underlines, fence lines, strikethrough (optional)
4. Abbreviation Remover - delete abbreviation definitions (optional)
5. HTML Tag Filter - remove tags outside the allow-list
6. Reference/Footnote Remover - footnotes and reference link definitions
7. Image Resolver - images become alt-text or nothing
8. Link Resolver - links become text or URL
9. Code Remover - unwrap fenced blocks and inline code
10. Line Processor - blockquote markers and ATX headings, line by line
11. Emphasis Resolver - bold, italic, underline and strikethrough delimiters
"""
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

from . import rules
from .config import settings
from .exceptions import MarkdownStripperError
from .logging_config import stage_ctx
from .models import StripOptions

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Result of stripping one document."""

    text: str
    steps_applied: list[str] = field(default_factory=list)
    durations_ms: dict[str, float] = field(default_factory=dict)
    error: str | None = None


class MarkdownStripper:
    """
    Markdown stripping pipeline bound to one set of options.

    Optional steps are skipped when their option is disabled. Instances hold
    no per-call state and can be shared.
    """

    def __init__(self, options: StripOptions | Mapping[str, Any] | None = None, **overrides: Any):
        self.options = StripOptions.merge(options, **overrides)

    def strip(self, markdown: str) -> str:
        """Return the plain text version of ``markdown``."""
        return self.process(markdown).text

    def process(self, markdown: str) -> PipelineResult:
        """
        Run every enabled step on ``markdown``.

        Returns:
            PipelineResult with the plain text and the steps applied. If a
            step fails and ``throw_error`` is off, the text is the original
            input and ``error`` describes the failure.
        """
        if not isinstance(markdown, str):
            raise TypeError(f"markdown must be str, got {type(markdown).__name__}")

        options = self.options
        result = PipelineResult(text=markdown)
        current = markdown

        try:
            # Step 0: Escape Normalizer (always first)
            current = self._run("escapes", self._step_escapes, current, result)

            # Step 1: Horizontal-Rule Remover
            current = self._run("horizontal_rules", self._step_horizontal_rules, current, result)

            # Step 2: List-Leader Stripper
            if options.strip_list_leaders:
                current = self._run("list_leaders", self._step_list_leaders, current, result)

            # Step 3: GFM Normalizer
            if options.gfm:
                current = self._run("gfm", self._step_gfm, current, result)

            # Step 4: Abbreviation Remover
            if options.abbr:
                current = self._run("abbreviations", self._step_abbreviations, current, result)

            # Step 5: HTML Tag Filter
            current = self._run("html_tags", self._step_html_tags, current, result)

            # Step 6: Reference/Footnote Remover
            current = self._run("references", self._step_references, current, result)

            # Step 7: Image Resolver (before links, images look like links)
            current = self._run("images", self._step_images, current, result)

            # Step 8: Link Resolver
            current = self._run("links", self._step_links, current, result)

            # Step 9: Code Remover
            current = self._run("code", self._step_code, current, result)

            # Step 10: Line Processor
            current = self._run("lines", self._step_lines, current, result)

            # Step 11: Emphasis Resolver
            current = self._run("emphasis", self._step_emphasis, current, result)

        except Exception as e:
            if options.throw_error:
                raise
            logger.warning(f"Markdown stripping failed, returning input unchanged: {e}")
            result.text = markdown
            result.error = str(e)
            return result

        result.text = current
        return result

    def _run(
            self,
            name: str,
            step: Callable[[str], str],
            text: str,
            result: PipelineResult,
    ) -> str:
        """Run one step, recording its name and duration."""
        token = stage_ctx.set(name)
        try:
            started = time.perf_counter()
            output = step(text)
            elapsed_ms = (time.perf_counter() - started) * 1000

            result.steps_applied.append(name)
            result.durations_ms[name] = elapsed_ms
            if elapsed_ms > settings.SLOW_STAGE_THRESHOLD_MS:
                logger.warning(
                    f"Slow stage {name}: {elapsed_ms:.1f} ms for {len(text)} chars"
                )
            else:
                logger.debug(f"Stage {name} done: {len(text)} -> {len(output)} chars")
        finally:
            stage_ctx.reset(token)
        return output

    def _step_escapes(self, text: str) -> str:
        """Step 0: ``\\#`` becomes a literal ``#``."""
        return rules.ESCAPED_PUNCTUATION.apply(text)

    def _step_horizontal_rules(self, text: str) -> str:
        """
        Step 1: Delete rule lines (3+ identical ``-``, ``_`` or ``*``).

        The newlines following the rule go with it; mixed lines such as
        ``--*`` are kept.
        """
        return rules.HORIZONTAL_RULE.apply(text)

    def _step_list_leaders(self, text: str) -> str:
        """Step 2: Remove list markers, keeping indentation."""
        return rules.list_leader_rule(self.options.list_unicode_char).apply(text)

    def _step_gfm(self, text: str) -> str:
        """
        Step 3: GitHub-flavored tweaks.

        Fence lines are removed one line at a time, without tracking whether
        a fence is open. Closing fences left behind are handled by the code
        step.
        """
        for rule in (
                rules.SETEXT_EQUALS,
                rules.TILDE_FENCE_LINE,
                rules.BACKTICK_FENCE_LINE,
                rules.STRIKETHROUGH_DELIMITER,
        ):
            text = rule.apply(text)
        return text

    def _step_abbreviations(self, text: str) -> str:
        """Step 4: Empty ``*[ABBR]: definition`` lines."""
        return rules.ABBREVIATION_DEFINITION.apply(text)

    def _step_html_tags(self, text: str) -> str:
        """
        Step 5: Remove HTML tags, keeping the text between them.

        Tags listed in ``html_tags_to_skip`` stay verbatim.
        """
        return rules.html_tag_rule(self.options.html_tags_to_skip).apply(text)

    def _step_references(self, text: str) -> str:
        """Step 6: Setext underlines, footnotes and reference definitions."""
        for rule in (
                rules.SETEXT_UNDERLINE,
                rules.FOOTNOTE,
                rules.REFERENCE_DEFINITION,
        ):
            text = rule.apply(text)
        return text

    def _step_images(self, text: str) -> str:
        return rules.image_rule(self.options.use_img_alt_text).apply(text)

    def _step_links(self, text: str) -> str:
        return rules.link_rule(self.options.replace_links_with_url).apply(text)

    def _step_code(self, text: str) -> str:
        """Step 9: Unwrap fenced code blocks, then inline code spans."""
        text = rules.FENCED_CODE.apply(text)
        return rules.INLINE_CODE.apply(text)

    def _step_lines(self, text: str) -> str:
        """
        Step 10: Strip blockquote markers and ATX headings on each line.

        The number of lines never changes.
        """
        lines = text.split("\n")
        processed = "\n".join(self._process_line(line) for line in lines)

        line_count = processed.count("\n") + 1
        if line_count != len(lines):
            raise MarkdownStripperError(
                f"Line processing changed the line count ({len(lines)} -> {line_count})"
            )
        return processed

    @staticmethod
    def _process_line(line: str) -> str:
        stripped = rules.BLOCKQUOTE_MARKER.apply(line)
        return rules.ATX_HEADING.apply(stripped)

    def _step_emphasis(self, text: str) -> str:
        """
        Step 11: Remove emphasis delimiters.

        A span is unwrapped only if its content starts and ends with a
        non-whitespace character: ``*word*`` strips, ``* word *`` does not.
        """
        for rule in rules.EMPHASIS_RULES:
            text = rule.apply(text)
        return text


# Pipeline with default options
markdown_stripper = MarkdownStripper()


def strip_markdown(
        markdown: str,
        options: StripOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
) -> str:
    """
    Convert markdown to plain text.

    Args:
        markdown: Markdown source
        options: StripOptions, or a mapping of option names (snake_case or camelCase)
        **overrides: Individual options, applied on top of ``options``

    Returns:
        The plain text. If processing fails and ``throw_error`` is off, the
        input is returned unchanged.

    Raises:
        ConfigurationError: options cannot be validated, or cannot be
            compiled while ``throw_error`` is on
    """
    if options is None and not overrides:
        return markdown_stripper.strip(markdown)
    return MarkdownStripper(options, **overrides).strip(markdown)
