# -*- coding: utf-8 -*-
"""
Named rewrite rules used by the stripping pipeline.

Every rule pairs a matcher with a replacement and can be applied on its own:

    >>> INLINE_CODE.apply("run `make`")
    'run make'

Most rules are a compiled pattern plus a ``re.sub`` template. Constructs that
a backtracking pattern would match in quadratic (or worse) time on long runs
of a single character are matched by explicit code instead
(``AtxHeadingRule``, ``FencedCodeRule``, ``InlineLinkRule``,
``FootnoteRule``) or scan only the part of the text where a match can end
(``BoundedRule``).
"""
import bisect
import re
from collections import defaultdict
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable

from .exceptions import ConfigurationError

Replacement = str | Callable[[re.Match], str]

# Tag names accepted in the HTML allow-list
TAG_NAME_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9:._-]*")


@dataclass(frozen=True)
class RewriteRule:
    """A named pattern and the template (or callable) that replaces each match."""

    name: str
    pattern: re.Pattern
    replacement: Replacement = ""
    description: str = ""

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


@dataclass(frozen=True)
class BoundedRule(RewriteRule):
    """
    Rule whose matches always end with ``terminator``.

    Text after the last terminator can never be part of a match, so it is
    not scanned. For patterns such as ``~{3}.*\\n`` this turns a rescan to
    the end of the input for every candidate into a single pass.
    """

    terminator: str = "\n"

    def apply(self, text: str) -> str:
        last = text.rfind(self.terminator)
        if last == -1:
            return text
        end = last + len(self.terminator)
        return self.pattern.sub(self.replacement, text[:end]) + text[end:]


class AtxHeadingRule:
    """
    ATX heading: 1-6 ``#`` followed by required whitespace.

    The line is reduced to its text, without trailing whitespace or a
    closing ``#`` run. ``#NoSpace`` is not a heading and is returned as is.
    """

    name = "atx_heading"
    description = "'## Title ##' -> 'Title'"
    opener = re.compile(r"#{1,6}\s+")

    def apply(self, line: str) -> str:
        match = self.opener.match(line)
        if match is None:
            return line
        content = line[match.end():].rstrip()
        if content.endswith("#"):
            content = content.rstrip("#").rstrip()
        return content


class FencedCodeRule:
    """
    Fenced code delimited by backtick runs of equal length (3 or more).

    Runs are maximal: a closing fence must have exactly as many backticks as
    the opening one. When the block spans several lines, the opening fence
    line (with its info string) and the closing fence line are dropped; a
    block opened and closed on the same line keeps its inner text as is.
    Unmatched runs are left in place.
    """

    name = "fenced_code"
    description = "'```py\\ncode\\n```' -> 'code\\n'"
    backtick_run = re.compile(r"`{3,}")

    def apply(self, text: str) -> str:
        runs = list(self.backtick_run.finditer(text))
        if len(runs) < 2:
            return text

        by_length: dict[int, list[int]] = defaultdict(list)
        for index, run in enumerate(runs):
            by_length[len(run.group())].append(index)

        parts: list[str] = []
        position = 0
        index = 0
        while index < len(runs):
            opener = runs[index]
            candidates = by_length[len(opener.group())]
            slot = bisect.bisect_right(candidates, index)
            if slot == len(candidates):
                index += 1
                continue

            closer = runs[candidates[slot]]
            inner = text[opener.end():closer.start()]
            resume = closer.end()
            if "\n" in inner:
                inner, resume = self._drop_fence_lines(text, inner, resume)
            parts.append(text[position:opener.start()])
            parts.append(inner)
            position = resume
            index = candidates[slot] + 1
            # Skip runs swallowed by a dropped closing line
            while index < len(runs) and runs[index].start() < position:
                index += 1

        parts.append(text[position:])
        return "".join(parts)

    @staticmethod
    def _drop_fence_lines(text: str, inner: str, resume: int) -> tuple[str, int]:
        """Remove the info string line and a closing fence on its own line."""
        inner = inner[inner.index("\n") + 1:]

        last_newline = inner.rfind("\n")
        closer_indent = inner[last_newline + 1:]
        line_end = text.find("\n", resume)
        after_closer = text[resume:] if line_end == -1 else text[resume:line_end]
        if not closer_indent.strip() and not after_closer.strip():
            inner = inner[:last_newline + 1]
            resume = len(text) if line_end == -1 else line_end + 1
        return inner, resume


def _line_end(text: str, position: int) -> int:
    """Index of the newline ending the line at ``position``, or ``len(text)``."""
    end = text.find("\n", position)
    return len(text) if end == -1 else end


class InlineLinkRule:
    """
    Inline link ``[text](url)`` (or image ``![alt](url)``) within one line.

    The text ends at the first ``](`` after the opener and the url at the
    first ``)`` after that. If either is missing, no later opener on the same
    line can match, so scanning resumes on the next line.
    """

    def __init__(self, name: str, opener: str, render: Callable[[str, str], str], description: str = ""):
        self.name = name
        self.opener = opener
        self.render = render
        self.description = description

    def apply(self, text: str) -> str:
        parts: list[str] = []
        position = search = 0
        line_end = -1
        while True:
            start = text.find(self.opener, search)
            if start == -1:
                break
            if start > line_end:
                line_end = _line_end(text, start)

            label_start = start + len(self.opener)
            middle = text.find("](", label_start, line_end)
            close = -1 if middle == -1 else text.find(")", middle + 2, line_end)
            if close == -1:
                search = line_end + 1
                continue

            parts.append(text[position:start])
            parts.append(self.render(text[label_start:middle], text[middle + 2:close]))
            position = search = close + 1

        parts.append(text[position:])
        return "".join(parts)


class FootnoteRule:
    """
    Footnote marker ``[^label]``, with the rest of the line when it is
    followed by ``": "`` (the footnote definition).
    """

    name = "footnote"
    description = "'[^1]' or '[^1]: note' -> ''"
    opener = "[^"

    def apply(self, text: str) -> str:
        parts: list[str] = []
        position = search = 0
        line_end = -1
        while True:
            start = text.find(self.opener, search)
            if start == -1:
                break
            if start > line_end:
                line_end = _line_end(text, start)

            # The label holds at least one character, which may itself be "]"
            close = text.find("]", start + len(self.opener) + 1, line_end)
            if close == -1:
                search = line_end + 1
                continue

            end = close + 1
            if text.startswith(": ", end, line_end):
                end = line_end
            parts.append(text[position:start])
            position = search = end

        parts.append(text[position:])
        return "".join(parts)


# Escape Normalizer
ESCAPED_PUNCTUATION = RewriteRule(
    name="escaped_punctuation",
    pattern=re.compile(r"\\([\\`*_{}\[\]()#+\-.!])"),
    replacement=r"\1",
    description="'\\*' -> '*'",
)

# Horizontal-Rule Remover
HORIZONTAL_RULE = RewriteRule(
    name="horizontal_rule",
    pattern=re.compile(
        r"^ {0,3}((?:-[ \t]*){3,}|(?:_[ \t]*){3,}|(?:\*[ \t]*){3,})(?:\n+|$)",
        re.MULTILINE,
    ),
    description="'* * *' line and the newlines after it -> ''",
)

# GFM Normalizer
SETEXT_EQUALS = RewriteRule(
    name="setext_equals",
    pattern=re.compile(r"\n={2,}"),
    replacement="\n",
    description="'Title\\n=====' -> 'Title\\n'",
)
TILDE_FENCE_LINE = BoundedRule(
    name="tilde_fence_line",
    pattern=re.compile(r"~{3}.*\n"),
    description="'~~~' through the end of its line -> ''",
)
BACKTICK_FENCE_LINE = BoundedRule(
    name="backtick_fence_line",
    pattern=re.compile(r"`{3}.*\n"),
    description="'```' through the end of its line -> ''",
)
STRIKETHROUGH_DELIMITER = RewriteRule(
    name="strikethrough_delimiter",
    pattern=re.compile(r"~~"),
    description="'~~' -> ''",
)

# Abbreviation Remover
ABBREVIATION_DEFINITION = RewriteRule(
    name="abbreviation_definition",
    pattern=re.compile(r"^\*\[.*\]:.*$", re.MULTILINE),
    description="'*[HTML]: Hyper Text' -> ''",
)

# Reference/Footnote Remover
SETEXT_UNDERLINE = RewriteRule(
    name="setext_underline",
    pattern=re.compile(r"^[=-]{2,}\s*$", re.MULTILINE),
    description="line of '=' or '-' -> ''",
)
FOOTNOTE = FootnoteRule()
REFERENCE_DEFINITION = RewriteRule(
    name="reference_definition",
    pattern=re.compile(r"^\s{0,2}\[.*?\]: .*$", re.MULTILINE),
    description="'[id]: http://example.com' -> ''",
)

# Code Remover
INLINE_CODE = RewriteRule(
    name="inline_code",
    pattern=re.compile(r"`(.+?)`"),
    replacement=r"\1",
    description="'`code`' -> 'code'",
)
FENCED_CODE = FencedCodeRule()

# Line Processor
BLOCKQUOTE_MARKER = RewriteRule(
    name="blockquote_marker",
    pattern=re.compile(r"^[ \t]*>\s?"),
    description="'  > quote' -> 'quote'",
)
ATX_HEADING = AtxHeadingRule()

# Emphasis Resolver, applied in this order
EMPHASIS_RULES = (
    RewriteRule(
        name="strong_asterisk",
        pattern=re.compile(r"\*\*(?!\s)(.*?\S)\*\*", re.DOTALL),
        replacement=r"\1",
        description="'**bold**' -> 'bold'",
    ),
    RewriteRule(
        name="emphasis_asterisk",
        pattern=re.compile(r"\*(?!\s)(.*?\S)\*", re.DOTALL),
        replacement=r"\1",
        description="'*italic*' -> 'italic'",
    ),
    RewriteRule(
        name="strong_underscore",
        pattern=re.compile(r"__(?!\s)(.*?\S)__", re.DOTALL),
        replacement=r"\1",
        description="'__bold__' -> 'bold'",
    ),
    RewriteRule(
        name="emphasis_underscore",
        pattern=re.compile(r"_(?!\s)(.*?\S)_", re.DOTALL),
        replacement=r"\1",
        description="'_italic_' -> 'italic'",
    ),
    RewriteRule(
        name="strikethrough",
        pattern=re.compile(r"~{1,2}(.+?)~{1,2}"),
        replacement=r"\1",
        description="'~~gone~~' -> 'gone'",
    ),
)


def list_leader_rule(unicode_char: str | None = None) -> RewriteRule:
    """Bullet/ordinal marker rule; the marker is replaced by ``unicode_char`` if given."""
    if unicode_char:
        replacement: Replacement = lambda m: f"{m.group(1)}{unicode_char} "
    else:
        replacement = r"\1"
    return RewriteRule(
        name="list_leader",
        pattern=re.compile(r"^([ \t]*)(?:\d+\.|[*\-+])\s+", re.MULTILINE),
        replacement=replacement,
        description="'  - item' -> '  item'",
    )


@lru_cache(maxsize=64)
def html_tag_rule(tags_to_skip: frozenset[str] = frozenset()) -> BoundedRule:
    """
    Build the HTML tag rule, leaving tags named in ``tags_to_skip`` in place.

    Raises:
        ConfigurationError: a tag name cannot be used in the matching rule
    """
    if not tags_to_skip:
        return BoundedRule(
            name="html_tag",
            pattern=re.compile(r"<[^>]*>"),
            terminator=">",
            description="'<p>text</p>' -> 'text'",
        )

    for tag in tags_to_skip:
        if not isinstance(tag, str) or not TAG_NAME_PATTERN.fullmatch(tag):
            raise ConfigurationError(f"Invalid HTML tag name in allow-list: {tag!r}")

    names = "|".join(re.escape(tag) for tag in sorted(tags_to_skip))
    try:
        pattern = re.compile(rf"<(?!/?(?:{names})(?=>|\s[^>]*>))[^>]*>")
    except re.error as e:
        raise ConfigurationError(f"Cannot compile HTML allow-list {names!r}: {e}") from e

    return BoundedRule(
        name="html_tag",
        pattern=pattern,
        terminator=">",
        description=f"HTML tags except {', '.join(sorted(tags_to_skip))} -> ''",
    )


def image_rule(use_alt_text: bool = True) -> InlineLinkRule:
    """Image rule: ``![alt](url)`` becomes ``alt`` or nothing."""
    return InlineLinkRule(
        name="image",
        opener="![",
        render=(lambda alt, url: alt) if use_alt_text else (lambda alt, url: ""),
        description="'![alt](url)' -> 'alt'" if use_alt_text else "'![alt](url)' -> ''",
    )


def link_rule(use_url: bool = False) -> InlineLinkRule:
    """Inline link rule: ``[text](url)`` becomes ``text`` or ``url``."""
    return InlineLinkRule(
        name="link",
        opener="[",
        render=(lambda label, url: url) if use_url else (lambda label, url: label),
        description="'[text](url)' -> 'url'" if use_url else "'[text](url)' -> 'text'",
    )
