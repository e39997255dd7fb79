# -*- coding: utf-8 -*-
"""
Tests for the individual rewrite rules.
"""
import dataclasses
import re

import pytest

from markdown_stripper import rules
from markdown_stripper.exceptions import ConfigurationError


class TestRewriteRule:
    """Tests for RewriteRule and BoundedRule."""

    def test_apply_uses_template(self):
        rule = rules.RewriteRule(name="digits", pattern=re.compile(r"(\d+)"), replacement=r"<\1>")
        assert rule.apply("a1b22") == "a<1>b<22>"

    def test_rules_are_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            rules.INLINE_CODE.name = "other"

    def test_bounded_rule_ignores_text_after_last_terminator(self):
        assert rules.TILDE_FENCE_LINE.apply("~~~js\ncode\n~~~") == "code\n~~~"

    def test_bounded_rule_without_terminator(self):
        assert rules.BACKTICK_FENCE_LINE.apply("```no newline") == "```no newline"

    @pytest.mark.parametrize("char", list("\\`*_{}[]()#+-.!"))
    def test_escaped_punctuation(self, char):
        assert rules.ESCAPED_PUNCTUATION.apply("\\" + char) == char

    def test_escaped_other_characters_untouched(self):
        assert rules.ESCAPED_PUNCTUATION.apply(r"\n \d \>") == r"\n \d \>"

    def test_inline_code(self):
        assert rules.INLINE_CODE.apply("run `make`") == "run make"

    def test_footnote_marker_and_definition(self):
        assert rules.FOOTNOTE.apply("a[^1] b\n[^1]: text") == "a b\n"

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("[^]] x", " x"),
            ("[^] x", "[^] x"),
            ("[^a\n]", "[^a\n]"),
            ("[^ [^n] end", " end"),
            ("[^a]:no space", ":no space"),
            ("x [^n]: def\nnext", "x \nnext"),
        ],
    )
    def test_footnote_edge_cases(self, text, expected):
        assert rules.FOOTNOTE.apply(text) == expected

    def test_reference_definition(self):
        assert rules.REFERENCE_DEFINITION.apply("  [id]: http://x.org") == ""
        assert rules.REFERENCE_DEFINITION.apply("[id](http://x.org)") == "[id](http://x.org)"

    def test_blockquote_marker(self):
        assert rules.BLOCKQUOTE_MARKER.apply("\t>  text") == " text"

    def test_emphasis_rule_order(self):
        names = [rule.name for rule in rules.EMPHASIS_RULES]
        assert names == [
            "strong_asterisk",
            "emphasis_asterisk",
            "strong_underscore",
            "emphasis_underscore",
            "strikethrough",
        ]


class TestAtxHeadingRule:
    """Tests for the ATX heading rule."""

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("# H", "H"),
            ("###### H6", "H6"),
            ("####### seven", "####### seven"),
            ("#NoSpace", "#NoSpace"),
            ("## Title ##  ", "Title"),
            ("## C#", "C"),
            ("## a # #", "a #"),
            ("##   ", ""),
            ("#\tTabbed", "Tabbed"),
            (" # indented", " # indented"),
        ],
    )
    def test_apply(self, line, expected):
        assert rules.ATX_HEADING.apply(line) == expected

    def test_long_inner_whitespace(self):
        line = "## a" + " " * 50_000 + "b ##"
        assert rules.ATX_HEADING.apply(line) == "a" + " " * 50_000 + "b"


class TestFencedCodeRule:
    """Tests for the fenced code rule."""

    def test_multi_line_block(self):
        assert rules.FENCED_CODE.apply("```\ncode\n```") == "code\n"

    def test_info_string_dropped(self):
        assert rules.FENCED_CODE.apply("```bash\nls -la\n```\nafter") == "ls -la\nafter"

    def test_single_line_block(self):
        assert rules.FENCED_CODE.apply("a ```x``` b") == "a x b"

    def test_fence_lengths_must_match(self):
        assert rules.FENCED_CODE.apply("````a```") == "````a```"

    def test_longer_closing_fence_is_not_a_closer(self):
        assert rules.FENCED_CODE.apply("```\ncode\n````") == "```\ncode\n````"

    def test_shorter_runs_inside_block_are_content(self):
        text = "````\n```\ninner\n```\n````"
        assert rules.FENCED_CODE.apply(text) == "```\ninner\n```\n"

    def test_closing_fence_after_text(self):
        assert rules.FENCED_CODE.apply("```py\nprint()```\nafter") == "print()\nafter"

    def test_unclosed_fence_untouched(self):
        assert rules.FENCED_CODE.apply("```\nno end") == "```\nno end"

    def test_several_blocks(self):
        text = "```\na\n```\ntext\n```\nb\n```"
        assert rules.FENCED_CODE.apply(text) == "a\ntext\nb\n"


class TestRuleFactories:
    """Tests for option-dependent rules."""

    def test_list_leader_rule(self):
        assert rules.list_leader_rule().apply("* x\n  2. y") == "x\n  y"
        assert rules.list_leader_rule("-").apply("1. x") == "- x"

    def test_image_and_link_rules(self):
        assert rules.image_rule(True).apply("![a](b)") == "a"
        assert rules.image_rule(False).apply("![a](b)") == ""
        assert rules.link_rule(False).apply("[a](b)") == "a"
        assert rules.link_rule(True).apply("[a](b)") == "b"

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("[[a](b)", "[a"),
            ("[](x) [a] (b)", " [a] (b)"),
            ("[a](b)c)", "ac)"),
            ("[a](b\n)", "[a](b\n)"),
            ("[a\n[b](c)", "[a\nb"),
            ("[a](\n[b](c)", "[a](\nb"),
            ("[x](y) [a](b) [c](", "x a [c]("),
        ],
    )
    def test_link_rule_stays_on_one_line(self, text, expected):
        assert rules.link_rule().apply(text) == expected

    def test_image_rule_needs_bang_opener(self):
        assert rules.image_rule().apply("[a](b) ![c](d)") == "[a](b) c"

    def test_html_rule_without_allow_list(self):
        assert rules.html_tag_rule().apply('<p class="x">a</p>') == "a"

    def test_html_rule_is_cached(self):
        tags = frozenset({"sup"})
        assert rules.html_tag_rule(tags) is rules.html_tag_rule(frozenset({"sup"}))

    @pytest.mark.parametrize("tag", ["my-tag", "svg:rect", "h1", "x.y"])
    def test_html_rule_accepts_tag_names(self, tag):
        rule = rules.html_tag_rule(frozenset({tag}))
        assert rule.apply(f"<{tag}>a</{tag}><i>b</i>") == f"<{tag}>a</{tag}>b"

    @pytest.mark.parametrize("tag", ["", "b(", "a b", "<p>", "a|b", "1st", 3])
    def test_html_rule_rejects_bad_tag_names(self, tag):
        with pytest.raises(ConfigurationError):
            rules.html_tag_rule(frozenset({tag}))
