"""Tests for aliasgen.frontmatter: YAML frontmatter helpers."""

import pytest

from aliasgen.frontmatter import (
    parse_frontmatter,
    render_frontmatter,
    split_frontmatter,
    strip_frontmatter,
)


class TestSplitFrontmatter:
    def test_block_and_body(self):
        raw, body = split_frontmatter("---\naliases: [a]\n---\nBody\n")
        assert raw == "aliases: [a]\n"
        assert body == "Body\n"

    def test_no_block(self):
        assert split_frontmatter("Body") == (None, "Body")

    def test_empty_block(self):
        assert split_frontmatter("---\n---\nBody") == ("", "Body")

    def test_block_closing_at_end_of_text(self):
        assert split_frontmatter("---\na: 1\n---") == ("a: 1\n", "")

    def test_unclosed_block_is_body(self):
        text = "---\na: 1\nBody"
        assert split_frontmatter(text) == (None, text)

    def test_must_start_at_beginning(self):
        text = "\n---\na: 1\n---\nBody"
        assert strip_frontmatter(text) == text

    def test_opening_fence_with_trailing_space_is_body(self):
        text = "---  \na: 1\n---\nBody"
        assert split_frontmatter(text) == (None, text)

    def test_closing_fence_with_trailing_space_does_not_close(self):
        text = "---\na: 1\n---\t\nBody"
        assert split_frontmatter(text) == (None, text)

    def test_crlf(self):
        assert strip_frontmatter("---\r\na: 1\r\n---\r\nBody") == "Body"


class TestParseFrontmatter:
    def test_mapping(self):
        meta, body = parse_frontmatter("---\naliases:\n  - Лесок\ntags: les\n---\nBody")
        assert meta == {"aliases": ["Лесок"], "tags": "les"}
        assert body == "Body"

    def test_no_block(self):
        assert parse_frontmatter("Body") == ({}, "Body")

    def test_empty_block(self):
        assert parse_frontmatter("---\n---\nBody") == ({}, "Body")

    def test_not_a_mapping(self):
        with pytest.raises(ValueError, match="not a mapping"):
            parse_frontmatter("---\n- a\n- b\n---\nBody")

    def test_invalid_yaml(self):
        with pytest.raises(ValueError, match="Invalid YAML"):
            parse_frontmatter("---\na: [unclosed\n---\nBody")


class TestRenderFrontmatter:
    def test_keeps_key_order_and_unicode(self):
        text = render_frontmatter({"title": "Лес", "aliases": ["Лесок"]}, "Body\n")
        assert text == "---\ntitle: Лес\naliases:\n- Лесок\n---\nBody\n"

    def test_parses_back(self):
        meta = {"aliases": ["Оке", "Окой"], "n": 1}
        assert parse_frontmatter(render_frontmatter(meta, "x")) == (meta, "x")
