#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_frontmatter.py
"""Tests for frontmatter normalization and splitting."""

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from mdtranspile.utils.frontmatter import (
    detect_eol,
    load_frontmatter_metadata,
    normalize_frontmatter,
    split_frontmatter,
)

frontmatterish_lines = st.lists(
    st.sampled_from(["---", "...", "key: 1", "title: x", "", "body", "- item", "  ...", "----"]),
    max_size=8,
)


@st.composite
def frontmatterish_sources(draw):
    """Generate sources built from fence-like lines and mixed terminators."""
    eol = draw(st.sampled_from(["\n", "\r\n", "\n\r"]))
    lines = draw(frontmatterish_lines)
    if draw(st.booleans()):
        lines = ["---"] + lines
    return eol.join(lines)


@pytest.mark.unit
class TestDetectEol:
    """Tests for line terminator detection."""

    def test_crlf(self):
        assert detect_eol("a\r\nb") == "\r\n"

    def test_lfcr(self):
        assert detect_eol("a\n\rb") == "\n\r"

    def test_crlf_wins_over_lfcr(self):
        assert detect_eol("a\n\rb\r\nc") == "\r\n"

    def test_default_is_lf(self):
        assert detect_eol("single line") == "\n"
        assert detect_eol("a\nb") == "\n"


@pytest.mark.unit
class TestNormalizeFrontmatter:
    """Tests for normalize_frontmatter."""

    def test_crlf_pandoc_closer(self):
        """Test the CRLF Pandoc closer is rewritten with CRLF preserved."""
        assert normalize_frontmatter("---\r\nkey: 1\r\n...\r\nbody") == "---\r\nkey: 1\r\n---\r\nbody"

    def test_lf_pandoc_closer(self):
        assert normalize_frontmatter("---\ntitle: x\n...\n\n# Doc\n") == "---\ntitle: x\n---\n\n# Doc\n"

    def test_canonical_block_unchanged(self):
        source = "---\ntitle: x\n---\nbody\n...\n"
        assert normalize_frontmatter(source) == source

    def test_only_first_closer_rewritten(self):
        source = "---\na: 1\n...\nbody\n...\n"
        assert normalize_frontmatter(source) == "---\na: 1\n---\nbody\n...\n"

    def test_no_frontmatter_unchanged(self):
        source = "# Title\n\n---\n...\n"
        assert normalize_frontmatter(source) == source

    def test_unclosed_block_unchanged(self):
        source = "---\ntitle: x\nbody"
        assert normalize_frontmatter(source) == source

    def test_indented_closer_is_not_a_closer(self):
        source = "---\ntitle: x\n  ...\n"
        assert normalize_frontmatter(source) == source

    def test_opener_must_be_followed_by_terminator(self):
        assert normalize_frontmatter("----\n...\n") == "----\n...\n"
        assert normalize_frontmatter("---") == "---"

    def test_empty_string(self):
        assert normalize_frontmatter("") == ""

    @given(frontmatterish_sources())
    def test_idempotent(self, source):
        """Property: normalizing twice equals normalizing once."""
        once = normalize_frontmatter(source)
        assert normalize_frontmatter(once) == once

    @given(st.text())
    def test_idempotent_arbitrary_text(self, source):
        once = normalize_frontmatter(source)
        assert normalize_frontmatter(once) == once

    @given(st.text())
    def test_without_opener_returns_input(self, source):
        """Property: sources not starting with the opening fence pass through."""
        assume(not source.startswith(("---\n", "---\r\n")))
        assert normalize_frontmatter(source) == source

    @given(frontmatterish_sources())
    def test_length_preserved(self, source):
        """Property: ``...`` and ``---`` have the same length, so offsets never shift."""
        assert len(normalize_frontmatter(source)) == len(source)


@pytest.mark.unit
class TestSplitFrontmatter:
    """Tests for split_frontmatter."""

    def test_basic_block(self):
        block = split_frontmatter("---\ntitle: x\n---\nbody")
        assert block is not None
        assert block.raw == "title: x"
        assert block.start == 0
        assert block.end == len("---\ntitle: x\n---")
        assert block.body_start == len("---\ntitle: x\n---\n")

    def test_crlf_block(self):
        source = "---\r\na: 1\r\nb: 2\r\n---\r\nbody"
        block = split_frontmatter(source)
        assert block is not None
        assert block.raw == "a: 1\r\nb: 2"
        assert source[block.body_start :] == "body"

    def test_block_at_end_of_input(self):
        source = "---\na: 1\n---"
        block = split_frontmatter(source)
        assert block is not None
        assert block.end == len(source)
        assert block.body_start == len(source)

    def test_empty_block(self):
        block = split_frontmatter("---\n---\ntext")
        assert block is not None
        assert block.raw == ""

    def test_pandoc_closer_not_recognized(self):
        assert split_frontmatter("---\na: 1\n...\nbody") is None

    def test_no_opener(self):
        assert split_frontmatter("text\n---\n") is None

    def test_unclosed(self):
        assert split_frontmatter("---\na: 1\n") is None


@pytest.mark.unit
class TestLoadFrontmatterMetadata:
    """Tests for YAML loading of frontmatter blocks."""

    def test_mapping(self):
        assert load_frontmatter_metadata("title: Hello\ntags: [a, b]") == {"title": "Hello", "tags": ["a", "b"]}

    def test_empty(self):
        assert load_frontmatter_metadata("  \n") == {}

    def test_malformed_yaml_is_not_an_error(self, caplog):
        with caplog.at_level("WARNING", logger="mdtranspile.utils.frontmatter"):
            assert load_frontmatter_metadata("title: [unclosed") == {}
        assert "malformed" in caplog.text

    def test_non_mapping(self):
        assert load_frontmatter_metadata("- a\n- b") == {}

    def test_keys_are_strings(self):
        assert load_frontmatter_metadata("1: one") == {"1": "one"}
