#!/usr/bin/env python3
"""Tests for the display-width aware layout helpers."""

import pytest

from claude_session_picker.layout import (
    BOLD,
    DIM,
    RESET,
    YELLOW,
    char_width,
    display_width,
    highlight,
    pad,
    strip_ansi,
    truncate,
)

SAMPLES = [
    "",
    "hello",
    "你好world",
    "한국어 텍스트와 English",
    "ｆｕｌｌｗｉｄｔｈ",
    "tabs\tand\nnewlines",
    "mixed 日本語 and ascii with a long tail of text",
    "\x1b[33mstyled\x1b[0m text",
]


class TestCharWidth:
    """Tests for char_width."""

    @pytest.mark.parametrize("char", ["a", "Z", "1", " ", "é", "─", "→"])
    def test_narrow(self, char):
        assert char_width(char) == 1

    @pytest.mark.parametrize("char", ["你", "好", "の", "カ", "한", "ｆ", "￥", "\U00020000"])
    def test_wide(self, char):
        assert char_width(char) == 2

    @pytest.mark.parametrize("char", ["\x00", "\x1b", "\n", "\x7f", "\x9f", "\u200b"])
    def test_zero(self, char):
        assert char_width(char) == 0


class TestDisplayWidth:
    """Tests for display_width."""

    def test_ascii(self):
        assert display_width("hello") == 5

    def test_wide_glyphs(self):
        assert display_width("你好world") == 9

    def test_ignores_ansi_sequences(self):
        assert display_width(f"{YELLOW}{BOLD}abc{RESET}") == 3

    def test_strip_ansi(self):
        assert strip_ansi("\x1b[48;5;236mx\x1b[0m") == "x"


class TestTruncate:
    """Tests for truncate."""

    def test_fits_unchanged(self):
        assert truncate("hello", 5) == "hello"
        assert truncate("hello", 10) == "hello"

    def test_truncates_with_marker(self):
        assert truncate("hello world", 8) == "hello .."

    def test_wide_characters_not_split(self):
        """Wide glyphs are kept whole or dropped, never split."""
        result = truncate("你好world", 5)
        assert display_width(result) <= 5
        assert result.endswith("..")
        assert result == "你.."

    def test_wide_boundary_exact(self):
        assert truncate("你好world", 6) == "你好.."

    def test_tiny_budget_is_marker_only(self):
        assert truncate("hello", 2) == ".."
        assert truncate("hello", 1) == "."
        assert truncate("hello", 0) == ""

    def test_line_breaks_become_spaces(self):
        assert truncate("a\nb\tc", 10) == "a b c"

    def test_ansi_sequences_kept_whole(self):
        styled = f"{YELLOW}abcdef{RESET}"
        result = truncate(styled, 5)
        assert result.startswith(YELLOW)
        assert strip_ansi(result) == "abc.."

    @pytest.mark.parametrize("text", SAMPLES)
    @pytest.mark.parametrize("width", range(0, 14))
    def test_width_never_exceeds_budget(self, text, width):
        assert display_width(truncate(text, width)) <= width


class TestPad:
    """Tests for pad."""

    def test_pads_to_width(self):
        assert pad("ab", 5) == "ab   "

    def test_counts_wide_glyphs(self):
        assert pad("你", 4) == "你  "

    def test_never_shrinks(self):
        assert pad("hello", 3) == "hello"

    def test_ignores_styles_when_measuring(self):
        padded = pad(f"{DIM}ab{RESET}", 4)
        assert display_width(padded) == 4

    @pytest.mark.parametrize("text", SAMPLES)
    @pytest.mark.parametrize("width", [0, 3, 10, 40])
    def test_exact_width(self, text, width):
        assert display_width(pad(text, width)) == max(width, display_width(text))


class TestHighlight:
    """Tests for highlight."""

    HL = f"{YELLOW}{BOLD}"

    def test_no_positions_is_plain_truncate(self):
        assert highlight("hello", 10, [], DIM, self.HL) == f"{DIM}hello{RESET}"

    def test_wraps_matched_characters(self):
        result = highlight("abc", 10, [1], DIM, self.HL)
        assert result == f"{DIM}a{self.HL}b{RESET}{DIM}c{RESET}"

    def test_consecutive_positions_share_one_region(self):
        result = highlight("abcd", 10, [1, 2], DIM, self.HL)
        assert result == f"{DIM}a{self.HL}bc{RESET}{DIM}d{RESET}"

    def test_region_closed_before_marker(self):
        result = highlight("abcdefgh", 5, [0, 1, 2], DIM, self.HL)
        assert result == f"{DIM}{self.HL}abc{RESET}{DIM}..{RESET}"
        assert display_width(result) == 5

    def test_style_sequence_counts_toward_positions(self):
        text = f"{YELLOW}abcdef"
        result = highlight(text, 5, [len(YELLOW)], DIM, self.HL)
        assert result == f"{DIM}{YELLOW}{self.HL}a{RESET}{DIM}bc..{RESET}"
        assert strip_ansi(result) == "abc.."
        assert display_width(result) == 5

    def test_style_sequence_never_split(self):
        result = highlight(f"{YELLOW}abc", 10, [1, 2], DIM, self.HL)
        assert result == f"{DIM}{YELLOW}abc{RESET}"

    def test_empty_text(self):
        assert highlight("", 10, [0], DIM, self.HL) == ""

    def test_tiny_budget(self):
        assert highlight("abcdef", 2, [0], DIM, self.HL) == ".."

    def test_wide_glyphs_respect_budget(self):
        result = highlight("你好world", 5, [0, 2], DIM, self.HL)
        assert display_width(result) <= 5
        assert "好" not in result

    @pytest.mark.parametrize("text", SAMPLES)
    @pytest.mark.parametrize("width", range(0, 12))
    def test_width_never_exceeds_budget(self, text, width):
        positions = list(range(0, len(text), 2))
        assert display_width(highlight(text, width, positions, DIM, self.HL)) <= width
