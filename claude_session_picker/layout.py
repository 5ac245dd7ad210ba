"""Display-width aware text layout for the terminal frame.

All measurements are in terminal columns, not characters: wide East Asian
glyphs take two columns, control characters none. ANSI SGR sequences
(``ESC [ ... m``) count as zero width and are never split.
"""

import re
from typing import Iterable, Iterator

# ── Styles ──────────────────────────────────────────────────
RESET = "\x1b[0m"
BOLD = "\x1b[1m"
DIM = "\x1b[2m"
RED = "\x1b[31m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
MAGENTA = "\x1b[35m"
CYAN = "\x1b[36m"
WHITE = "\x1b[37m"
GRAY = "\x1b[90m"
BRIGHT_CYAN = "\x1b[96m"

TRUNCATION_MARKER = ".."

ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*m")

# Newlines and tabs become spaces one-for-one so character indices (and
# therefore match positions) survive normalisation.
_LINE_BREAKS = str.maketrans({"\r": " ", "\n": " ", "\t": " "})

# East Asian Wide/Fullwidth blocks rendered as two columns
WIDE_RANGES = (
    (0x1100, 0x115F),  # Hangul Jamo
    (0x2E80, 0x303E),  # CJK Radicals, Kangxi, CJK Symbols
    (0x3040, 0x33BF),  # Hiragana, Katakana, Bopomofo, CJK Compatibility
    (0x3400, 0x4DBF),  # CJK Unified Ideographs Extension A
    (0x4E00, 0xA4CF),  # CJK Unified Ideographs, Yi
    (0xA960, 0xA97C),  # Hangul Jamo Extended-A
    (0xAC00, 0xD7A3),  # Hangul Syllables
    (0xD7B0, 0xD7FB),  # Hangul Jamo Extended-B
    (0xF900, 0xFAFF),  # CJK Compatibility Ideographs
    (0xFE30, 0xFE6F),  # CJK Compatibility Forms
    (0xFF01, 0xFF60),  # Fullwidth Forms
    (0xFFE0, 0xFFE6),  # Fullwidth Signs
    (0x20000, 0x2FFFD),  # CJK Unified Ideographs Extension B-F
    (0x30000, 0x3FFFD),  # CJK Unified Ideographs Extension G+
)

ZERO_WIDTH = {0x200B, 0x200C, 0x200D, 0x2060, 0xFEFF}


def char_width(char: str) -> int:
    """Number of columns ``char`` occupies: 0, 1 or 2."""
    cp = ord(char)
    if cp < 32 or 0x7F <= cp < 0xA0 or cp in ZERO_WIDTH:
        return 0
    for start, end in WIDE_RANGES:
        if cp < start:
            break
        if cp <= end:
            return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_PATTERN.sub("", text)


def display_width(text: str) -> int:
    """Column width of ``text``, ignoring ANSI style sequences."""
    return sum(char_width(c) for c in strip_ansi(text))


def normalize_line_breaks(text: str) -> str:
    return text.translate(_LINE_BREAKS)


def _tokens(text: str) -> Iterator[tuple[str, int]]:
    """Split into (token, width) pairs; a style sequence is one zero-width token."""
    pos = 0
    for match in ANSI_PATTERN.finditer(text):
        for char in text[pos : match.start()]:
            yield char, char_width(char)
        yield match.group(), 0
        pos = match.end()
    for char in text[pos:]:
        yield char, char_width(char)


def _take(tokens: Iterable[tuple[str, int]], max_cols: int) -> str:
    """Longest token prefix that fits in ``max_cols`` columns."""
    out: list[str] = []
    used = 0
    for token, width in tokens:
        if used + width > max_cols:
            break
        out.append(token)
        used += width
    return "".join(out)


def truncate(text: str, max_cols: int) -> str:
    """Fit ``text`` into ``max_cols`` columns.

    Text that already fits is returned unchanged (apart from line breaks
    becoming spaces). Longer text is cut at a character boundary, leaving two
    columns for the ``..`` marker; a wide glyph that would straddle the cut is
    dropped whole. With ``max_cols <= 2`` only marker dots are returned.
    """
    if max_cols <= 0:
        return ""
    clean = normalize_line_breaks(text)
    if display_width(clean) <= max_cols:
        return clean
    if max_cols <= len(TRUNCATION_MARKER):
        return "." * max_cols
    budget = max_cols - len(TRUNCATION_MARKER)
    return _take(_tokens(clean), budget) + TRUNCATION_MARKER


def pad(text: str, target_cols: int) -> str:
    """Right-pad with spaces to exactly ``target_cols`` columns (never shrinks)."""
    width = display_width(text)
    if width < target_cols:
        return text + " " * (target_cols - width)
    return text


def highlight(
    text: str,
    max_cols: int,
    positions: Iterable[int],
    base_style: str,
    highlight_style: str,
) -> str:
    """Truncate ``text`` like :func:`truncate`, styling matched characters.

    Characters whose index is in ``positions`` are drawn in
    ``highlight_style``, all others in ``base_style``. A highlight run is
    closed before the truncation marker is appended.
    Indices count every character of ``text``; embedded style sequences are
    copied whole and never highlighted.
    """
    if not text or max_cols <= 0:
        return ""
    clean = normalize_line_breaks(text)
    marked = set(positions)
    if not marked:
        return f"{base_style}{truncate(clean, max_cols)}{RESET}"

    needs_truncation = display_width(clean) > max_cols
    if needs_truncation and max_cols <= len(TRUNCATION_MARKER):
        return "." * max_cols
    limit = max_cols - len(TRUNCATION_MARKER) if needs_truncation else max_cols

    out = [base_style]
    used = 0
    index = 0
    in_highlight = False
    for token, width in _tokens(clean):
        if used + width > limit:
            break
        if len(token) > 1:
            # Style sequence: copied whole, never highlighted
            out.append(token)
            index += len(token)
            continue
        is_marked = index in marked
        if is_marked and not in_highlight:
            out.append(highlight_style)
            in_highlight = True
        elif not is_marked and in_highlight:
            out.append(RESET + base_style)
            in_highlight = False
        out.append(token)
        used += width
        index += 1
    if in_highlight:
        out.append(RESET + base_style)
    if needs_truncation:
        out.append(TRUNCATION_MARKER)
    out.append(RESET)
    return "".join(out)
