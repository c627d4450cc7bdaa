"""Lexical scanning for PostgreSQL DDL text.

Locates the regions of a SQL string that must not be read as structure:
comments, string literals, dollar-quoted bodies and quoted identifiers.
The parser works on a masked copy of the text in which those regions are
blanked out, so parentheses, commas and keywords inside them never affect
statement extraction, clause splitting or classification. Masking keeps
every character offset and newline intact, which lets callers slice the
original text with positions found in the masked one.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class RegionKind(str, Enum):
    """Kinds of non-structural regions in SQL text."""
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    STRING = "string"
    DOLLAR_STRING = "dollar_string"
    QUOTED_IDENTIFIER = "quoted_identifier"


COMMENT_KINDS = frozenset({RegionKind.LINE_COMMENT, RegionKind.BLOCK_COMMENT})
LITERAL_KINDS = frozenset({
    RegionKind.STRING,
    RegionKind.DOLLAR_STRING,
    RegionKind.QUOTED_IDENTIFIER,
})

_DOLLAR_TAG_RE = re.compile(r'\$(?:[^\W\d]\w*)?\$')


@dataclass(frozen=True)
class Region:
    """A half-open [start, end) span of SQL text."""
    kind: RegionKind
    start: int
    end: int

    def text(self, source: str) -> str:
        return source[self.start:self.end]


def scan_regions(text: str) -> list[Region]:
    """Find comments, literals and quoted identifiers in SQL text.

    Unterminated regions run to the end of the text.

    Args:
        text: SQL text

    Returns:
        Regions in source order, non-overlapping
    """
    regions = []
    length = len(text)
    i = 0

    while i < length:
        char = text[i]
        nxt = text[i + 1] if i + 1 < length else ""

        if char == "-" and nxt == "-":
            end = text.find("\n", i)
            end = length if end == -1 else end
            regions.append(Region(RegionKind.LINE_COMMENT, i, end))
            i = end

        elif char == "/" and nxt == "*":
            end = _block_comment_end(text, i)
            regions.append(Region(RegionKind.BLOCK_COMMENT, i, end))
            i = end

        elif char == "'":
            escapes = i > 0 and text[i - 1] in "eE" and (i < 2 or not _is_word_char(text[i - 2]))
            end = _quoted_end(text, i, "'", backslash_escapes=escapes)
            regions.append(Region(RegionKind.STRING, i, end))
            i = end

        elif char == '"':
            end = _quoted_end(text, i, '"')
            regions.append(Region(RegionKind.QUOTED_IDENTIFIER, i, end))
            i = end

        elif char == "$" and (i == 0 or not _is_word_char(text[i - 1])):
            tag_match = _DOLLAR_TAG_RE.match(text, i)
            if tag_match:
                tag = tag_match.group(0)
                close = text.find(tag, tag_match.end())
                end = length if close == -1 else close + len(tag)
                regions.append(Region(RegionKind.DOLLAR_STRING, i, end))
                i = end
            else:
                i += 1

        else:
            i += 1

    return regions


def blank_regions(
    text: str,
    regions: list[Region],
    kinds: frozenset[RegionKind],
    keep_delimiters: bool = False
) -> str:
    """Replace the selected regions with spaces, preserving offsets and newlines.

    With keep_delimiters, the first and last character of each literal
    region survive so patterns like '"[^"]*"' still see a quoted token.
    """
    if not regions:
        return text

    chars = list(text)
    for region in regions:
        if region.kind not in kinds:
            continue
        start, end = region.start, region.end
        if keep_delimiters and region.kind in LITERAL_KINDS and end - start >= 2:
            start += 1
            end -= 1
        for i in range(start, end):
            if chars[i] != "\n":
                chars[i] = " "
    return "".join(chars)


def mask_sql(text: str, regions: list[Region] | None = None) -> str:
    """Blank comments entirely and literal contents (quotes kept)."""
    if regions is None:
        regions = scan_regions(text)
    masked = blank_regions(text, regions, LITERAL_KINDS, keep_delimiters=True)
    return blank_regions(masked, regions, COMMENT_KINDS)


def strip_comments(text: str, regions: list[Region] | None = None) -> str:
    """Blank comments only, leaving literals readable."""
    if regions is None:
        regions = scan_regions(text)
    return blank_regions(text, regions, COMMENT_KINDS)


def line_number(text: str, position: int) -> int:
    """1-based line number of a character offset."""
    return text.count("\n", 0, position) + 1


def unquote_identifier(name: str) -> str:
    """Strip double quotes from an identifier and collapse doubled quotes."""
    if len(name) >= 2 and name.startswith('"') and name.endswith('"'):
        return name[1:-1].replace('""', '"')
    return name


# ============================================================================
# Helper Functions
# ============================================================================

def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def _block_comment_end(text: str, start: int) -> int:
    # PostgreSQL block comments nest
    depth = 0
    i = start
    length = len(text)
    while i < length:
        if text.startswith("/*", i):
            depth += 1
            i += 2
        elif text.startswith("*/", i):
            depth -= 1
            i += 2
            if depth == 0:
                return i
        else:
            i += 1
    return length


def _quoted_end(text: str, start: int, quote: str, backslash_escapes: bool = False) -> int:
    i = start + 1
    length = len(text)
    while i < length:
        char = text[i]
        if backslash_escapes and char == "\\":
            i += 2
            continue
        if char == quote:
            # Doubled quote is an escaped quote
            if i + 1 < length and text[i + 1] == quote:
                i += 2
                continue
            return i + 1
        i += 1
    return length
