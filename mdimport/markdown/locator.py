"""Map reconstructed markdown snippets back to source line numbers.

Tokens carry no source positions, so each finding is located by rebuilding
the markdown that produced it and searching the raw text for it. The search
is an exact substring match against the first occurrence: repeated snippets
all resolve to the first one, and snippets written with different spacing
are not found at all.
"""

from __future__ import annotations

from typing import Literal

UNKNOWN_LINE: Literal["Unknown"] = "Unknown"

LineNumber = int | Literal["Unknown"]


def find_line_number(markdown: str, search_text: str, start: int = 0) -> int | None:
    """Find the 1-based line of the first occurrence of search_text.

    Args:
        markdown: Raw markdown text
        search_text: Exact snippet to look for
        start: Character offset to start searching from

    Returns:
        Line number, or None if the snippet does not occur
    """
    index = markdown.find(search_text, start)
    if index == -1:
        return None
    return markdown.count("\n", 0, index) + 1


def locate_line(markdown: str, *candidates: str) -> LineNumber:
    """Resolve the line of the first candidate snippet found in the text.

    Candidates are tried in order. Falls back to UNKNOWN_LINE when none of
    them occurs verbatim.
    """
    for candidate in candidates:
        line = find_line_number(markdown, candidate)
        if line is not None:
            return line
    return UNKNOWN_LINE
