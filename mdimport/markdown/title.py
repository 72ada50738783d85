"""Display title extraction."""

import re

DEFAULT_TITLE = "Untitled Markdown Import"

# "\s" also spans line breaks, so a bare "#" line takes the next line's text
_TITLE_RE = re.compile(r"^#\s+(.+?)\s*$", re.MULTILINE)


def extract_title(markdown: str, fallback: str = DEFAULT_TITLE) -> str:
    """Derive a display title from the first top-level ATX heading.

    Args:
        markdown: Raw markdown text
        fallback: Title to use when the document has no such heading

    Returns:
        The trimmed heading text, or the fallback. Never empty unless the
        fallback is.
    """
    for match in _TITLE_RE.finditer(markdown):
        title = match.group(1).strip()
        if title:
            return title
    return fallback
