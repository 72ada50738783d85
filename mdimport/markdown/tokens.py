"""Token tree produced by the markdown lexer.

Tokens carry semantic fields only (type, depth, href, text, lang); they have
no source positions. Inline tokens such as links and images are nested
inside the block token (paragraph, heading, table cell) that contains them.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field


@dataclass
class Token:
    """A node in the parsed markdown tree.

    Attributes:
        type: Token kind ('heading', 'paragraph', 'image', 'link', 'code', ...)
        depth: Heading level 1-6 (headings only)
        href: Destination URL (links and images only)
        text: Inline source for headings and link labels, alt text for
            images, body for code blocks and plain text
        lang: Language tag of a fenced code block
        tokens: Nested child tokens
    """

    type: str
    depth: int | None = None
    href: str | None = None
    text: str | None = None
    lang: str | None = None
    tokens: list[Token] = field(default_factory=list)


def iter_tokens(tokens: Iterable[Token]) -> Iterator[Token]:
    """Yield every token in the tree, depth first, parents before children."""
    for token in tokens:
        yield token
        if token.tokens:
            yield from iter_tokens(token.tokens)


def collect_links(tokens: Iterable[Token]) -> list[Token]:
    """Collect link tokens at any nesting depth, in document order."""
    return [token for token in iter_tokens(tokens) if token.type == "link"]


def surface_tokens(tokens: Iterable[Token]) -> list[Token]:
    """Top-level tokens plus the inline children of top-level paragraphs.

    This is the view block-level census counts are taken from. Tokens inside
    blockquotes, lists, tables, or links are not part of the surface.
    """
    surface: list[Token] = []
    for token in tokens:
        surface.append(token)
        if token.type == "paragraph":
            surface.extend(token.tokens)
    return surface
