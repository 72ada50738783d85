"""Markdown lexer built on markdown-it-py.

markdown-it emits a flat stream of block tokens with ``*_open``/``*_close``
pairs and ``inline`` tokens holding inline children. This module folds that
stream into a tree of :class:`~mdimport.markdown.tokens.Token` nodes so the
validator can work with headings, images, links, and code blocks directly.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token as MdToken

from mdimport.markdown.tokens import Token

logger = logging.getLogger(__name__)

# Container names as the validator knows them
_CONTAINER_TYPES = {
    "bullet_list": "list",
    "ordered_list": "list",
    "list_item": "list_item",
    "blockquote": "blockquote",
    "table": "table",
    "thead": "table_head",
    "tbody": "table_body",
    "tr": "table_row",
    "th": "table_cell",
    "td": "table_cell",
    "paragraph": "paragraph",
    "heading": "heading",
    "strong": "strong",
    "em": "em",
    "s": "del",
}


class MarkdownParseError(Exception):
    """Raised when a markdown document cannot be tokenized."""


def create_parser() -> MarkdownIt:
    """Create a CommonMark parser with GitHub-style tables and strikethrough."""
    return MarkdownIt("commonmark").enable(["table", "strikethrough"])


def _base_type(md_token: MdToken) -> str:
    base = md_token.type
    for suffix in ("_open", "_close"):
        if base.endswith(suffix):
            return base[: -len(suffix)]
    return base


def _inline_source(children: Sequence[MdToken]) -> str:
    """Rebuild the markdown source of a run of inline tokens.

    Used for link labels and image alt text so that the reconstructed
    snippet matches what the author typed as closely as possible.
    """
    parts = []
    for child in children:
        if child.type in ("text", "html_inline"):
            parts.append(child.content)
        elif child.type == "code_inline":
            parts.append(f"{child.markup}{child.content}{child.markup}")
        elif child.type in ("softbreak", "hardbreak"):
            parts.append("\n")
        elif child.type == "image":
            alt = _inline_source(child.children or [])
            parts.append(f"![{alt}]({child.attrGet('src') or ''})")
        elif child.nesting != 0:
            # emphasis, strong, strikethrough open/close markers
            if child.type.startswith("link_"):
                continue
            parts.append(child.markup)
        else:
            parts.append(child.content)
    return "".join(parts)


def _fence_lang(info: str) -> str | None:
    info = info.strip()
    if not info:
        return None
    return info.split()[0]


def _build_inline(children: Sequence[MdToken]) -> list[Token]:
    """Fold inline markdown-it tokens into nested Token nodes."""
    root: list[Token] = []
    stack: list[tuple[Token, list[MdToken]]] = []

    def append(token: Token) -> None:
        (stack[-1][0].tokens if stack else root).append(token)

    for child in children:
        if stack:
            stack[-1][1].append(child)

        if child.type == "link_open":
            link = Token(type="link", href=child.attrGet("href"))
            append(link)
            stack.append((link, []))
        elif child.nesting == -1:
            if not stack:
                continue
            token, raw = stack.pop()
            if token.type == "link":
                token.text = _inline_source(raw[:-1])
            if stack:
                stack[-1][1].extend(raw)
        elif child.nesting == 1:
            container = Token(type=_CONTAINER_TYPES.get(_base_type(child), _base_type(child)))
            append(container)
            stack.append((container, []))
        elif child.type == "image":
            alt = _inline_source(child.children or [])
            append(Token(type="image", href=child.attrGet("src"), text=alt))
        elif child.type == "code_inline":
            append(Token(type="codespan", text=child.content))
        elif child.type in ("softbreak", "hardbreak"):
            append(Token(type="br"))
        elif child.type == "html_inline":
            append(Token(type="html", text=child.content))
        else:
            append(Token(type="text", text=child.content))

    return root


def build_tree(md_tokens: Sequence[MdToken]) -> list[Token]:
    """Fold a flat markdown-it block token stream into a Token tree."""
    root: list[Token] = []
    stack: list[Token] = []

    def append(token: Token) -> None:
        (stack[-1].tokens if stack else root).append(token)

    for md_token in md_tokens:
        if md_token.nesting == 1:
            base = _base_type(md_token)
            container = Token(type=_CONTAINER_TYPES.get(base, base))
            if base == "heading":
                container.depth = int(md_token.tag[1:])
            append(container)
            stack.append(container)
        elif md_token.nesting == -1:
            if stack:
                stack.pop()
        elif md_token.type == "inline":
            parent = stack[-1] if stack else None
            if parent is not None and parent.type in ("heading", "paragraph"):
                parent.text = md_token.content
            for token in _build_inline(md_token.children or []):
                append(token)
        elif md_token.type in ("fence", "code_block"):
            lang = _fence_lang(md_token.info) if md_token.type == "fence" else None
            append(Token(type="code", text=md_token.content, lang=lang))
        elif md_token.type == "html_block":
            append(Token(type="html", text=md_token.content))
        else:
            append(Token(type=md_token.type))

    return root


def lex(markdown: str, parser: MarkdownIt | None = None) -> list[Token]:
    """Tokenize a markdown document into a Token tree.

    Args:
        markdown: Raw markdown text
        parser: Optional preconfigured markdown-it parser

    Returns:
        Top-level tokens of the document

    Raises:
        MarkdownParseError: If the document cannot be tokenized
    """
    if not isinstance(markdown, str):
        raise MarkdownParseError(f"Expected markdown text, got {type(markdown).__name__}")

    md = parser or create_parser()
    try:
        md_tokens = md.parse(markdown)
    except Exception as e:
        logger.debug("markdown-it failed to parse document: %s", e)
        raise MarkdownParseError(str(e)) from e

    return build_tree(md_tokens)
