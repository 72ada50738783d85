"""Markdown parsing and validation.

This module provides the document analysis used by every CLI command:

- lex: Tokenizes markdown into a tree of Token nodes (markdown-it-py)
- extract_title: Derives the display title from the first H1
- MarkdownValidator / validate_markdown: Runs the structural quality rules
- find_line_number / locate_line: Maps snippets back to source lines
"""

from mdimport.markdown.lexer import MarkdownParseError, lex
from mdimport.markdown.locator import UNKNOWN_LINE, find_line_number, locate_line
from mdimport.markdown.title import DEFAULT_TITLE, extract_title
from mdimport.markdown.tokens import Token, collect_links, iter_tokens
from mdimport.markdown.validation_types import (
    CheckOutcome,
    DetailedError,
    DocumentMetrics,
    StructureCensus,
    ValidationResult,
)
from mdimport.markdown.validator import MarkdownValidator, validate_markdown

__all__ = [
    # Parsing
    "lex",
    "MarkdownParseError",
    "Token",
    "iter_tokens",
    "collect_links",
    # Title
    "extract_title",
    "DEFAULT_TITLE",
    # Line location
    "find_line_number",
    "locate_line",
    "UNKNOWN_LINE",
    # Validation
    "MarkdownValidator",
    "validate_markdown",
    "ValidationResult",
    "DetailedError",
    "DocumentMetrics",
    "StructureCensus",
    "CheckOutcome",
]
