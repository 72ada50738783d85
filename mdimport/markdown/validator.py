"""Markdown structure validation.

The validator tokenizes a document, takes a census of its structure, and
runs a fixed sequence of quality rules:

- Heading count: no H1 is critical, several H1s are a warning
- Broken images: images with an empty URL are critical
- Missing alt text: images without alt text are a warning
- Broken links: links with an empty URL are critical
- External images: images hosted elsewhere are reported for information
- Long lines: many lines over the length limit are reported for information

Every rule runs independently of the others. Only a parse failure stops
validation early. Findings that can be pinned to a line are also recorded as
DetailedError entries for export.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from mdimport.markdown.lexer import lex
from mdimport.markdown.locator import locate_line
from mdimport.markdown.tokens import Token, collect_links, surface_tokens
from mdimport.markdown.validation_types import (
    CATEGORY_BROKEN_IMAGE,
    CATEGORY_BROKEN_LINK,
    CATEGORY_MISSING_ALT,
    CATEGORY_MULTIPLE_H1,
    CheckOutcome,
    DetailedError,
    DocumentMetrics,
    StructureCensus,
    ValidationResult,
)

logger = logging.getLogger(__name__)

PARSE_FAILURE_ISSUE = "Failed to parse markdown - syntax errors present"
NO_H1_ISSUE = "No H1 heading found"
NO_LANG = "no-lang"

DEFAULT_MAX_LINE_LENGTH = 120
DEFAULT_LONG_LINE_LIMIT = 10

Lexer = Callable[[str], list[Token]]


def compute_metrics(markdown: str) -> DocumentMetrics:
    """Count characters, lines, and whitespace-separated words."""
    return DocumentMetrics(
        characters=len(markdown),
        lines=len(markdown.split("\n")),
        words=len(re.split(r"\s+", markdown)),
    )


def _is_blank(value: str | None) -> bool:
    return not value or not value.strip()


def _is_external(href: str | None) -> bool:
    return bool(href) and href.startswith(("http://", "https://"))


class MarkdownValidator:
    """Validates markdown documents against the structural quality rules.

    Example:
        >>> validator = MarkdownValidator()
        >>> result = validator.validate("# Title\\n\\nBody", "Title")
        >>> result.success
        True
    """

    def __init__(
        self,
        lexer: Lexer = lex,
        max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
        long_line_limit: int = DEFAULT_LONG_LINE_LIMIT,
    ) -> None:
        """Initialize the validator.

        Args:
            lexer: Callable turning markdown text into a Token tree
            max_line_length: Lines longer than this count as long
            long_line_limit: Long lines are reported once there are more than this
        """
        self.lexer = lexer
        self.max_line_length = max_line_length
        self.long_line_limit = long_line_limit

    def validate(self, markdown: str, title: str) -> ValidationResult:
        """Validate a markdown document.

        Args:
            markdown: Raw markdown text
            title: Display title, used for reporting only

        Returns:
            ValidationResult with issues, warnings, and located findings
        """
        metrics = compute_metrics(markdown)

        try:
            tokens = self.lexer(markdown)
        except Exception as e:
            logger.warning("Markdown parsing failed: %s", e)
            return ValidationResult(
                success=False,
                issues=[PARSE_FAILURE_ISSUE],
                warnings=[],
                detailed_errors=[],
                tokens=[],
                title=title,
                metrics=metrics,
                parsed=False,
                parse_error=str(e),
            )

        issues: list[str] = []
        warnings: list[str] = []
        detailed_errors: list[DetailedError] = []
        checks: list[CheckOutcome] = []

        surface = surface_tokens(tokens)
        headings = [t for t in tokens if t.type == "heading"]
        images = [t for t in surface if t.type == "image"]
        links = collect_links(tokens)
        census = self._census(tokens, headings, images, links)

        self._check_headings(markdown, headings, issues, warnings, detailed_errors, checks)
        self._check_broken_images(markdown, images, issues, detailed_errors, checks)
        self._check_missing_alt(markdown, images, warnings, detailed_errors, checks)
        self._check_broken_links(markdown, links, issues, detailed_errors, checks)
        self._check_external_images(images, warnings, checks)
        self._check_long_lines(markdown, warnings, checks)

        logger.debug(
            "Validated %r: %d issue(s), %d warning(s), %d detailed error(s)",
            title,
            len(issues),
            len(warnings),
            len(detailed_errors),
        )

        return ValidationResult(
            success=not issues,
            issues=issues,
            warnings=warnings,
            detailed_errors=detailed_errors,
            tokens=tokens,
            title=title,
            metrics=metrics,
            census=census,
            checks=checks,
        )

    def _census(
        self,
        tokens: list[Token],
        headings: list[Token],
        images: list[Token],
        links: list[Token],
    ) -> StructureCensus:
        census = StructureCensus(headings=len(headings), images=len(images), links=len(links))

        for heading in headings:
            census.heading_levels[heading.depth] = census.heading_levels.get(heading.depth, 0) + 1

        for token in tokens:
            if token.type == "code":
                census.code_blocks += 1
                lang = token.lang or NO_LANG
                if lang not in census.languages:
                    census.languages.append(lang)
            elif token.type == "table":
                census.tables += 1
            elif token.type == "blockquote":
                census.blockquotes += 1
            elif token.type == "list":
                census.lists += 1

        census.heading_levels = dict(sorted(census.heading_levels.items()))
        return census

    def _check_headings(
        self,
        markdown: str,
        headings: list[Token],
        issues: list[str],
        warnings: list[str],
        detailed_errors: list[DetailedError],
        checks: list[CheckOutcome],
    ) -> None:
        h1_headings = [h for h in headings if h.depth == 1]
        h1_count = len(h1_headings)

        if h1_count == 0:
            issues.append(NO_H1_ISSUE)
            checks.append(CheckOutcome("fail", "No H1 heading (will use fallback title)"))
            return

        if h1_count == 1:
            checks.append(CheckOutcome("pass", "Single H1 heading found"))
            return

        warnings.append(f"Multiple H1 headings found ({h1_count})")
        checks.append(
            CheckOutcome("warn", f"Multiple H1 headings ({h1_count}) - consider using only one")
        )
        for h1 in h1_headings:
            element = f"# {h1.text or '(no text)'}"
            detailed_errors.append(
                DetailedError(
                    severity="Warning",
                    category=CATEGORY_MULTIPLE_H1,
                    line=locate_line(markdown, element),
                    element=element,
                    description="Multiple H1 headings found (SEO concern)",
                    additional_info=f"Total H1s: {h1_count}",
                )
            )

    def _check_broken_images(
        self,
        markdown: str,
        images: list[Token],
        issues: list[str],
        detailed_errors: list[DetailedError],
        checks: list[CheckOutcome],
    ) -> None:
        broken = [img for img in images if _is_blank(img.href)]
        if not broken:
            if images:
                checks.append(CheckOutcome("pass", "All images have URLs"))
            return

        issues.append(f"{len(broken)} image(s) with missing URLs")
        checks.append(CheckOutcome("fail", f"{len(broken)} broken image link(s)"))
        for img in broken:
            alt_text = img.text or "(no alt text)"
            logger.debug("Broken image with alt text %r", alt_text)
            detailed_errors.append(
                DetailedError(
                    severity="Critical",
                    category=CATEGORY_BROKEN_IMAGE,
                    line=locate_line(markdown, f"![{img.text or ''}]()"),
                    element=f"![{alt_text}]()",
                    description="Image has empty URL",
                    additional_info=f'Alt: "{alt_text}"',
                )
            )

    def _check_missing_alt(
        self,
        markdown: str,
        images: list[Token],
        warnings: list[str],
        detailed_errors: list[DetailedError],
        checks: list[CheckOutcome],
    ) -> None:
        missing = [img for img in images if _is_blank(img.text)]
        if not missing:
            if images:
                checks.append(CheckOutcome("pass", "All images have alt text"))
            return

        warnings.append(f"{len(missing)} image(s) missing alt text")
        checks.append(
            CheckOutcome(
                "warn", f"{len(missing)} image(s) missing alt text (accessibility concern)"
            )
        )
        for img in missing:
            element = f"![]({img.href or ''})"
            detailed_errors.append(
                DetailedError(
                    severity="Warning",
                    category=CATEGORY_MISSING_ALT,
                    line=locate_line(markdown, element),
                    element=element,
                    description="Image is missing alt text (accessibility issue)",
                    additional_info=f'URL: "{img.href or "(no URL)"}"',
                )
            )

    def _check_broken_links(
        self,
        markdown: str,
        links: list[Token],
        issues: list[str],
        detailed_errors: list[DetailedError],
        checks: list[CheckOutcome],
    ) -> None:
        broken = [link for link in links if _is_blank(link.href)]
        if not broken:
            if links:
                checks.append(CheckOutcome("pass", "All links have URLs"))
            return

        issues.append(f"{len(broken)} link(s) with missing URLs")
        checks.append(CheckOutcome("fail", f"{len(broken)} broken link(s)"))
        for link in broken:
            link_text = link.text or "(no text)"
            detailed_errors.append(
                DetailedError(
                    severity="Critical",
                    category=CATEGORY_BROKEN_LINK,
                    line=locate_line(markdown, f"[{link_text}]()", f"[{link_text}]( )"),
                    element=f"[{link_text}]()",
                    description="Link has empty URL",
                    additional_info=f'Text: "{link_text}"',
                )
            )

    def _check_external_images(
        self,
        images: list[Token],
        warnings: list[str],
        checks: list[CheckOutcome],
    ) -> None:
        external = [img for img in images if _is_external(img.href)]
        if external:
            warnings.append(
                f"{len(external)} external image(s) - consider hosting in Contentful"
            )
            checks.append(
                CheckOutcome(
                    "info",
                    f"{len(external)} external image(s) - consider uploading to Contentful assets",
                )
            )

    def _check_long_lines(
        self,
        markdown: str,
        warnings: list[str],
        checks: list[CheckOutcome],
    ) -> None:
        long_lines = [line for line in markdown.split("\n") if len(line) > self.max_line_length]
        if len(long_lines) > self.long_line_limit:
            warnings.append(f"{len(long_lines)} lines exceed {self.max_line_length} characters")
            checks.append(
                CheckOutcome(
                    "info",
                    f"{len(long_lines)} long lines (>{self.max_line_length} chars) "
                    "- may affect readability",
                )
            )


def validate_markdown(
    markdown: str,
    title: str,
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
    long_line_limit: int = DEFAULT_LONG_LINE_LIMIT,
) -> ValidationResult:
    """Validate a markdown document with the default lexer.

    Args:
        markdown: Raw markdown text
        title: Display title, used for reporting only
        max_line_length: Lines longer than this count as long
        long_line_limit: Long lines are reported once there are more than this

    Returns:
        ValidationResult for the document
    """
    validator = MarkdownValidator(
        max_line_length=max_line_length,
        long_line_limit=long_line_limit,
    )
    return validator.validate(markdown, title)
