"""Shared types for markdown validation.

Contains the dataclasses produced by the validator and consumed by the CSV
exporter, the import file generator, and the CLI report renderer.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

from mdimport.markdown.locator import LineNumber
from mdimport.markdown.tokens import Token

Severity = Literal["Critical", "Warning"]
CheckStatus = Literal["pass", "fail", "warn", "info"]

CATEGORY_MULTIPLE_H1 = "Multiple H1"
CATEGORY_BROKEN_IMAGE = "Broken Image"
CATEGORY_MISSING_ALT = "Missing Alt Text"
CATEGORY_BROKEN_LINK = "Broken Link"


@dataclass
class DetailedError:
    """A single defect located in the source document.

    Attributes:
        severity: 'Critical' or 'Warning'
        category: Finding category (e.g., 'Broken Link')
        line: 1-based source line, or 'Unknown' if it could not be located
        element: Markdown snippet that triggered the finding
        description: Fixed human-readable description of the category
        additional_info: Category-specific qualifier (alt text, URL, count)
    """

    severity: Severity
    category: str
    line: LineNumber
    element: str
    description: str
    additional_info: str = ""

    def to_row(self) -> list[str]:
        """Project onto the CSV column order."""
        return [
            self.severity,
            self.category,
            str(self.line),
            self.element,
            self.description,
            self.additional_info,
        ]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class DocumentMetrics:
    """Basic size metrics of the raw markdown text."""

    characters: int
    lines: int
    words: int


@dataclass
class StructureCensus:
    """Token counts gathered before the quality rules run.

    Attributes:
        headings: Number of top-level heading tokens
        heading_levels: Heading count per depth, ascending by depth
        code_blocks: Number of code blocks
        languages: Distinct code block languages ('no-lang' when untagged)
        images: Number of images on the document surface
        tables: Number of tables
        blockquotes: Number of blockquotes
        lists: Number of lists
        links: Number of links anywhere in the document
    """

    headings: int = 0
    heading_levels: dict[int, int] = field(default_factory=dict)
    code_blocks: int = 0
    languages: list[str] = field(default_factory=list)
    images: int = 0
    tables: int = 0
    blockquotes: int = 0
    lists: int = 0
    links: int = 0


@dataclass
class CheckOutcome:
    """One line of the quality check report."""

    status: CheckStatus
    message: str


@dataclass
class ValidationResult:
    """Result of validating a markdown document.

    Attributes:
        success: True when no critical issue was found
        issues: Critical issue summaries (these decide success)
        warnings: Non-blocking warning summaries
        detailed_errors: Line-located findings of both severities, for export
        tokens: Parsed token tree (empty if parsing failed)
        title: Title the document was validated under
        metrics: Size metrics of the raw text
        parsed: Whether the document could be tokenized
        parse_error: Parser message when tokenizing failed
        census: Structural counts (None if parsing failed)
        checks: Quality check outcomes in report order
    """

    success: bool
    issues: list[str]
    warnings: list[str]
    detailed_errors: list[DetailedError]
    tokens: list[Token] = field(default_factory=list)
    title: str = ""
    metrics: DocumentMetrics | None = None
    parsed: bool = True
    parse_error: str | None = None
    census: StructureCensus | None = None
    checks: list[CheckOutcome] = field(default_factory=list)

    @property
    def critical_count(self) -> int:
        return sum(1 for error in self.detailed_errors if error.severity == "Critical")

    @property
    def warning_count(self) -> int:
        return sum(1 for error in self.detailed_errors if error.severity == "Warning")

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready projection of the result, without the token tree."""
        return {
            "success": self.success,
            "title": self.title,
            "parsed": self.parsed,
            "parse_error": self.parse_error,
            "issues": list(self.issues),
            "warnings": list(self.warnings),
            "detailed_errors": [error.to_dict() for error in self.detailed_errors],
            "metrics": asdict(self.metrics) if self.metrics else None,
            "census": asdict(self.census) if self.census else None,
            "checks": [asdict(check) for check in self.checks],
        }
