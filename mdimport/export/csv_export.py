"""CSV export of detailed validation errors."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Sequence
from pathlib import Path

from mdimport.markdown.validation_types import DetailedError

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Type", "Category", "Line", "Element", "Description", "Additional Info"]
DEFAULT_ERRORS_FILE = "validation-errors.csv"


def to_csv(detailed_errors: Sequence[DetailedError]) -> str:
    """Render detailed errors as CSV text.

    Fields holding a comma, a double quote, or a newline are quoted, with
    inner quotes doubled. Rows are separated by ``\\n`` and the text does not
    end with a newline.

    Args:
        detailed_errors: Findings to export, in order

    Returns:
        CSV text with a header row
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(CSV_HEADERS)
    for error in detailed_errors:
        writer.writerow(["" if value is None else value for value in error.to_row()])
    return buffer.getvalue()[: -len("\n")]


def export_errors_to_csv(
    detailed_errors: Sequence[DetailedError],
    path: Path | str = DEFAULT_ERRORS_FILE,
) -> Path | None:
    """Write detailed errors to a CSV file.

    Args:
        detailed_errors: Findings to export
        path: Destination file

    Returns:
        Path of the written file, or None when there was nothing to export
    """
    if not detailed_errors:
        logger.info("No validation errors to export")
        return None

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_csv(detailed_errors), encoding="utf-8")
    logger.info("Exported %d validation error(s) to %s", len(detailed_errors), path)
    return path
