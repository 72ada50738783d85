"""Artifacts produced from a validated markdown document.

- to_csv / export_errors_to_csv: CSV projection of detailed validation errors
- build_import_document / write_import_document: Contentful import JSON
"""

from mdimport.export.csv_export import CSV_HEADERS, export_errors_to_csv, to_csv
from mdimport.export.import_document import (
    build_import_document,
    post_content_type,
    write_import_document,
)

__all__ = [
    "CSV_HEADERS",
    "to_csv",
    "export_errors_to_csv",
    "build_import_document",
    "post_content_type",
    "write_import_document",
]
