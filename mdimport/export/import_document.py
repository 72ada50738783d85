"""Contentful import document generation.

The document follows the layout of ``contentful space import`` content
files: top-level ``contentTypes``, ``entries``, ``assets``, and ``locales``
arrays. Each markdown document becomes one entry of the ``post`` content
type, with its title and full markdown body as localized fields.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "post"
DEFAULT_LOCALE = "en-US"


def post_content_type(content_type_id: str = DEFAULT_CONTENT_TYPE) -> dict[str, Any]:
    """Definition of the content type the generated entries belong to.

    Two required, non-localized fields: ``internalTitle`` (a short Symbol,
    also the display field) and ``markdown`` (long Text).
    """

    def _field(field_id: str, name: str, field_type: str) -> dict[str, Any]:
        return {
            "id": field_id,
            "name": name,
            "type": field_type,
            "localized": False,
            "required": True,
            "validations": [],
            "disabled": False,
            "omitted": False,
        }

    return {
        "sys": {"id": content_type_id, "type": "ContentType"},
        "name": content_type_id.capitalize(),
        "description": "",
        "displayField": "internalTitle",
        "fields": [
            _field("internalTitle", "Internal Title", "Symbol"),
            _field("markdown", "Markdown", "Text"),
        ],
    }


def build_import_document(
    title: str,
    markdown: str,
    *,
    content_type_id: str = DEFAULT_CONTENT_TYPE,
    locale: str = DEFAULT_LOCALE,
    publish: bool = True,
    include_content_type: bool = False,
) -> dict[str, Any]:
    """Build a Contentful import document for one markdown entry.

    Args:
        title: Entry title (stored in ``internalTitle``)
        markdown: Full raw markdown (stored in ``markdown``)
        content_type_id: ID of the content type the entry links to
        locale: Locale code the field values are stored under
        publish: Publish the entry on import (sets ``publishedVersion``)
        include_content_type: Also create the content type on import

    Returns:
        Import document ready to be serialized as JSON
    """
    entry_sys: dict[str, Any] = {
        "type": "Entry",
        "contentType": {
            "sys": {"type": "Link", "linkType": "ContentType", "id": content_type_id},
        },
    }
    if publish:
        entry_sys["publishedVersion"] = 1

    return {
        "contentTypes": [post_content_type(content_type_id)] if include_content_type else [],
        "entries": [
            {
                "sys": entry_sys,
                "fields": {
                    "internalTitle": {locale: title},
                    "markdown": {locale: markdown},
                },
            }
        ],
        "assets": [],
        "locales": [],
    }


def write_import_document(document: dict[str, Any], path: Path | str) -> Path:
    """Write an import document as pretty-printed JSON.

    Args:
        document: Import document from build_import_document
        path: Destination file; parent directories are created

    Returns:
        Path of the written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=2, ensure_ascii=False)
    logger.info("Wrote import document with %d entry(ies) to %s", len(document["entries"]), path)
    return path
