# templatecheck/container.py

from __future__ import annotations
import logging
import zipfile
from pathlib import Path

logger = logging.getLogger(__name__)

MIME_XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
MIME_DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
MIME_PPTX = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

CONTENT_TYPES_ENTRY = "[Content_Types].xml"

# main-part content types declared in the manifest, checked in this order
_MAIN_PART_MIME = (
    ("spreadsheetml.sheet.main+xml", MIME_XLSX),
    ("wordprocessingml.document.main+xml", MIME_DOCX),
    ("presentationml.presentation.main+xml", MIME_PPTX),
)


def refine_ooxml_mime(p: Path, fallback_mime: str) -> str:
    """Resolve a generic OOXML/zip MIME into the document kind it really holds.

    Walks the archive entries until `[Content_Types].xml` and matches the
    declared main part. Never raises: anything that goes wrong yields
    `fallback_mime` unchanged.

    Args:
        p (Path): Zip-structured file.
        fallback_mime (str): MIME reported when nothing better is found.

    Returns:
        str: Refined MIME type or `fallback_mime`.
    """
    try:
        with zipfile.ZipFile(p, "r") as z:
            for info in z.infolist():
                if info.filename != CONTENT_TYPES_ENTRY:
                    continue
                xml = z.read(info).decode("utf-8", errors="replace")
                for marker, mime in _MAIN_PART_MIME:
                    if marker in xml:
                        return mime
                break
    except Exception as exc:
        logger.debug("Could not introspect %s as OOXML: %s", p, exc)
    return fallback_mime
