# templatecheck/filetype.py

from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

from .container import MIME_DOCX, MIME_PPTX, MIME_XLSX, refine_ooxml_mime
from .model import MIME_FALLBACK, FileType, MimeSniffer
from .sampler import read_head, strip_utf8_bom

logger = logging.getLogger(__name__)

MIME_XLS = "application/vnd.ms-excel"
MIME_TEXT_CSV = "text/csv"
MIME_TEXT_PLAIN = "text/plain"

# --- basic MIME/extension helpers ------------------------------------------------

_EXT_MIME = {
    "csv": MIME_TEXT_CSV,
    "txt": MIME_TEXT_PLAIN,
    "xls": MIME_XLS,
    "xlsx": MIME_XLSX,
    "docx": MIME_DOCX,
    "pptx": MIME_PPTX,
    "zip": "application/zip",
}

# zip-structured types that may hide a more specific OOXML document
_GENERIC_CONTAINER_MIMES = {
    "application/zip",
    "application/x-zip-compressed",
    "application/x-tika-ooxml",
    MIME_FALLBACK,
}

# types that say nothing about the document kind; the filename may tell more
_GENERIC_MIMES = _GENERIC_CONTAINER_MIMES | {
    "application/cdfv2",
    "application/cdfv2-corrupt",
    "application/x-ole-storage",
    "application/vnd.ms-office",
}

_CSV_DELIMITERS = (",", ";", "\t")
_LINE_BREAKS = ("\n", "\r")


def extension_of(name: Optional[str]) -> str:
    """Return the lowercase extension of a filename, without the dot."""
    if not name or "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


def _mime_of(ext: str) -> str:
    """Return the MIME type registered for a given file extension."""
    return _EXT_MIME.get(ext, MIME_FALLBACK)


# --- sniffers -------------------------------------------------------------------


def is_zip(head: bytes) -> bool:
    return head.startswith((b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08"))


def is_ole2(head: bytes) -> bool:
    return head.startswith(b"\xD0\xCF\x11\xE0\xA1\xB1\x1A\xE1")


def looks_like_csv(p: Path, sniff_bytes: int = 4096) -> bool:
    """Delimiter + line-break heuristic over the head of the file.

    The sample is decoded as Latin-1 so it never fails, whatever the real
    encoding is.
    """
    sample = strip_utf8_bom(read_head(p, sniff_bytes)).decode("latin-1")
    has_delimiter = any(d in sample for d in _CSV_DELIMITERS)
    has_newline = any(nl in sample for nl in _LINE_BREAKS)
    return has_delimiter and has_newline


def is_excel_mime(mime: Optional[str]) -> bool:
    if not mime:
        return False
    m = mime.lower()
    return m == MIME_XLS or m == MIME_XLSX


def is_csv_candidate(mime: Optional[str], p: Path, name: Optional[str], sniff_bytes: int = 4096) -> bool:
    """Decide whether a file should be treated as CSV.

    A MIME match alone is not trusted: it needs the extension or the content
    to agree. Extension and content agreeing is enough on their own.

    Args:
        mime (Optional[str]): Detected MIME type.
        p (Path): File on disk.
        name (Optional[str]): Original filename.
        sniff_bytes (int): Size of the head sample for the content heuristic.

    Returns:
        bool: True if the file is a CSV candidate.
    """
    m = (mime or "").lower()
    # some CSV files are detected as the legacy Excel type
    by_mime = m in (MIME_TEXT_CSV, MIME_TEXT_PLAIN, MIME_XLS)
    by_extension = extension_of(name) == "csv"
    by_content = looks_like_csv(p, sniff_bytes)
    return (by_mime and (by_extension or by_content)) or (by_extension and by_content)


# --- public API -----------------------------------------------------------------


def detect_mime(p: Path, name: Optional[str], sniffer: MimeSniffer) -> str:
    """Detect the MIME type of a file, refining generic container answers.

    Generic zip/OOXML answers are resolved through the container manifest.
    When the answer is still generic, the type registered for the original
    filename's extension is used as the hint.
    """
    try:
        mime = sniffer(p, name) or MIME_FALLBACK
    except Exception as exc:
        logger.debug("MIME sniffer failed on %s: %s", p, exc)
        mime = MIME_FALLBACK

    if mime.lower() in _GENERIC_CONTAINER_MIMES:
        mime = refine_ooxml_mime(p, mime)

    if mime.lower() in _GENERIC_MIMES:
        hinted = _mime_of(extension_of(name))
        if hinted != MIME_FALLBACK:
            logger.debug("Generic MIME %s for %s, using filename hint %s", mime, name, hinted)
            mime = hinted
    return mime


def classify(p: Path, mime: Optional[str], name: Optional[str], sniff_bytes: int = 4096) -> Optional[FileType]:
    """Classify a file as CSV or EXCEL, or None when it is neither.

    The CSV decision wins over an Excel MIME match, which covers CSV files
    reported as the legacy Excel type.
    """
    is_excel = is_excel_mime(mime)
    is_csv = is_csv_candidate(mime, p, name, sniff_bytes)
    if not is_excel and not is_csv:
        return None
    return FileType.CSV if is_csv else FileType.EXCEL
