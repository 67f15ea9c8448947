# templatecheck/excel.py

"""
Shallow structural checks for Excel workbooks.

Each check proves that the container or record stream opens and parses; no
cell data is inspected or kept in memory. The check is chosen by the
original filename's extension, not by the sniffed MIME type.
"""
from __future__ import annotations
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

import xlrd
from openpyxl import load_workbook

from .errors import ERR_XLSX_NO_SHEET, ExcelFormatError, XlsFormatError, XlsxFormatError
from .filetype import extension_of, is_ole2, is_zip
from .sampler import read_head

logger = logging.getLogger(__name__)


class _XlrdLog:
    """File-like sink that sends xlrd diagnostics to logging instead of stdout."""

    def write(self, text: str) -> None:
        text = text.strip()
        if text:
            logger.debug("xlrd: %s", text)

    def flush(self) -> None:
        pass


_XLRD_LOG = _XlrdLog()


# --- openers --------------------------------------------------------------------


@contextmanager
def _open_xlsx(p: Path) -> Iterator[Any]:
    # a file object skips openpyxl's filename-extension check
    with p.open("rb") as fh:
        wb = load_workbook(fh, read_only=True, data_only=True, keep_links=False)
        try:
            yield wb
        finally:
            wb.close()


@contextmanager
def _open_xls(p: Path) -> Iterator[Any]:
    book = xlrd.open_workbook(str(p), on_demand=True, logfile=_XLRD_LOG)
    try:
        yield book
    finally:
        book.release_resources()


@contextmanager
def open_workbook(p: Path) -> Iterator[Any]:
    """Open a workbook of either format, picked from its signature.

    Yields an openpyxl read-only workbook for zip containers and an xlrd
    book for OLE2 compound files.

    Raises:
        ValueError: The file carries neither signature.
    """
    head = read_head(p, 8)
    if is_zip(head):
        opener = _open_xlsx
    elif is_ole2(head):
        opener = _open_xls
    else:
        raise ValueError("unrecognized workbook format")
    with opener(p) as wb:
        yield wb


# --- checks ---------------------------------------------------------------------


def validate_xlsx(p: Path) -> None:
    """Open the package read-only and touch the first row of the first sheet.

    Raises:
        XlsxFormatError: The package cannot be read or holds no worksheet.
    """
    try:
        with _open_xlsx(p) as wb:
            # chartsheets count as sheets; only worksheets have rows
            if not wb.sheetnames:
                raise XlsxFormatError(ERR_XLSX_NO_SHEET)
            if wb.worksheets:
                next(wb.worksheets[0].iter_rows(max_row=1, values_only=True), None)
    except XlsxFormatError:
        raise
    except Exception as exc:
        raise XlsxFormatError(exc) from exc


def validate_xls(p: Path) -> None:
    """Parse the whole BIFF record stream of a legacy workbook.

    Sheets are loaded one at a time and released immediately, so every record
    is read without keeping cell data around.

    Raises:
        XlsFormatError: The compound file or its Workbook stream is invalid.
    """
    try:
        with _open_xls(p) as book:
            for index in range(book.nsheets):
                book.sheet_by_index(index)
                book.unload_sheet(index)
    except Exception as exc:
        raise XlsFormatError(exc) from exc


def validate_any_workbook(p: Path) -> None:
    try:
        with open_workbook(p):
            pass
    except Exception as exc:
        raise ExcelFormatError(exc) from exc


def validate_excel(p: Path, name: Optional[str]) -> None:
    """Dispatch to the structural check matching the original filename."""
    ext = extension_of(name)
    if ext == "xlsx":
        validate_xlsx(p)
    elif ext == "xls":
        validate_xls(p)
    else:
        logger.debug("No Excel extension on %r, probing workbook format", name)
        validate_any_workbook(p)
