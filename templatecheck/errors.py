# templatecheck/errors.py

"""
Failure kinds raised inside the validation pipeline.

Each carries the user-facing message that ends up in a failed
ValidationResult; TemplateValidator is the only place that catches them.
"""
from __future__ import annotations

ERR_EMPTY_FILE = "empty file."
ERR_UNSUPPORTED_TYPE = "only CSV or Excel (xls/xlsx) files are allowed (detected MIME: {mime})"
ERR_FILE_PROCESS = "file processing error: {detail}"
ERR_CSV_ENCODING_UNKNOWN = "unable to determine the CSV encoding."
ERR_CSV_ENCODING_INVALID = "CSV must be UTF-8 (detected: {detected})"
ERR_CSV_EMPTY = "CSV content is empty."
ERR_XLSX_INVALID = "XLSX format error: {detail}"
ERR_XLSX_NO_SHEET = "no worksheet found"
ERR_XLS_INVALID = "XLS format error: {detail}"
ERR_EXCEL_INVALID = "Excel format error: {detail}"


class TemplateCheckError(Exception):
    """Base class; ``str(exc)`` is the message reported to the caller."""


class EmptyInput(TemplateCheckError):
    def __init__(self) -> None:
        super().__init__(ERR_EMPTY_FILE)


class UnsupportedType(TemplateCheckError):
    def __init__(self, mime: str | None) -> None:
        super().__init__(ERR_UNSUPPORTED_TYPE.format(mime=mime))
        self.mime = mime


class EncodingUndetermined(TemplateCheckError):
    def __init__(self) -> None:
        super().__init__(ERR_CSV_ENCODING_UNKNOWN)


class EncodingInvalid(TemplateCheckError):
    def __init__(self, detected: str) -> None:
        super().__init__(ERR_CSV_ENCODING_INVALID.format(detected=detected))
        self.detected = detected


class CsvContentEmpty(TemplateCheckError):
    def __init__(self) -> None:
        super().__init__(ERR_CSV_EMPTY)


class ExcelFormatError(TemplateCheckError):
    template = ERR_EXCEL_INVALID

    def __init__(self, detail: object) -> None:
        super().__init__(self.template.format(detail=detail))


class XlsxFormatError(ExcelFormatError):
    template = ERR_XLSX_INVALID


class XlsFormatError(ExcelFormatError):
    template = ERR_XLS_INVALID


class FileProcessingError(TemplateCheckError):
    def __init__(self, detail: object) -> None:
        super().__init__(ERR_FILE_PROCESS.format(detail=detail))
