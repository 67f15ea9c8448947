# templatecheck/validator.py

"""
Entry point: validate an uploaded CSV/Excel template.

Pipeline: detect MIME, classify as CSV or EXCEL, then check the encoding and
non-emptiness of a CSV or the structure of a workbook. Every failure,
including unexpected I/O errors, comes back as a failed ValidationResult.
"""
from __future__ import annotations
import functools
import logging
from pathlib import Path
from typing import Callable, Optional, Union

from .encoding import chardet_detector, detect_charset, normalize_encoding
from .errors import (
    CsvContentEmpty,
    EmptyInput,
    FileProcessingError,
    TemplateCheckError,
    UnsupportedType,
)
from .excel import validate_excel
from .filetype import classify, detect_mime
from .model import CharsetDetector, FileType, Limits, MimeSniffer, ValidationResult
from .upload import UploadedFile, discard, is_empty, temp_copy

logger = logging.getLogger(__name__)

MSG_SUCCESS_CSV = "validation succeeded (CSV, {encoding})"
MSG_SUCCESS_EXCEL = "validation succeeded (Excel)"


def _default_sniffer() -> MimeSniffer:
    # libmagic is loaded only when no sniffer is supplied
    from .sniff import LibmagicSniffer
    return LibmagicSniffer()


class TemplateValidator:
    """Validates CSV/Excel templates.

    Holds only its collaborators and immutable limits, so a single instance
    can serve concurrent calls.

    Args:
        mime_sniffer (Optional[MimeSniffer]): Content-type detector; libmagic if None.
        charset_detector (Optional[CharsetDetector]): Charset guesser; chardet if None.
        limits (Optional[Limits]): Sample and chunk sizes.
        temp_dir (Optional[str]): Where upload copies are written.
    """

    def __init__(
        self,
        mime_sniffer: Optional[MimeSniffer] = None,
        charset_detector: Optional[CharsetDetector] = None,
        limits: Optional[Limits] = None,
        temp_dir: Optional[str] = None,
    ) -> None:
        self._sniffer = mime_sniffer or _default_sniffer()
        self._detector = charset_detector or chardet_detector
        self.limits = limits or Limits()
        self.temp_dir = temp_dir

    # --- public API -------------------------------------------------------------

    def validate(self, upload: Optional[UploadedFile]) -> ValidationResult:
        """Validate an uploaded file through a temporary on-disk copy."""
        def check() -> ValidationResult:
            if is_empty(upload):
                raise EmptyInput()
            with temp_copy(upload, self.temp_dir) as tmp:
                return self._check_file(tmp, upload.filename)

        return self._run(check)

    def validate_path(
        self,
        path: Union[str, Path, None],
        original_name: Optional[str] = None,
        delete_after: bool = False,
    ) -> ValidationResult:
        """Validate a file already on disk.

        Args:
            path (Union[str, Path, None]): File to validate.
            original_name (Optional[str]): Name used for extension checks;
                defaults to the file's own name.
            delete_after (bool): Remove the file once validation is done,
                whatever the outcome.

        Returns:
            ValidationResult: The outcome.
        """
        if path is None or not Path(path).exists():
            return ValidationResult.failure(str(EmptyInput()))
        p = Path(path)
        try:
            return self._run(lambda: self._check_file(p, original_name or p.name))
        finally:
            if delete_after:
                discard(p)

    # --- pipeline ---------------------------------------------------------------

    def _run(self, check: Callable[[], ValidationResult]) -> ValidationResult:
        try:
            result = check()
        except TemplateCheckError as exc:
            result = ValidationResult.failure(str(exc))
        except OSError as exc:
            result = ValidationResult.failure(str(FileProcessingError(exc)))
        except Exception as exc:
            logger.exception("Unexpected error while validating template")
            result = ValidationResult.failure(str(FileProcessingError(exc)))
        logger.debug("Validation result: %s", result)
        return result

    def _check_file(self, p: Path, name: Optional[str]) -> ValidationResult:
        if p.stat().st_size == 0:
            raise EmptyInput()
        mime = detect_mime(p, name, self._sniffer)
        file_type = classify(p, mime, name, self.limits.sniff_bytes)
        if file_type is None:
            raise UnsupportedType(mime)
        if file_type is FileType.CSV:
            return self._check_csv(p, mime)
        return self._check_excel(p, mime, name)

    def _check_csv(self, p: Path, mime: str) -> ValidationResult:
        detected = detect_charset(p, self._detector, self.limits.charset_sample_bytes)
        encoding = normalize_encoding(detected, p, self.limits.decode_chunk_chars)
        try:
            with p.open("r", encoding="utf-8-sig", newline="") as f:
                # one character is enough to know a first line exists
                first = f.read(1)
        except (OSError, UnicodeDecodeError) as exc:
            raise FileProcessingError(exc) from exc
        if not first:
            raise CsvContentEmpty()
        return ValidationResult.success(MSG_SUCCESS_CSV.format(encoding=encoding), mime, FileType.CSV, encoding)

    def _check_excel(self, p: Path, mime: str, name: Optional[str]) -> ValidationResult:
        validate_excel(p, name)
        return ValidationResult.success(MSG_SUCCESS_EXCEL, mime, FileType.EXCEL)


@functools.lru_cache(maxsize=None)
def default_validator() -> TemplateValidator:
    """Shared validator using libmagic and chardet."""
    return TemplateValidator()


def validate(upload: Optional[UploadedFile]) -> ValidationResult:
    return default_validator().validate(upload)


def validate_path(
    path: Union[str, Path, None],
    original_name: Optional[str] = None,
    delete_after: bool = False,
) -> ValidationResult:
    return default_validator().validate_path(path, original_name, delete_after)
