# templatecheck/model.py

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

ENC_UTF8 = "UTF-8"
ENC_UTF8_BOM = "UTF-8 (with BOM)"

MIME_FALLBACK = "application/octet-stream"


class FileType(str, Enum):
    """Supported template formats."""
    CSV = "CSV"
    EXCEL = "EXCEL"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one uploaded template."""
    ok: bool
    message: str
    mime_type: Optional[str] = None
    file_type: Optional[FileType] = None
    encoding: Optional[str] = None  # CSV only

    @classmethod
    def success(
        cls,
        message: str,
        mime_type: Optional[str],
        file_type: FileType,
        encoding: Optional[str] = None,
    ) -> "ValidationResult":
        if file_type is not FileType.CSV:
            encoding = None
        return cls(True, message, mime_type, file_type, encoding)

    @classmethod
    def failure(cls, message: str) -> "ValidationResult":
        return cls(False, message)


@dataclass(frozen=True)
class CharsetGuess:
    """Best guess returned by a charset detector."""
    name: str
    confidence: float  # between 0 and 1


# (path, original filename) -> MIME type; must not raise
MimeSniffer = Callable[[Path, Optional[str]], str]
# head sample -> best guess, or None when the detector abstains
CharsetDetector = Callable[[bytes], Optional[CharsetGuess]]


@dataclass(frozen=True)
class Limits:
    """Byte and chunk sizes used while sniffing a file."""
    sniff_bytes: int = 4096
    charset_sample_bytes: int = 1_000_000
    decode_chunk_chars: int = 8192


@dataclass
class ScanRow:
    """Represents a row in the validation report CSV."""
    path: str
    size_bytes: int
    ok: bool
    file_type: str    # CSV | EXCEL | empty on failure
    mime_type: str
    encoding: str
    message: str
    elapsed_ms: float
