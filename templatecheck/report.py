# templatecheck/report.py

from __future__ import annotations
import csv
from pathlib import Path
from typing import Iterable, List

from .model import ScanRow, ValidationResult

_MISSING = "<none>"


def format_result(result: ValidationResult) -> str:
    """Render a validation result as indented `field: value` lines."""
    lines: List[str] = [
        f"   - ok: {'yes' if result.ok else 'no'}",
        f"   - message: {result.message}",
        f"   - mime_type: {result.mime_type or _MISSING}",
        f"   - file_type: {result.file_type.value if result.file_type else _MISSING}",
        f"   - encoding: {result.encoding or _MISSING}",
    ]
    return "\n".join(lines)


def format_size(size_bytes: int) -> str:
    return f"{size_bytes:,} bytes ({size_bytes / (1024 * 1024):.2f} MB)"


def to_row(path: Path, size_bytes: int, result: ValidationResult, elapsed_ms: float) -> ScanRow:
    return ScanRow(
        path=str(path),
        size_bytes=size_bytes,
        ok=result.ok,
        file_type=result.file_type.value if result.file_type else "",
        mime_type=result.mime_type or "",
        encoding=result.encoding or "",
        message=result.message,
        elapsed_ms=elapsed_ms,
    )


def write_csv(out_path: Path, rows: Iterable[ScanRow]) -> None:
    """Write validation results to a CSV file.

    Args:
        out_path (Path): Destination CSV file path.
        rows (Iterable[ScanRow]): One row per validated file.

    Returns:
        None
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "path", "size_bytes", "ok", "file_type", "mime_type",
            "encoding", "message", "elapsed_ms"
        ])
        for r in rows:
            writer.writerow([
                r.path,
                r.size_bytes,
                str(r.ok).lower(),
                r.file_type,
                r.mime_type,
                r.encoding,
                r.message,
                f"{r.elapsed_ms:.2f}",
            ])
