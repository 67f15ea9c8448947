# templatecheck/walk.py

from __future__ import annotations
from pathlib import Path
from typing import Iterator


def iter_candidates(root: Path) -> Iterator[Path]:
    """Yield the files to validate under a path, in a stable order.

    A file is yielded as-is. A directory is walked recursively; hidden files
    and anything inside hidden directories are skipped.

    Args:
        root (Path): File or directory to scan.

    Yields:
        Path: Paths to each candidate file.
    """
    if root.is_file():
        yield root
        return

    for p in sorted(root.rglob("*")):
        rel = p.relative_to(root)
        if any(part.startswith(".") for part in rel.parts):
            continue
        if p.is_file():
            yield p
