# templatecheck/sampler.py

from __future__ import annotations
from pathlib import Path

UTF8_BOM = b"\xEF\xBB\xBF"


def read_head(p: Path, size: int) -> bytes:
    """Read at most `size` leading bytes of a file.

    Args:
        p (Path): File to sample.
        size (int): Upper bound on the number of bytes returned.

    Returns:
        bytes: The sample; empty if the file cannot be read.
    """
    try:
        with p.open("rb") as f:
            return f.read(size)
    except OSError:
        return b""


def has_utf8_bom(head: bytes) -> bool:
    return head.startswith(UTF8_BOM)


def strip_utf8_bom(head: bytes) -> bytes:
    return head[len(UTF8_BOM):] if has_utf8_bom(head) else head
