# templatecheck/upload.py

"""
Upload inputs and the scoped on-disk copy made for each validation.

Uploads are only ever streamed: the validator never asks for the whole
content as bytes, so large files do not end up in memory.
"""
from __future__ import annotations
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, ContextManager, Iterator, Optional, Protocol

from .filetype import extension_of

logger = logging.getLogger(__name__)

TEMP_FILE_PREFIX = "upload-"
COPY_BUFFER_SIZE = 8192


class UploadedFile(Protocol):
    """What the validator needs from an uploaded file."""

    @property
    def filename(self) -> Optional[str]: ...

    @property
    def size(self) -> Optional[int]: ...

    def open(self) -> ContextManager[BinaryIO]: ...


@dataclass(frozen=True)
class LocalFile:
    """An upload backed by a file already on disk."""
    path: Path

    @property
    def filename(self) -> Optional[str]:
        return self.path.name

    @property
    def size(self) -> Optional[int]:
        return self.path.stat().st_size

    def open(self) -> ContextManager[BinaryIO]:
        return self.path.open("rb")


@dataclass
class StreamUpload:
    """An upload wrapping a binary stream owned by someone else.

    Typical source is a web framework's spooled upload (``UploadFile.file``,
    ``FileStorage.stream``). The stream is rewound before and after reading
    and is never closed here.
    """
    stream: BinaryIO
    filename: Optional[str] = None
    size: Optional[int] = None

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        seekable = self.stream.seekable()
        if seekable:
            self.stream.seek(0)
        try:
            yield self.stream
        finally:
            if seekable:
                self.stream.seek(0)


def is_empty(upload: Optional[UploadedFile]) -> bool:
    """True for a missing upload or one that declares a zero size."""
    return upload is None or upload.size == 0


def discard(p: Path) -> None:
    """Delete a file; a failure is logged and never raised."""
    try:
        if p.exists():
            p.unlink()
    except OSError as exc:
        logger.warning("Could not remove temporary file %s: %s", p, exc)


@contextmanager
def temp_copy(upload: UploadedFile, temp_dir: Optional[str] = None) -> Iterator[Path]:
    """Stream an upload to a temporary file that lives for the `with` block.

    The copy keeps the original extension as its suffix and is removed on
    every exit path.

    Args:
        upload (UploadedFile): Source upload.
        temp_dir (Optional[str]): Directory for the copy; system default if None.

    Yields:
        Path: Location of the copy.
    """
    ext = extension_of(upload.filename)
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S%f")[:-3]
    fd, name = tempfile.mkstemp(
        prefix=f"{TEMP_FILE_PREFIX}{timestamp}-",
        suffix=f".{ext}" if ext else "",
        dir=temp_dir,
    )
    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as dst, upload.open() as src:
            shutil.copyfileobj(src, dst, COPY_BUFFER_SIZE)
        yield path
    finally:
        discard(path)
