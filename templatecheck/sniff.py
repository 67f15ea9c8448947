# templatecheck/sniff.py

"""
Default MIME sniffer backed by libmagic (python-magic).

Any callable shaped ``(path, filename_hint) -> mime`` that never raises can
stand in for it.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

import magic

from .model import MIME_FALLBACK

logger = logging.getLogger(__name__)


class LibmagicSniffer:
    """Content-based MIME detection through libmagic."""

    def __init__(self) -> None:
        self._magic = magic.Magic(mime=True)

    def __call__(self, path: Path, filename: Optional[str] = None) -> str:
        # libmagic only looks at content; the filename hint is applied by the caller
        try:
            out = self._magic.from_file(str(path))
        except (OSError, magic.MagicException) as exc:
            logger.debug("libmagic failed on %s: %s", path, exc)
            return MIME_FALLBACK
        if not out:
            return MIME_FALLBACK
        # strip parameters: "text/plain; charset=us-ascii"
        return out.split(";")[0].strip()
