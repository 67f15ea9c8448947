# templatecheck/encoding.py

"""
CSV encoding detection and normalization.

Only UTF-8, with or without a byte-order mark, is accepted. The statistical
guess from the charset detector is a hint: a BOM always wins over it, and a
strict decode of the whole file overrides a non-UTF-8 guess.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

import chardet

from .errors import EncodingInvalid, EncodingUndetermined
from .model import ENC_UTF8, ENC_UTF8_BOM, CharsetDetector, CharsetGuess
from .sampler import has_utf8_bom, read_head

logger = logging.getLogger(__name__)

# names a detector may use for UTF-8 with a signature
_BOM_ALIASES = {"utf-8-sig", ENC_UTF8_BOM.lower()}


def chardet_detector(sample: bytes) -> Optional[CharsetGuess]:
    """Guess the charset of `sample` with chardet; None when it abstains."""
    if not sample:
        return None
    guess = chardet.detect(sample)
    name = guess.get("encoding")
    if not name:
        return None
    return CharsetGuess(name=name, confidence=float(guess.get("confidence") or 0.0))


def detect_charset(p: Path, detector: CharsetDetector, sample_bytes: int = 1_000_000) -> Optional[str]:
    """Run the charset detector over the head of a file.

    Args:
        p (Path): File to sample.
        detector (CharsetDetector): Statistical charset guesser.
        sample_bytes (int): Maximum sample size.

    Returns:
        Optional[str]: Detected charset name, or None if there is no usable match.
    """
    sample = read_head(p, sample_bytes)
    if not sample:
        return None
    try:
        guess = detector(sample)
    except Exception as exc:
        logger.debug("Charset detection failed on %s: %s", p, exc)
        return None
    if guess is None or guess.confidence <= 0:
        return None
    return guess.name


def _decodes_as_utf8(p: Path, chunk_chars: int) -> bool:
    try:
        with p.open("r", encoding="utf-8", errors="strict", newline="") as f:
            while f.read(chunk_chars):
                pass
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Strict UTF-8 decode of %s failed: %s", p, exc)
        return False
    return True


def normalize_encoding(detected: Optional[str], p: Path, chunk_chars: int = 8192) -> str:
    """Map a detector guess onto one of the accepted canonical encodings.

    Args:
        detected (Optional[str]): Charset name from the detector, if any.
        p (Path): The CSV file.
        chunk_chars (int): Read size for the full-file confirming decode.

    Returns:
        str: ``"UTF-8"`` or ``"UTF-8 (with BOM)"``.

    Raises:
        EncodingUndetermined: No BOM and no detector match.
        EncodingInvalid: The file is not UTF-8; the message names `detected`.
    """
    if has_utf8_bom(read_head(p, 4)):
        return ENC_UTF8_BOM
    if detected is None:
        raise EncodingUndetermined()

    name = detected.strip().lower()
    if name == "utf-8":
        return ENC_UTF8
    if name in _BOM_ALIASES:
        return ENC_UTF8_BOM

    if _decodes_as_utf8(p, chunk_chars):
        logger.debug("Detector guessed %s for %s but it decodes as UTF-8", detected, p)
        return ENC_UTF8
    raise EncodingInvalid(detected)
