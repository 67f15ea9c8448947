import pytest

from templatecheck.encoding import chardet_detector, detect_charset, normalize_encoding
from templatecheck.errors import EncodingInvalid, EncodingUndetermined
from templatecheck.model import ENC_UTF8, ENC_UTF8_BOM

from conftest import FixedCharset


def _write(tmp_path, data: bytes, name="data.csv"):
    path = tmp_path / name
    path.write_bytes(data)
    return path


def test_bom_wins_over_any_guess(tmp_path):
    path = _write(tmp_path, b"\xef\xbb\xbfa,b\n")
    assert normalize_encoding("EUC-KR", path) == ENC_UTF8_BOM
    assert normalize_encoding(None, path) == ENC_UTF8_BOM


def test_no_guess_and_no_bom_is_undetermined(utf8_csv):
    with pytest.raises(EncodingUndetermined):
        normalize_encoding(None, utf8_csv)


@pytest.mark.parametrize("detected, expected", [
    ("utf-8", ENC_UTF8),
    ("UTF-8", ENC_UTF8),
    ("UTF-8-SIG", ENC_UTF8_BOM),
    ("utf-8 (with bom)", ENC_UTF8_BOM),
])
def test_utf8_names_are_canonicalized(utf8_csv, detected, expected):
    assert normalize_encoding(detected, utf8_csv) == expected


def test_other_guess_overridden_by_successful_decode(tmp_path):
    path = _write(tmp_path, "이름,나이\n홍길동,30\n".encode("utf-8"))
    assert normalize_encoding("ISO-8859-1", path) == ENC_UTF8
    assert normalize_encoding("ascii", path) == ENC_UTF8


def test_non_utf8_content_is_invalid(euckr_csv):
    with pytest.raises(EncodingInvalid) as exc_info:
        normalize_encoding("EUC-KR", euckr_csv, chunk_chars=16)
    assert exc_info.value.detected == "EUC-KR"
    assert "EUC-KR" in str(exc_info.value)


def test_invalid_byte_past_the_first_chunk_is_caught(tmp_path):
    path = _write(tmp_path, b"a,b\n" * 5000 + b"\xff\n")
    with pytest.raises(EncodingInvalid):
        normalize_encoding("windows-1252", path, chunk_chars=1024)


def test_detect_charset_returns_name(utf8_csv):
    detector = FixedCharset("UTF-8", 0.8)
    assert detect_charset(utf8_csv, detector) == "UTF-8"
    assert detector.samples == [b"a,b,c\n"]


def test_detect_charset_samples_only_the_head(tmp_path):
    path = _write(tmp_path, b"x" * 100)
    detector = FixedCharset("ascii")
    detect_charset(path, detector, sample_bytes=10)
    assert detector.samples == [b"x" * 10]


@pytest.mark.parametrize("detector", [
    FixedCharset(None),
    FixedCharset("EUC-KR", 0.0),
])
def test_detect_charset_without_usable_match(utf8_csv, detector):
    assert detect_charset(utf8_csv, detector) is None


def test_detect_charset_empty_file_skips_detector(tmp_path):
    detector = FixedCharset("UTF-8")
    assert detect_charset(_write(tmp_path, b""), detector) is None
    assert detector.samples == []


def test_detect_charset_survives_detector_failure(utf8_csv):
    def exploding(sample):
        raise ValueError("bad sample")

    assert detect_charset(utf8_csv, exploding) is None


def test_chardet_detector_on_ascii():
    guess = chardet_detector(b"a,b,c\n1,2,3\n")
    assert guess is not None
    assert guess.name.lower() == "ascii"
    assert guess.confidence > 0


def test_chardet_detector_abstains_on_empty_input():
    assert chardet_detector(b"") is None


def test_chardet_detector_never_consults_chardet_on_empty_input(monkeypatch):
    # newer chardet releases answer a low-confidence utf-8 for b""
    monkeypatch.setattr(
        "templatecheck.encoding.chardet.detect",
        lambda sample: {"encoding": "utf-8", "confidence": 0.1},
    )
    assert chardet_detector(b"") is None
    assert chardet_detector(b"a,b\n").name == "utf-8"
