"""Shared fixtures: test doubles for the collaborators and workbook builders."""

import zipfile
from pathlib import Path
from typing import List, Optional, Tuple

import pytest
import xlwt
from openpyxl import Workbook
from openpyxl.chart import BarChart

from templatecheck.model import CharsetGuess

SPREADSHEET_MAIN = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet.main+xml"
WORD_MAIN = "application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"
PRESENTATION_MAIN = "application/vnd.openxmlformats-officedocument.presentationml.presentation.main+xml"


class FixedSniffer:
    """MIME sniffer double that always answers the same type."""

    def __init__(self, mime: str):
        self.mime = mime
        self.calls: List[Tuple[Path, Optional[str]]] = []

    def __call__(self, path: Path, filename: Optional[str] = None) -> str:
        self.calls.append((path, filename))
        return self.mime


class FixedCharset:
    """Charset detector double; `name=None` means the detector abstains."""

    def __init__(self, name: Optional[str], confidence: float = 0.9):
        self.name = name
        self.confidence = confidence
        self.samples: List[bytes] = []

    def __call__(self, sample: bytes) -> Optional[CharsetGuess]:
        self.samples.append(sample)
        if self.name is None:
            return None
        return CharsetGuess(self.name, self.confidence)


def write_ooxml(path: Path, main_content_type: Optional[str], extra_parts: Optional[dict] = None) -> Path:
    """Write a minimal OOXML-like zip whose manifest declares `main_content_type`."""
    overrides = ""
    if main_content_type:
        overrides = f'<Override PartName="/main.xml" ContentType="{main_content_type}"/>'
    manifest = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
        '<Default Extension="xml" ContentType="application/xml"/>'
        f"{overrides}</Types>"
    )
    with zipfile.ZipFile(path, "w") as z:
        z.writestr("[Content_Types].xml", manifest)
        z.writestr("main.xml", "<root/>")
        for name, data in (extra_parts or {}).items():
            z.writestr(name, data)
    return path


@pytest.fixture
def xlsx_file(tmp_path: Path) -> Path:
    wb = Workbook()
    ws = wb.active
    ws.title = "Template"
    ws.append(["name", "age"])
    ws.append(["Alice", 30])
    path = tmp_path / "template.xlsx"
    wb.save(path)
    return path


@pytest.fixture
def docx_file(tmp_path: Path) -> Path:
    return write_ooxml(tmp_path / "letter.docx", WORD_MAIN, {"word/document.xml": "<w:document/>"})


@pytest.fixture
def utf8_csv(tmp_path: Path) -> Path:
    path = tmp_path / "data.csv"
    path.write_bytes(b"a,b,c\n")
    return path


@pytest.fixture
def euckr_csv(tmp_path: Path) -> Path:
    rows = ["이름,나이,주소"] + [f"홍길동{i},{20 + i},서울특별시 강남구 테헤란로 {i}길" for i in range(40)]
    path = tmp_path / "korean.csv"
    path.write_bytes("\n".join(rows).encode("euc-kr"))
    return path


@pytest.fixture
def xls_file(tmp_path: Path) -> Path:
    book = xlwt.Workbook()
    sheet = book.add_sheet("Template")
    for col, value in enumerate(["name", "age"]):
        sheet.write(0, col, value)
    sheet.write(1, 0, "Alice")
    sheet.write(1, 1, 30)
    book.add_sheet("Notes")
    path = tmp_path / "legacy.xls"
    book.save(str(path))
    return path


@pytest.fixture
def chartsheet_only_xlsx(tmp_path: Path) -> Path:
    wb = Workbook()
    chart_sheet = wb.create_chartsheet("Chart")
    chart_sheet.add_chart(BarChart())
    wb.remove(wb["Sheet"])
    path = tmp_path / "chart.xlsx"
    wb.save(path)
    return path
