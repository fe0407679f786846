from __future__ import annotations

import io
import zipfile
from typing import Callable, Iterable, Optional

import openpyxl
import pytest
from openpyxl.drawing.image import Image as ExcelImage
from openpyxl.utils import get_column_letter
from PIL import Image


def png_bytes(color: str = "red", size: tuple[int, int] = (8, 8)) -> bytes:
    out = io.BytesIO()
    Image.new("RGB", size, color).save(out, format="PNG")
    return out.getvalue()


def make_workbook(
    rows: list[list[object]],
    images: Optional[Iterable[tuple[int, int, bytes]]] = None,
) -> bytes:
    """Build an .xlsx in memory. ``images`` holds (row, col, data) with 1-based row/col."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Data"
    for row in rows:
        ws.append(row)
    for row, col, data in images or ():
        ws.add_image(ExcelImage(io.BytesIO(data)), f"{get_column_letter(col)}{row}")
    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()


def replace_media(data: bytes, old: bytes, new: bytes) -> bytes:
    """Swap the payload of every xl/media part whose bytes equal ``old``."""
    out = io.BytesIO()
    with zipfile.ZipFile(io.BytesIO(data)) as src, zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as dst:
        for item in src.infolist():
            payload = src.read(item.filename)
            if item.filename.startswith("xl/media/") and payload == old:
                payload = new
            dst.writestr(item, payload)
    return out.getvalue()


def load_output(data: bytes):
    return openpyxl.load_workbook(io.BytesIO(data))


@pytest.fixture
def red_png() -> bytes:
    return png_bytes("red")


@pytest.fixture
def blue_png() -> bytes:
    return png_bytes("blue")


@pytest.fixture
def workbook_factory() -> Callable[..., bytes]:
    return make_workbook


@pytest.fixture
def staff_rows() -> list[list[object]]:
    return [
        ["Name", "Dept", "Note"],
        ["Alice", "Sales", "first"],
        ["Bob", "HR", None],
        ["Carol", "כולם", "all staff"],
        ["Dan", "Sales, HR", 42],
        ["Eve", "כולם חוץ Sales", "everyone but sales"],
        ["Frank", "IT", "last"],
    ]
