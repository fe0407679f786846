from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

import openpyxl

from .errors import ValidationError
from .models import ImageAnchor

logger = logging.getLogger(__name__)


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class Worksheet:
    """Read-only snapshot of the first sheet of an uploaded workbook.

    Rows and columns are 1-based; row 1 is the header row. Cells are already
    converted to trimmed text.
    """

    row_count: int
    column_count: int
    rows: Tuple[Tuple[str, ...], ...]
    image_anchors: Tuple[ImageAnchor, ...] = field(default_factory=tuple)

    def cell_text(self, row: int, col: int) -> str:
        if row < 1 or col < 1 or row > len(self.rows):
            return ""
        values = self.rows[row - 1]
        if col > len(values):
            return ""
        return values[col - 1]


def _anchor_row_col(img) -> Tuple[Optional[int], Optional[int]]:
    anchor = getattr(img, "anchor", None)
    if not anchor:
        return None, None
    from_cell = getattr(anchor, "_from", None)
    if from_cell is not None:
        return from_cell.row + 1, from_cell.col + 1
    return None, None


def _image_bytes(img) -> bytes:
    # Loaded images keep the archive bytes in ref; _data() re-encodes bmp/tiff as png.
    ref = getattr(img, "ref", None)
    if hasattr(ref, "read"):
        ref.seek(0)
        return ref.read()
    return img._data()


def _read_anchors(ws) -> list[ImageAnchor]:
    anchors = []
    for idx, img in enumerate(getattr(ws, "_images", []) or [], start=1):
        row, col = _anchor_row_col(img)
        if row is None or col is None:
            logger.warning("Image #%d: no cell anchor, skipped", idx)
            continue
        try:
            data = _image_bytes(img)
        except Exception as exc:
            logger.warning("Image #%d at row %d: could not read image data (%s)", idx, row, exc)
            continue
        if not data:
            logger.warning("Image #%d at row %d: empty image data, skipped", idx, row)
            continue
        anchors.append(ImageAnchor(source_row=row, source_column=col, data=bytes(data)))
    return anchors


def _is_blank(rows) -> bool:
    return all(value == "" for row in rows for value in row)


def load_worksheet(file_bytes: bytes) -> Worksheet:
    if not file_bytes:
        raise ValidationError("No file uploaded")

    try:
        wb = openpyxl.load_workbook(io.BytesIO(file_bytes), data_only=True, keep_links=False)
    except Exception as exc:
        raise ValidationError(f"Could not open workbook: {exc}") from exc

    try:
        if not wb.worksheets:
            raise ValidationError("Worksheet is empty")
        ws = wb.worksheets[0]
        column_count = ws.max_column or 0
        rows = tuple(
            tuple(cell_text(value) for value in row)
            for row in ws.iter_rows(min_row=1, max_row=ws.max_row, max_col=column_count, values_only=True)
        )
        if not rows or _is_blank(rows):
            raise ValidationError("Worksheet is empty")
        anchors = _read_anchors(ws)
    finally:
        wb.close()

    logger.debug(
        "Loaded sheet with %d rows, %d columns, %d images", len(rows), column_count, len(anchors)
    )
    return Worksheet(
        row_count=len(rows),
        column_count=column_count,
        rows=rows,
        image_anchors=tuple(anchors),
    )
