from __future__ import annotations

import io
import logging
from typing import Iterable, Sequence

from openpyxl import Workbook
from openpyxl.drawing.image import Image as ExcelImage
from openpyxl.drawing.spreadsheet_drawing import AnchorMarker, OneCellAnchor
from openpyxl.drawing.xdr import XDRPositiveSize2D
from openpyxl.styles import Alignment, Font
from openpyxl.utils.units import pixels_to_EMU

from .config import (
    DEFAULT_COLUMN_WIDTH,
    DEFAULT_ROW_HEIGHT,
    IMAGE_HEIGHT_PX,
    IMAGE_OFFSET_PX,
    IMAGE_WIDTH_PX,
    OUTPUT_SHEET_TITLE,
)
from .models import FilteredRow, RowImageBundle

logger = logging.getLogger(__name__)

HEADER_FONT = Font(bold=True)
HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center")
DATA_ALIGNMENT = Alignment(horizontal="center", vertical="center", wrap_text=True)


def image_anchor(bundle: RowImageBundle) -> OneCellAnchor:
    # Marker rows/cols are 0-based: row new_index + 1 is the data row under the header.
    marker = AnchorMarker(
        col=bundle.source_column - 1,
        colOff=pixels_to_EMU(IMAGE_OFFSET_PX),
        row=bundle.new_index + 1,
        rowOff=pixels_to_EMU(IMAGE_OFFSET_PX),
    )
    size = XDRPositiveSize2D(pixels_to_EMU(IMAGE_WIDTH_PX), pixels_to_EMU(IMAGE_HEIGHT_PX))
    return OneCellAnchor(_from=marker, ext=size)


def _add_image(ws, bundle: RowImageBundle) -> bool:
    try:
        img = ExcelImage(io.BytesIO(bundle.data))
    except Exception as exc:
        logger.warning(
            "Failed to copy image for row %d, column %d: %s",
            bundle.new_index,
            bundle.source_column,
            exc,
        )
        return False
    img.width = IMAGE_WIDTH_PX
    img.height = IMAGE_HEIGHT_PX
    img.anchor = image_anchor(bundle)
    ws.add_image(img)
    return True


def write_workbook(
    headers: Sequence[str],
    rows: Iterable[FilteredRow],
    bundles: Iterable[RowImageBundle] = (),
) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = OUTPUT_SHEET_TITLE
    ws.sheet_format.defaultColWidth = DEFAULT_COLUMN_WIDTH
    ws.sheet_format.defaultRowHeight = DEFAULT_ROW_HEIGHT
    ws.sheet_format.customHeight = True

    for col, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = HEADER_FONT
        cell.alignment = HEADER_ALIGNMENT

    for row in rows:
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=row.new_index + 2, column=col, value=row.values[header])
            cell.alignment = DATA_ALIGNMENT

    placed = sum(1 for bundle in bundles if _add_image(ws, bundle))
    logger.debug("Placed %d images on sheet %r", placed, OUTPUT_SHEET_TITLE)

    out = io.BytesIO()
    wb.save(out)
    wb.close()
    return out.getvalue()
