from __future__ import annotations

import logging
from typing import Optional

from .config import ALL_MARKER, EXCEPT_MARKER
from .errors import ValidationError
from .models import FilteredRow
from .reader import Worksheet

logger = logging.getLogger(__name__)


def read_headers(ws: Worksheet) -> list[str]:
    return [ws.cell_text(1, col) for col in range(1, ws.column_count + 1)]


def resolve_column(ws: Worksheet, column_name: Optional[str]) -> tuple[list[str], int]:
    """Return the header row and the 1-based index of ``column_name``.

    Lookup is case sensitive and the first matching header wins when names repeat.
    """
    name = (column_name or "").strip()
    if not name:
        raise ValidationError("ColumnName is required")

    headers = read_headers(ws)
    if name not in headers:
        raise ValidationError(f"Column '{name}' not found")
    return headers, headers.index(name) + 1


def row_matches(text: str, filter_value: str) -> bool:
    include = filter_value in text or ALL_MARKER in text
    if include and EXCEPT_MARKER in text and filter_value in text:
        include = False
    return include


def filter_rows(
    ws: Worksheet,
    headers: list[str],
    column_index: int,
    filter_value: Optional[str],
) -> list[FilteredRow]:
    # An empty filter value is a substring of everything: all non-excepted rows match.
    filter_value = filter_value or ""

    kept: list[FilteredRow] = []
    for row in range(2, ws.row_count + 1):
        if not row_matches(ws.cell_text(row, column_index), filter_value):
            continue
        values = {}
        for col, header in enumerate(headers, start=1):
            values[header] = ws.cell_text(row, col)
        kept.append(FilteredRow(original_row=row, new_index=len(kept), values=values))

    logger.debug("Kept %d of %d data rows", len(kept), max(ws.row_count - 1, 0))
    return kept
