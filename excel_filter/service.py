from __future__ import annotations

import base64
import json
import logging
from typing import Any, Iterable, Optional

from .config import IMAGES_KEY
from .filtering import filter_rows, resolve_column
from .images import associate_images, bundles_by_index
from .models import FilteredRow, FilterResult, RowImageBundle
from .reader import load_worksheet
from .writer import write_workbook

logger = logging.getLogger(__name__)


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def build_projection(
    rows: Iterable[FilteredRow],
    bundles: Iterable[RowImageBundle] = (),
) -> list[dict[str, Any]]:
    images = bundles_by_index(bundles)
    projection = []
    for row in rows:
        item: dict[str, Any] = dict(row.values)
        row_images = images.get(row.new_index)
        if row_images:
            item[IMAGES_KEY] = [_b64(bundle.data) for bundle in row_images]
        projection.append(item)
    return projection


def assemble_result(
    workbook_bytes: bytes,
    projection: list[dict[str, Any]],
    skipped_images: Optional[list[str]] = None,
) -> FilterResult:
    return FilterResult(
        excel_base64=_b64(workbook_bytes),
        json=json.dumps(projection, separators=(",", ":")),
        row_count=len(projection),
        image_count=sum(len(item.get(IMAGES_KEY, ())) for item in projection),
        skipped_images=list(skipped_images or []),
    )


def filter_workbook(
    file_bytes: bytes,
    column_name: Optional[str],
    filter_value: Optional[str],
) -> FilterResult:
    """Filter the first sheet of ``file_bytes`` and re-export the kept rows.

    Returns the new workbook (base64) together with a JSON projection of the
    same rows. Raises ``ValidationError`` for unusable input; images that fail
    to decode are skipped and reported in ``FilterResult.skipped_images``.
    """
    ws = load_worksheet(file_bytes)
    headers, column_index = resolve_column(ws, column_name)
    rows = filter_rows(ws, headers, column_index, filter_value)

    results = associate_images(ws.image_anchors, rows)
    bundles = [result.bundle for result in results if result.ok]
    skipped = [
        "row {0}, column {1}: {2}".format(result.source_row, result.source_column, result.error)
        for result in results
        if not result.ok
    ]

    projection = build_projection(rows, bundles)
    workbook_bytes = write_workbook(headers, rows, bundles)
    result = assemble_result(workbook_bytes, projection, skipped)

    logger.info(
        "Filtered column %r: kept %d of %d rows, %d images, %d skipped",
        headers[column_index - 1],
        result.row_count,
        max(ws.row_count - 1, 0),
        result.image_count,
        len(result.skipped_images),
    )
    return result
