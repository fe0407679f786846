from __future__ import annotations

import io
import logging
from collections import defaultdict
from typing import Iterable

from PIL import Image

from .errors import DecodeError
from .models import FilteredRow, ImageAnchor, ImageResult, RowImageBundle

logger = logging.getLogger(__name__)


def check_image(data: bytes) -> None:
    if not data:
        raise DecodeError("empty image data")
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
    except Exception as exc:
        raise DecodeError(f"could not decode image: {exc}") from exc


def group_by_row(anchors: Iterable[ImageAnchor]) -> dict[int, list[ImageAnchor]]:
    by_row: dict[int, list[ImageAnchor]] = defaultdict(list)
    for anchor in anchors:
        by_row[anchor.source_row].append(anchor)
    return by_row


def associate_images(
    anchors: Iterable[ImageAnchor],
    rows: Iterable[FilteredRow],
) -> list[ImageResult]:
    """Carry images on kept rows forward to the rows' new positions.

    Anchors on rows that were filtered out are dropped. An anchor whose bytes
    do not decode comes back as a skipped result instead of failing the batch.
    """
    by_row = group_by_row(anchors)
    results = []
    for row in rows:
        for anchor in by_row.get(row.original_row, ()):
            try:
                check_image(anchor.data)
            except DecodeError as exc:
                logger.warning(
                    "Image at row %d, column %d skipped: %s",
                    anchor.source_row,
                    anchor.source_column,
                    exc,
                )
                results.append(
                    ImageResult(
                        source_row=anchor.source_row,
                        source_column=anchor.source_column,
                        error=str(exc),
                    )
                )
                continue
            results.append(
                ImageResult(
                    source_row=anchor.source_row,
                    source_column=anchor.source_column,
                    bundle=RowImageBundle(
                        new_index=row.new_index,
                        source_column=anchor.source_column,
                        data=anchor.data,
                    ),
                )
            )
    return results


def bundles_by_index(bundles: Iterable[RowImageBundle]) -> dict[int, list[RowImageBundle]]:
    by_index: dict[int, list[RowImageBundle]] = defaultdict(list)
    for bundle in bundles:
        by_index[bundle.new_index].append(bundle)
    return by_index
