from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class ImageAnchor:
    source_row: int  # 1-based
    source_column: int  # 1-based
    data: bytes


@dataclass(frozen=True)
class FilteredRow:
    original_row: int
    new_index: int  # 0-based position in the filtered output
    values: dict[str, str]


@dataclass(frozen=True)
class RowImageBundle:
    new_index: int
    source_column: int
    data: bytes


@dataclass(frozen=True)
class ImageResult:
    """Outcome for one anchor on a kept row: a bundle, or the reason it was skipped."""

    source_row: int
    source_column: int
    bundle: Optional[RowImageBundle] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.bundle is not None


@dataclass(frozen=True)
class FilterResult:
    excel_base64: str
    json: str
    row_count: int = 0
    image_count: int = 0
    skipped_images: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"excelBase64": self.excel_base64, "json": self.json}
