from __future__ import annotations

from .errors import DecodeError, ExcelFilterError, ValidationError
from .service import filter_workbook

__all__ = [
    "DecodeError",
    "ExcelFilterError",
    "ValidationError",
    "filter_workbook",
]
