from __future__ import annotations


class ExcelFilterError(Exception):
    """Base class for errors raised while filtering a workbook."""


class ValidationError(ExcelFilterError):
    """The upload or its parameters cannot be processed; reported to the caller."""


class DecodeError(ExcelFilterError):
    """A single embedded image could not be decoded."""
