# xiuchart/core/errors.py
from __future__ import annotations

__all__ = ["ChartError", "InvalidDate", "MalformedDescriptor", "UnknownMansion"]


class ChartError(ValueError):
    """Recoverable domain error; `code` is stable and safe to put on the wire."""

    code = "chart_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"{self.code}: {message}")


class InvalidDate(ChartError):
    """Calendar fields that do not name a real proleptic date (or year 0)."""

    code = "invalid_date"


class MalformedDescriptor(ChartError):
    """Boundary text that is not of the form '<name>宿<number>度'."""

    code = "malformed_descriptor"


class UnknownMansion(ChartError):
    """Descriptor names a mansion missing from the resolved table."""

    code = "unknown_mansion"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"mansion {name!r} is not in the longitude table")
