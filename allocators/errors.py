"""Exceptions raised while allocating column widths."""

from typing import Optional


class AllocationError(ValueError):
    """A table or its width configuration cannot be allocated.

    ``column`` and ``row`` identify the offending cell position when the
    problem is tied to one.
    """

    def __init__(
        self,
        message: str,
        column: Optional[int] = None,
        row: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.column = column
        self.row = row


class RowLengthError(AllocationError):
    """A body row does not have one cell per header column."""


class FixedWidthError(AllocationError):
    """Fixed column widths leave no room for the flexible columns."""


class AllocationOverflowError(AllocationError):
    """Strict mode: the computed fractions do not add up to the full span."""

    def __init__(self, message: str, report: dict) -> None:
        super().__init__(message)
        self.report = report
