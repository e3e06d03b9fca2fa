"""Shared pieces of the width allocation strategies."""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from allocators.errors import AllocationError, RowLengthError
from builders.table_content import TableContent
from utils.validator import SUM_TOLERANCE

logger = logging.getLogger(__name__)


@dataclass
class WidthAllocation:
    """Result of one strategy call: a column index → fraction-of-span map."""

    strategy: str
    fractions: dict[int, float]
    span: Optional[float] = None
    notes: list[str] = field(default_factory=list)
    report: dict[str, Any] = field(default_factory=dict)
    css: str = ""

    @property
    def total(self) -> float:
        return sum(self.fractions.values())

    @property
    def is_balanced(self) -> bool:
        if self.report:
            return bool(self.report.get("valid"))
        return abs(self.total - 1.0) <= SUM_TOLERANCE

    def percentages(self, precision: int = 2) -> dict[int, float]:
        return {
            column: round(fraction * 100, precision)
            for column, fraction in sorted(self.fractions.items())
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "strategy": self.strategy,
            "fractions": {str(c): f for c, f in sorted(self.fractions.items())},
            "span": self.span,
            "notes": list(self.notes),
            "report": self.report,
            "css": self.css,
        }


class WidthAllocator:
    """Base class for the strategies.

    Subclasses implement ``allocate(content, ...)`` and return a
    :class:`WidthAllocation`.  ``measurer`` and ``resolver`` are the
    measurement adapter and geometry resolver; a strategy that does not
    need one may receive ``None``.
    """

    name = ""

    def __init__(self, measurer: Any = None, resolver: Any = None) -> None:
        self.measurer = measurer
        self.resolver = resolver

    @staticmethod
    def check_content(content: TableContent) -> int:
        """Validate the table shape and return its column count."""
        count = content.column_count
        if count == 0:
            raise AllocationError("Table has no header cells; column count is zero")
        for index, row in enumerate(content.rows):
            if len(row) != count:
                raise RowLengthError(
                    f"Row {index} has {len(row)} cells, expected {count}",
                    row=index,
                )
        return count
