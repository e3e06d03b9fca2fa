"""Even distribution with optional fixed-width columns."""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from allocators.base import SUM_TOLERANCE, WidthAllocation, WidthAllocator
from allocators.errors import FixedWidthError
from builders.table_content import TableContent
from utils.units import Length, is_percentage

logger = logging.getLogger(__name__)


class EvenWidthAllocator(WidthAllocator):
    """Sizes columns evenly, except for columns given a fixed width.

    ``column_widths`` is either a sequence aligned with the columns
    (``None`` or ``""`` for a flexible column, e.g. ``[None, "10mm"]``)
    or a mapping of column index to length.  Absolute lengths are
    converted independently of the page; percentage lengths are taken
    relative to the table span.
    """

    name = "evenly"

    def allocate(
        self,
        content: TableContent,
        table_width: Length = "100%",
        column_widths: Any = None,
    ) -> WidthAllocation:
        count = self.check_content(content)
        span = self.resolver.resolve_span(table_width)
        fixed = self._fixed_widths(column_widths, count)

        fractions: dict[int, Optional[float]] = {}
        for column in range(count):
            spec = fixed.get(column)
            if spec in (None, ""):
                fractions[column] = None
            elif is_percentage(spec):
                fractions[column] = self.resolver.provider.convert_length(spec, span) / span
            else:
                fractions[column] = self.resolver.provider.convert_length_absolute(spec) / span

        flexible = [c for c, f in fractions.items() if f is None]
        fixed_total = sum(f for f in fractions.values() if f is not None)

        if not flexible:
            raise FixedWidthError(
                f"All {count} columns have fixed widths; at least one must be flexible",
                column=count - 1,
            )
        if fixed_total >= 1.0 - SUM_TOLERANCE:
            widest = max(
                (c for c, f in fractions.items() if f is not None),
                key=lambda c: fractions[c],
            )
            raise FixedWidthError(
                f"Fixed column widths take {fixed_total * 100:.2f}% of the table; "
                f"column {widest} is the widest fixed column",
                column=widest,
            )

        share = (1.0 - fixed_total) / len(flexible)
        for column in flexible:
            fractions[column] = share

        logger.debug(
            "Evenly: %d fixed (%.4f), %d flexible at %.4f each",
            count - len(flexible), fixed_total, len(flexible), share,
        )
        return WidthAllocation(self.name, dict(fractions), span=span)

    @staticmethod
    def _fixed_widths(column_widths: Any, count: int) -> dict[int, Any]:
        if not column_widths:
            return {}
        if isinstance(column_widths, Mapping):
            items = [(int(k), v) for k, v in column_widths.items()]
        else:
            items = list(enumerate(column_widths))
        fixed = {}
        for column, spec in items:
            if spec in (None, ""):
                continue
            if not 0 <= column < count:
                raise FixedWidthError(
                    f"Fixed width given for column {column}, but the table has {count} columns",
                    column=column,
                )
            fixed[column] = spec
        return fixed
