"""Weighted-average strategy.

Each column is sized by its average share of every row's total content
width.  Columns whose average falls below the minimum percentage are
clamped to it, and the shortfall is taken evenly from the other columns.
"""

import logging

from allocators.base import WidthAllocation, WidthAllocator
from builders.table_content import TableContent

logger = logging.getLogger(__name__)


class WeightedAverageAllocator(WidthAllocator):
    """Row-relative weighting with a per-column floor.

    The redistribution is single pass: columns pushed under the floor by
    the first share estimate are excluded once, and the second estimate
    is not checked again.
    """

    name = "weighting"

    def allocate(self, content: TableContent, min_percent: float = 6.5) -> WidthAllocation:
        count = self.check_content(content)
        floor = min_percent / 100
        notes: list[str] = []

        shares: list[list[float]] = [[] for _ in range(count)]
        for index, row in enumerate(content.iter_rows()):
            widths = [self.measurer.measure(cell.content) for cell in row]
            row_total = sum(widths)
            if row_total == 0:
                logger.debug("Weighting: skipping empty row %d", index)
                continue
            for column, width in enumerate(widths):
                shares[column].append(width / row_total)

        fractions: dict[int, float] = {}
        too_small: list[int] = []
        adjustment = 0.0
        for column in range(count):
            column_shares = shares[column]
            average = sum(column_shares) / len(column_shares) if column_shares else 0.0
            if average < floor:
                fractions[column] = floor
                adjustment += floor - average
                too_small.append(column)
            else:
                fractions[column] = average

        if adjustment > 0 and len(too_small) != count:
            portion = adjustment / (count - len(too_small))
            for column in range(count):
                if column in too_small:
                    continue
                if fractions[column] - portion < floor:
                    too_small.append(column)

        if adjustment > 0 and len(too_small) != count:
            portion = adjustment / (count - len(too_small))
            for column in range(count):
                if column not in too_small:
                    fractions[column] -= portion
            logger.debug(
                "Weighting: moved %.4f from %d columns (%.4f each)",
                adjustment, count - len(too_small), portion,
            )
        elif adjustment > 0:
            notes.append(
                f"All {count} columns are held at the {min_percent:g}% floor; "
                "no width could be redistributed"
            )

        return WidthAllocation(self.name, fractions, notes=notes)
