"""Minimum-content strategy.

Every column first gets the width of its longest unbreakable word.  Any
room left over goes to the columns whose full content is much wider than
their longest word, since those are the ones that wrap.
"""

import logging
import re

from allocators.base import WidthAllocation, WidthAllocator
from analyzers.text_measurer import strip_tags
from builders.table_content import TableContent
from utils.units import Length

logger = logging.getLogger(__name__)

_WORD_SPLIT_RE = re.compile(r"[\s,.?]+")


def _longest_token(plain_text: str) -> str:
    return max(_WORD_SPLIT_RE.split(plain_text), key=len)


def longest_word(text: str) -> str:
    """Longest whitespace/punctuation delimited token of *text* (first on ties)."""
    return _longest_token(strip_tags(text))


class MinimumContentAllocator(WidthAllocator):
    """Longest-word floor plus proportional expansion.

    ``pad_string`` is prepended to every measured sample to account for
    cell padding and styling that raw text measurement does not see.
    """

    name = "minimum"

    def allocate(
        self,
        content: TableContent,
        table_width: Length = "100%",
        pad_string: str = "aaa",
    ) -> WidthAllocation:
        count = self.check_content(content)
        span = self.resolver.resolve_span(table_width)
        notes: list[str] = []

        word_widths = [0.0] * count
        full_widths = [0.0] * count
        for row in content.iter_rows():
            for column, cell in enumerate(row):
                # Strip once; decoded entities such as "&lt;" are literal text.
                plain = strip_tags(cell.content)
                word = self.measurer.measure_plain(pad_string + _longest_token(plain))
                full = self.measurer.measure_plain(pad_string + plain)
                word_widths[column] = max(word_widths[column], word)
                full_widths[column] = max(full_widths[column], full)

        fractions = {column: word_widths[column] / span for column in range(count)}
        base_total = sum(fractions.values())

        if base_total <= 1:
            expansion = 1 - base_total
            # Physical-unit differences; only their ratio to the total matters.
            diffs = [full_widths[c] - word_widths[c] for c in range(count)]
            diff_total = sum(diffs)
            if diff_total != 0:
                for column in range(count):
                    fractions[column] += diffs[column] / diff_total * expansion
            logger.debug(
                "Minimum: base %.4f, expansion %.4f over diff total %.2fpt",
                base_total, expansion, diff_total,
            )
        else:
            notes.append(
                f"Longest words need {base_total * 100:.2f}% of the table span; "
                "columns are offset evenly, not shrunk to fit"
            )
            logger.debug("Minimum: base demand %.4f exceeds the span", base_total)

        extra = 1 - sum(fractions.values())
        for column in range(count):
            fractions[column] += extra / count

        return WidthAllocation(self.name, fractions, span=span, notes=notes)
