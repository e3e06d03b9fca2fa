"""CSS width rules for allocated table columns."""

import logging

logger = logging.getLogger(__name__)

DEFAULT_COLUMN_CLASS_PREFIX = "col"


class CssBuilder:
    """Renders one ``width`` rule per column class.

    Rules look like ``.col0 { width: 25.00% }``, one per line, ordered by
    column index.
    """

    def __init__(self, column_class_prefix: str = DEFAULT_COLUMN_CLASS_PREFIX) -> None:
        self.column_class_prefix = column_class_prefix

    def column_class(self, column: int) -> str:
        return f"{self.column_class_prefix}{column}"

    def build(self, fractions: dict[int, float]) -> str:
        css = ""
        for column, fraction in sorted(fractions.items()):
            css += f".{self.column_class(column)} {{ width: {fraction * 100:.2f}% }}\n"
        return css
