"""HTML table markup referencing the per-column width classes."""

import logging

from builders.css_builder import DEFAULT_COLUMN_CLASS_PREFIX
from builders.table_content import TableContent

logger = logging.getLogger(__name__)


def _class_attr(*parts: str) -> str:
    return " ".join(part for part in parts if part)


class HtmlBuilder:
    """Renders a ``<table>`` whose cells carry ``{prefix}{column}`` classes.

    Body rows alternate ``row-even`` / ``row-odd`` starting at index 0.
    With ``header_classes_on_cells`` each body cell also gets its
    column's header style class, placed before its own.  Cell content is
    written as given; escaping is the caller's job.
    """

    def __init__(
        self,
        column_class_prefix: str = DEFAULT_COLUMN_CLASS_PREFIX,
        header_classes_on_cells: bool = False,
    ) -> None:
        self.column_class_prefix = column_class_prefix
        self.header_classes_on_cells = header_classes_on_cells

    def build(self, content: TableContent) -> str:
        header = content.header
        output = "<table>"
        output += "<thead><tr>"
        for column, cell in enumerate(header):
            classes = _class_attr(f"{self.column_class_prefix}{column}", cell.style_class)
            output += f'<th class="{classes}">{cell.content}</th>'
        output += "</tr></thead>"
        output += "<tbody>\n"
        for index, row in enumerate(content.rows):
            row_class = "row-odd" if index & 1 else "row-even"
            output += f'<tr class="{row_class}">\n'
            for column, cell in enumerate(row):
                if self.header_classes_on_cells and column < len(header):
                    own = _class_attr(header[column].style_class, cell.style_class)
                else:
                    own = cell.style_class
                classes = _class_attr(f"{self.column_class_prefix}{column}", own)
                output += f'<td class="{classes}">{cell.content}</td>\n'
            output += "</tr>\n"
        output += "</tbody>\n"
        output += "</table>"
        logger.debug("Rendered table: %d columns, %d rows", len(header), len(content))
        return output
