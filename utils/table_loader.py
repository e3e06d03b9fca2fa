"""Table file loading.

Reads a table from CSV (first row is the header) or JSON into a
:class:`~builders.table_content.TableContent`.
"""

import csv
import json
import logging
import os
from typing import Any

from builders.table_content import TableContent

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".csv", ".json")


def _split_cell(cell: Any) -> tuple[str, str]:
    """Return ``(content, style_class)`` for a JSON cell value."""
    if isinstance(cell, dict):
        return str(cell.get("content", "")), str(cell.get("class", "") or "")
    if cell is None:
        return "", ""
    return str(cell), ""


def table_from_dict(data: dict[str, Any]) -> TableContent:
    """Build table content from ``{"header": [...], "rows": [[...], ...]}``.

    Cells are strings or ``{"content": ..., "class": ...}`` objects.
    """
    if not isinstance(data, dict):
        raise ValueError("Table data must be an object with 'header' and 'rows'")
    header = data.get("header")
    if not isinstance(header, list) or not header:
        raise ValueError("Table data needs a non-empty 'header' list")
    rows = data.get("rows", [])
    if not isinstance(rows, list):
        raise ValueError("'rows' must be a list of rows")

    content = TableContent()
    for cell in header:
        content.add_header_cell(*_split_cell(cell))
    for index, row in enumerate(rows):
        if not isinstance(row, list):
            raise ValueError(f"Row {index} must be a list of cells")
        content.start_data_row()
        for cell in row:
            content.add_data_row_cell(*_split_cell(cell))
        content.end_data_row()
    return content


def load_table(path: str) -> TableContent:
    """Load a ``.csv`` or ``.json`` table file."""
    ext = os.path.splitext(path)[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise ValueError(
            f"Unsupported table file '{path}'. Use one of: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    if ext == ".json":
        with open(path, "r", encoding="utf-8") as fh:
            content = table_from_dict(json.load(fh))
    else:
        with open(path, "r", encoding="utf-8", newline="") as fh:
            records = [record for record in csv.reader(fh) if record]
        if not records:
            raise ValueError(f"CSV file '{path}' is empty")
        content = table_from_dict({"header": records[0], "rows": records[1:]})

    logger.info(
        "Loaded '%s': %d columns, %d rows", path, content.column_count, len(content)
    )
    return content
