"""PDF export of a sized table.

Lays the table markup and its width rules out with PyMuPDF's ``Story``
inside the printable area of the page, adding pages as needed.
"""

import logging
import os
from typing import Any

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)

# Applied before the column width rules.
_BASE_CSS = """
table { width: 100%; border-collapse: collapse; }
th, td { padding: 2px 4px; vertical-align: top; text-align: left; }
th { font-weight: bold; border-bottom: 1px solid #444; }
tr.row-odd td { background-color: #f2f2f2; }
"""


class PdfBuilder:
    """Writes HTML + CSS to a PDF file using the page geometry.

    Parameters
    ----------
    geometry :
        A :class:`~analyzers.page_geometry.PageGeometry` (or any object
        with ``get_page_width``, ``get_page_height`` and ``content_rect``).
    font_size : float
        Base font size in points for the story.
    """

    def __init__(self, geometry: Any, font_size: float = 12.0) -> None:
        self._geometry = geometry
        self._font_size = font_size

    def build(self, html: str, css: str, output_path: str) -> int:
        """Render *html* styled with *css* into *output_path*.

        Returns the number of pages written.
        """
        output_path = os.path.abspath(output_path)
        mediabox = fitz.Rect(
            0, 0, self._geometry.get_page_width(), self._geometry.get_page_height()
        )
        where = self._geometry.content_rect()

        story = fitz.Story(html=html, user_css=_BASE_CSS + css, em=self._font_size)
        writer = fitz.DocumentWriter(output_path)
        pages = 0
        more = 1
        try:
            while more:
                device = writer.begin_page(mediabox)
                more, _filled = story.place(where)
                story.draw(device)
                writer.end_page()
                pages += 1
        finally:
            writer.close()

        logger.info("Wrote %d page(s) to '%s'", pages, output_path)
        return pages
