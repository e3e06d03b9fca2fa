"""Page geometry.

``PageGeometry`` describes the target page (size, orientation, margins)
and converts CSS-style lengths to PDF points.  ``GeometryResolver``
turns a nominal table width into the absolute span available to the
table once the left and right margins are taken off.
"""

import logging
from typing import Any, Optional, Union

import fitz  # PyMuPDF

from allocators.errors import AllocationError
from utils.units import Length, is_percentage, to_points

logger = logging.getLogger(__name__)

_DEFAULT_MARGIN = "15mm"
_MARGIN_SIDES = ("left", "right", "top", "bottom")


class PageGeometry:
    """Page size and margins of the rendering target.

    Args:
        page_size: A paper name understood by ``fitz.paper_size``
            (``"a4"``, ``"letter"``, …) or an explicit ``(width, height)``
            tuple in points.
        orientation: ``"portrait"`` or ``"landscape"``.
        margins: Mapping of side → CSS length.  Missing sides default to
            15mm.
        font_size: Font size in points used for ``em``/``ex`` lengths.
    """

    def __init__(
        self,
        page_size: Union[str, tuple[float, float]] = "a4",
        orientation: str = "portrait",
        margins: Optional[dict[str, Length]] = None,
        font_size: float = 12.0,
    ) -> None:
        width, height = self._paper_size(page_size)
        if orientation.lower().startswith("land"):
            width, height = max(width, height), min(width, height)
        elif orientation.lower().startswith("port"):
            width, height = min(width, height), max(width, height)
        else:
            raise ValueError(f"Unknown page orientation '{orientation}'")

        self._width = width
        self._height = height
        self._font_size = font_size

        margins = margins or {}
        self._margins = {
            side: to_points(margins.get(side, _DEFAULT_MARGIN), font_size=font_size)
            for side in _MARGIN_SIDES
        }
        logger.debug(
            "Page %.1fx%.1fpt, margins %s", self._width, self._height, self._margins
        )

    @staticmethod
    def _paper_size(page_size: Any) -> tuple[float, float]:
        if isinstance(page_size, (tuple, list)):
            if len(page_size) != 2:
                raise ValueError(f"Page size must be (width, height), got {page_size!r}")
            return float(page_size[0]), float(page_size[1])
        width, height = fitz.paper_size(str(page_size))
        if width <= 0 or height <= 0:
            raise ValueError(f"Unknown page size '{page_size}'")
        return float(width), float(height)

    # ------------------------------------------------------------------
    # Provider interface
    # ------------------------------------------------------------------

    def get_margins(self) -> dict[str, float]:
        return dict(self._margins)

    def get_page_width(self) -> float:
        return self._width

    def get_page_height(self) -> float:
        return self._height

    def convert_length(self, spec: Length, reference_width: float) -> float:
        """Convert *spec* to points; percentages are of *reference_width*."""
        return to_points(spec, reference=reference_width, font_size=self._font_size)

    def convert_length_absolute(self, spec: Length) -> float:
        """Convert an absolute length to points (percentages are rejected)."""
        if is_percentage(spec):
            raise ValueError(f"Absolute length expected, got percentage {spec!r}")
        return to_points(spec, font_size=self._font_size)

    def content_rect(self) -> fitz.Rect:
        """Printable area of the page inside the margins."""
        m = self._margins
        return fitz.Rect(
            m["left"], m["top"], self._width - m["right"], self._height - m["bottom"]
        )


class GeometryResolver:
    """Resolves nominal table widths into absolute spans in points."""

    def __init__(self, provider: Any) -> None:
        self.provider = provider

    def printable_width(self) -> float:
        margins = self.provider.get_margins()
        return self.provider.get_page_width() - margins["left"] - margins["right"]

    def resolve_span(self, table_width: Length = "100%") -> float:
        span = self.provider.convert_length(table_width, self.printable_width())
        if span <= 0:
            raise AllocationError(
                f"Table width {table_width!r} resolves to a non-positive span ({span:.2f}pt)"
            )
        logger.debug("Resolved table width %r to %.2fpt", table_width, span)
        return span
