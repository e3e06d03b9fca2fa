"""Table optimizer.

Collects a table's header and rows, sizes its columns with one of the
allocation strategies and renders the matching CSS and HTML::

    optimizer = TableOptimizer(font_size="9pt", font_family="helvetica")
    optimizer.add_header_cell("Item")
    optimizer.add_header_cell("Amount", "num")
    optimizer.start_data_row()
    optimizer.add_data_row_cell("Consulting")
    optimizer.add_data_row_cell("1,250.00")
    optimizer.end_data_row()
    allocation = optimizer.determine_column_widths_by_weighting()
    html = f"<style>{allocation.css}</style>{optimizer.render_html()}"
"""

import logging
from typing import Any, Optional

from allocators.base import WidthAllocation
from allocators.errors import AllocationError, AllocationOverflowError
from allocators.evenly import EvenWidthAllocator
from allocators.minimum import MinimumContentAllocator
from allocators.weighting import WeightedAverageAllocator
from analyzers.page_geometry import GeometryResolver, PageGeometry
from analyzers.text_measurer import FitzTextMeasurer, MeasurementAdapter
from builders.css_builder import DEFAULT_COLUMN_CLASS_PREFIX, CssBuilder
from builders.html_builder import HtmlBuilder
from builders.table_content import TableContent
from utils.units import Length
from utils.validator import AllocationValidator

logger = logging.getLogger(__name__)

DEFAULT_MIN_PERCENT = 6.5
DEFAULT_FONT_FAMILY = "helv"
DEFAULT_FONT_SIZE = "12pt"


class TableOptimizer:
    """Sizes the columns of one HTML table for fixed-width rendering.

    Parameters
    ----------
    engine :
        Measurement engine (``measure_width(plain_text, font_family,
        font_style, font_size)``).  Defaults to PyMuPDF font metrics.
    geometry :
        Page geometry provider.  Defaults to A4 portrait, 15mm margins.
    font_size : str
        Font size as a CSS length, converted to points once.
    font_family, font_style : str
        Font used for every measurement.
    min_percent : float
        Smallest column width, in percent, for the weighting strategy.
    column_class_prefix : str
        Column classes are ``{prefix}{index}``.
    header_classes_on_cells : bool
        Copy each header cell's class onto the body cells below it.
    strict : bool
        Raise :class:`AllocationOverflowError` instead of returning an
        allocation whose widths do not add up to 100%.
    """

    def __init__(
        self,
        engine: Any = None,
        geometry: Any = None,
        font_size: Length = DEFAULT_FONT_SIZE,
        font_family: str = DEFAULT_FONT_FAMILY,
        font_style: str = "",
        min_percent: float = DEFAULT_MIN_PERCENT,
        column_class_prefix: str = DEFAULT_COLUMN_CLASS_PREFIX,
        header_classes_on_cells: bool = False,
        strict: bool = False,
    ) -> None:
        self.measurer = MeasurementAdapter(
            engine if engine is not None else FitzTextMeasurer(),
            font_size=font_size,
            font_family=font_family,
            font_style=font_style,
        )
        self.geometry = geometry if geometry is not None else PageGeometry()
        self.resolver = GeometryResolver(self.geometry)
        self.min_percent = float(min_percent)
        self.column_class_prefix = column_class_prefix
        self.header_classes_on_cells = header_classes_on_cells
        self.strict = strict
        self.content = TableContent()
        self._validator = AllocationValidator()

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any],
        engine: Any = None,
        geometry: Any = None,
    ) -> "TableOptimizer":
        """Build an optimizer from a settings dict (see ``config/settings.json``)."""
        if geometry is None:
            page = config.get("page", {}) or {}
            geometry = PageGeometry(
                page_size=page.get("size", "a4"),
                orientation=page.get("orientation", "portrait"),
                margins=page.get("margins"),
            )
        return cls(
            engine=engine,
            geometry=geometry,
            font_size=config.get("font_size", DEFAULT_FONT_SIZE),
            font_family=config.get("font_family", DEFAULT_FONT_FAMILY),
            font_style=config.get("font_style", ""),
            min_percent=config.get("min_percent", DEFAULT_MIN_PERCENT),
            column_class_prefix=config.get("column_class_prefix", DEFAULT_COLUMN_CLASS_PREFIX),
            header_classes_on_cells=bool(config.get("header_classes_on_cells", False)),
            strict=bool(config.get("strict", False)),
        )

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def add_header_cell(self, content: str, style_class: str = "") -> None:
        self.content.add_header_cell(content, style_class)

    def start_data_row(self) -> None:
        self.content.start_data_row()

    def add_data_row_cell(self, content: str, style_class: str = "") -> None:
        self.content.add_data_row_cell(content, style_class)

    def end_data_row(self) -> None:
        self.content.end_data_row()

    def reset_data(self) -> None:
        self.content.reset_data()

    # ------------------------------------------------------------------
    # Measurement
    # ------------------------------------------------------------------

    def measure_width(self, text: str) -> float:
        return self.measurer.measure(text)

    def set_minimum_percentage_based_on_string(
        self, text: str, table_width: Length = "100%"
    ) -> float:
        """Set the floor to the share of the table that *text* needs.

        Keeps columns wide enough for a known label such as ``"Subtotal:"``.
        Returns the new minimum percentage.
        """
        span = self.resolver.resolve_span(table_width)
        self.min_percent = self.measure_width(text) / span * 100
        logger.debug("Minimum percentage set to %.3f from %r", self.min_percent, text)
        return self.min_percent

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def determine_column_widths_evenly(
        self,
        table_width: Length = "100%",
        column_widths: Any = None,
    ) -> WidthAllocation:
        """Even widths, except for columns listed in *column_widths*.

        *column_widths* example, 2nd column is 10mm: ``[None, "10mm"]``.
        """
        allocator = EvenWidthAllocator(self.measurer, self.resolver)
        return self._finish(allocator.allocate(self.content, table_width, column_widths))

    def determine_column_widths_by_minimum_strategy(
        self,
        table_width: Length = "100%",
        pad_string: str = "aaa",
    ) -> WidthAllocation:
        """Longest-word minimum per column, leftover space to wrapping columns."""
        allocator = MinimumContentAllocator(self.measurer, self.resolver)
        return self._finish(allocator.allocate(self.content, table_width, pad_string))

    def determine_column_widths_by_weighting(self) -> WidthAllocation:
        """Average share of each row's width, floored at ``min_percent``."""
        allocator = WeightedAverageAllocator(self.measurer)
        return self._finish(allocator.allocate(self.content, self.min_percent))

    def determine_column_widths(self, strategy: str = "weighting", **kwargs: Any) -> WidthAllocation:
        """Dispatch to a strategy by name: ``evenly``, ``minimum`` or ``weighting``."""
        name = (strategy or "").lower()
        if name == EvenWidthAllocator.name:
            return self.determine_column_widths_evenly(
                kwargs.get("table_width", "100%"), kwargs.get("column_widths")
            )
        if name == MinimumContentAllocator.name:
            return self.determine_column_widths_by_minimum_strategy(
                kwargs.get("table_width", "100%"), kwargs.get("pad_string", "aaa")
            )
        if name == WeightedAverageAllocator.name:
            return self.determine_column_widths_by_weighting()
        raise AllocationError(f"Unknown strategy '{strategy}'")

    def _finish(self, allocation: WidthAllocation) -> WidthAllocation:
        allocation.report = self._validator.validate(
            allocation.fractions, self.content.column_count, allocation.notes
        )
        allocation.css = self.render_css(allocation)
        if not allocation.report["valid"]:
            logger.warning(
                "%s allocation is unbalanced: %s",
                allocation.strategy, "; ".join(allocation.report["issues"]),
            )
            if self.strict:
                raise AllocationOverflowError(allocation.report["summary"], allocation.report)
        return allocation

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_css(self, allocation: WidthAllocation) -> str:
        return CssBuilder(self.column_class_prefix).build(allocation.fractions)

    def render_html(self) -> str:
        builder = HtmlBuilder(self.column_class_prefix, self.header_classes_on_cells)
        return builder.build(self.content)

    def render(self, allocation: Optional[WidthAllocation] = None) -> str:
        """Combined ``<style>`` block and table markup."""
        if allocation is None:
            allocation = self.determine_column_widths_by_weighting()
        return f"<style>\n{allocation.css}</style>\n{self.render_html()}"
