"""Analyzers package - text measurement and page geometry."""
from .text_measurer import FitzTextMeasurer, MeasurementAdapter, strip_tags
from .page_geometry import GeometryResolver, PageGeometry

__all__ = [
    "FitzTextMeasurer",
    "GeometryResolver",
    "MeasurementAdapter",
    "PageGeometry",
    "strip_tags",
]
