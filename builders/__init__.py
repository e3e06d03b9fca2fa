"""Builders package - table content, CSS, HTML and PDF output."""
from .table_content import Cell, TableContent
from .css_builder import CssBuilder
from .html_builder import HtmlBuilder
from .pdf_builder import PdfBuilder

__all__ = ["Cell", "CssBuilder", "HtmlBuilder", "PdfBuilder", "TableContent"]
