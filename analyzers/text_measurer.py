"""Text measurement.

``FitzTextMeasurer`` is the measurement engine: given plain text and a
font it returns the rendered width in PDF points using PyMuPDF font
metrics.  ``MeasurementAdapter`` binds an engine to one configured font
and strips markup before every measurement.
"""

import logging
import os
import re
from typing import Any

import fitz  # PyMuPDF
import lxml.html

from utils.units import DEFAULT_FONT_SIZE, Length, to_points

logger = logging.getLogger(__name__)

# Control characters that XML (and so lxml) rejects; they never render.
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")

# Base-14 family aliases → PyMuPDF reserved font code per style.
_BASE14_FONTS: dict[str, dict[str, str]] = {
    "helvetica": {"": "helv", "B": "hebo", "I": "heit", "BI": "hebi"},
    "times": {"": "tiro", "B": "tibo", "I": "tiit", "BI": "tibi"},
    "courier": {"": "cour", "B": "cobo", "I": "coit", "BI": "cobi"},
    "symbol": {"": "symb"},
    "zapfdingbats": {"": "zadb"},
}
_FAMILY_ALIASES = {
    "": "helvetica",
    "helv": "helvetica",
    "arial": "helvetica",
    "sans-serif": "helvetica",
    "tiro": "times",
    "times new roman": "times",
    "timesnewroman": "times",
    "serif": "times",
    "cour": "courier",
    "courier new": "courier",
    "monospace": "courier",
    "symb": "symbol",
    "zadb": "zapfdingbats",
}
_FONT_FILE_EXTENSIONS = (".ttf", ".otf", ".ttc")


def strip_tags(text: str) -> str:
    """Return the plain text of a markup fragment (tags removed, entities decoded)."""
    if not text:
        return ""
    text = _CONTROL_CHARS_RE.sub("", text)
    if "<" not in text and "&" not in text:
        return text
    fragment = lxml.html.fragment_fromstring(text, create_parent="div")
    return fragment.text_content()


def _normalize_style(font_style: str) -> str:
    style = (font_style or "").upper()
    return ("B" if "B" in style else "") + ("I" if "I" in style else "")


class FitzTextMeasurer:
    """Measurement engine backed by PyMuPDF font metrics.

    ``font_family`` is a Base-14 family (``helvetica``, ``times``,
    ``courier``, ``symbol``, ``zapfdingbats`` or one of their aliases) or
    a path to a TrueType/OpenType font file.  Unknown families raise
    whatever PyMuPDF raises.
    """

    def __init__(self) -> None:
        self._fonts: dict[tuple[str, str], fitz.Font] = {}

    def measure_width(
        self,
        plain_text: str,
        font_family: str,
        font_style: str = "",
        font_size: float = DEFAULT_FONT_SIZE,
    ) -> float:
        if not plain_text:
            return 0.0
        font = self._get_font(font_family, font_style)
        return float(font.text_length(plain_text, fontsize=font_size))

    def _get_font(self, font_family: str, font_style: str) -> fitz.Font:
        key = (font_family or "", _normalize_style(font_style))
        font = self._fonts.get(key)
        if font is None:
            font = self._load_font(*key)
            self._fonts[key] = font
        return font

    @staticmethod
    def _load_font(font_family: str, style: str) -> fitz.Font:
        if font_family.lower().endswith(_FONT_FILE_EXTENSIONS):
            if not os.path.isfile(font_family):
                raise FileNotFoundError(f"Font file not found: {font_family}")
            logger.debug("Loading font file '%s'", font_family)
            return fitz.Font(fontfile=font_family)

        family = font_family.strip().lower()
        family = _FAMILY_ALIASES.get(family, family)
        styles = _BASE14_FONTS.get(family)
        if styles is None:
            # Let PyMuPDF resolve any other font name it knows about.
            return fitz.Font(fontname=font_family)
        code = styles.get(style, styles[""])
        logger.debug("Using Base-14 font '%s' for %s/%s", code, font_family, style)
        return fitz.Font(fontname=code)


class MeasurementAdapter:
    """Measures cell text under one configured font.

    Args:
        engine: Object with ``measure_width(plain_text, font_family,
            font_style, font_size)``.
        font_size: Flexible length, converted to points once here.
        font_family: Font family identifier passed to the engine.
        font_style: Style flags (``""``, ``"B"``, ``"I"``, ``"BI"``).
    """

    def __init__(
        self,
        engine: Any,
        font_size: Length = "",
        font_family: str = "helv",
        font_style: str = "",
    ) -> None:
        self.engine = engine
        self.font_family = font_family
        self.font_style = font_style
        self.font_size = to_points(font_size) if font_size not in ("", None) else DEFAULT_FONT_SIZE

    def measure(self, text: str) -> float:
        return self.engine.measure_width(
            strip_tags(text), self.font_family, self.font_style, self.font_size
        )

    def measure_plain(self, plain_text: str) -> float:
        """Measure text that has already been stripped of markup."""
        return self.engine.measure_width(
            plain_text, self.font_family, self.font_style, self.font_size
        )
