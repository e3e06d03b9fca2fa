"""CSS-style length conversion.

Every physical width in this project is expressed in PDF points
(1/72 inch), which is the native unit of PyMuPDF.
"""

import logging
import re
from typing import Optional, Union

logger = logging.getLogger(__name__)

# Points per unit for absolute CSS units.
_POINTS_PER_UNIT = {
    "pt": 1.0,
    "px": 0.75,
    "in": 72.0,
    "mm": 72.0 / 25.4,
    "cm": 72.0 / 2.54,
    "pc": 12.0,
}

_LENGTH_RE = re.compile(
    r"^\s*(?P<value>[-+]?(?:\d+\.?\d*|\.\d+))\s*(?P<unit>[a-z%]*)\s*$",
    re.IGNORECASE,
)

DEFAULT_FONT_SIZE = 12.0

Length = Union[str, int, float]


def to_points(
    spec: Length,
    reference: Optional[float] = None,
    font_size: float = DEFAULT_FONT_SIZE,
) -> float:
    """Convert a CSS-style length to PDF points.

    Args:
        spec: A length such as ``"10mm"``, ``"1.5in"``, ``"50%"`` or a
            bare number.  Bare numbers (and unit-less strings) are CSS
            pixels.
        reference: Width in points that percentages are relative to.
        font_size: Font size in points used for ``em``/``rem``/``ex``.

    Returns:
        The length in points.

    Raises:
        ValueError: The spec cannot be parsed, the unit is unknown, or a
            percentage is given without a reference width.
    """
    if isinstance(spec, bool):
        raise ValueError(f"Invalid length: {spec!r}")
    if isinstance(spec, (int, float)):
        return float(spec) * _POINTS_PER_UNIT["px"]

    match = _LENGTH_RE.match(str(spec or ""))
    if not match:
        raise ValueError(f"Invalid length: {spec!r}")

    value = float(match.group("value"))
    unit = match.group("unit").lower() or "px"

    if unit == "%":
        if reference is None:
            raise ValueError(f"Percentage length {spec!r} needs a reference width")
        return value * reference / 100.0
    if unit in ("em", "rem"):
        return value * font_size
    if unit == "ex":
        return value * font_size / 2.0
    if unit in _POINTS_PER_UNIT:
        return value * _POINTS_PER_UNIT[unit]

    raise ValueError(f"Unknown length unit '{unit}' in {spec!r}")


def is_percentage(spec: Length) -> bool:
    """Return ``True`` when *spec* is a percentage length."""
    return isinstance(spec, str) and spec.strip().endswith("%")
