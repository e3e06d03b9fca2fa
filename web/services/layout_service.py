"""Layout service — wraps the table sizing pipeline for the HTTP API.

Each request gets its own optimizer; nothing is shared between requests
except the loaded configuration.
"""

import logging
import os
import sys
from typing import Any

# Ensure the project root is importable.
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from allocators import STRATEGIES                        # noqa: E402
from tablefit import _load_config, size_table            # noqa: E402
from utils.table_loader import table_from_dict           # noqa: E402

logger = logging.getLogger(__name__)

# Request keys that override the loaded configuration, with accepted JSON types.
_LENGTH = (str, int, float)
_OVERRIDE_TYPES: dict[str, tuple[type, ...]] = {
    "strategy": (str,),
    "table_width": _LENGTH,
    "column_widths": (list, dict),
    "pad_string": (str,),
    "min_percent": (int, float),
    "min_string": (str,),
    "header_classes_on_cells": (bool,),
    "column_class_prefix": (str,),
    "font_family": (str,),
    "font_size": _LENGTH,
}


def _check_override(key: str, value: Any) -> None:
    expected = _OVERRIDE_TYPES[key]
    if isinstance(value, bool) and bool not in expected:
        raise ValueError(f"'{key}' must not be a boolean")
    if not isinstance(value, expected):
        names = " or ".join(t.__name__ for t in expected)
        raise ValueError(f"'{key}' must be {names}, got {type(value).__name__}")


class LayoutService:
    """Sizes tables posted as JSON.

    Parameters
    ----------
    config : dict | None
        Base configuration; loaded from ``config/settings.json`` when
        omitted.
    engine, geometry :
        Optional measurement engine and page geometry passed to every
        optimizer (tests inject deterministic ones).
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        engine: Any = None,
        geometry: Any = None,
    ) -> None:
        self.config = config if config is not None else _load_config()
        self._engine = engine
        self._geometry = geometry

    def strategies(self) -> dict[str, Any]:
        return {
            "strategies": sorted(STRATEGIES),
            "default": self.config.get("strategy", "weighting"),
            "min_percent": self.config.get("min_percent", 6.5),
            "column_class_prefix": self.config.get("column_class_prefix", "col"),
        }

    def layout(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Size the table in *payload* and return CSS, HTML and the report.

        Raises ``ValueError`` (including ``AllocationError``) for bad
        input or configuration.
        """
        content = table_from_dict(payload)
        config = dict(self.config)
        for key in _OVERRIDE_TYPES:
            if payload.get(key) is not None:
                _check_override(key, payload[key])
                config[key] = payload[key]
        if config.get("strategy") not in STRATEGIES:
            raise ValueError(
                f"Unknown strategy '{config.get('strategy')}'. "
                f"Valid: {', '.join(sorted(STRATEGIES))}"
            )

        optimizer, allocation = size_table(
            content, config, engine=self._engine, geometry=self._geometry
        )
        result = allocation.to_dict()
        result["percentages"] = {str(c): p for c, p in allocation.percentages().items()}
        result["html"] = optimizer.render_html()
        return result
