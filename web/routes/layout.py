"""Table layout routes."""

import logging

from flask import Blueprint, jsonify, request

from allocators.errors import AllocationError
from web.services.layout_service import LayoutService

logger = logging.getLogger(__name__)

layout_bp = Blueprint("layout", __name__)

# The LayoutService instance is injected by the app factory.
_service: LayoutService | None = None


def init_layout(service: LayoutService) -> None:
    """Wire the shared LayoutService into this blueprint."""
    global _service
    _service = service


@layout_bp.route("/api/strategies", methods=["GET"])
def list_strategies():
    assert _service is not None, "LayoutService not initialised"
    return jsonify(_service.strategies())


@layout_bp.route("/api/layout", methods=["POST"])
def layout_table():
    """Size a table.

    Expects JSON with ``header`` and ``rows`` plus optional ``strategy``,
    ``table_width``, ``column_widths``, ``pad_string``, ``min_percent``,
    ``min_string`` and ``header_classes_on_cells``.

    Returns JSON: ``{"strategy", "fractions", "percentages", "css",
    "html", "report", …}``.
    """
    assert _service is not None, "LayoutService not initialised"

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "Request body must be a JSON object."}), 400

    try:
        result = _service.layout(payload)
    except AllocationError as exc:
        logger.info("Layout rejected: %s", exc)
        return jsonify({"error": str(exc), "column": exc.column, "row": exc.row}), 400
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify(result)
