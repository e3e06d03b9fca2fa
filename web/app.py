"""Flask application factory for the table layout API."""

import logging
import os
import sys
from typing import Any

# Ensure project root is on sys.path so we can import tablefit, etc.
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from flask import Flask  # noqa: E402

from web.services.layout_service import LayoutService      # noqa: E402
from web.routes.layout import layout_bp, init_layout        # noqa: E402


def create_app(service: LayoutService | None = None, **service_kwargs: Any) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    app.config["MAX_CONTENT_LENGTH"] = 5 * 1024 * 1024  # 5 MB

    # Shared layout service.
    init_layout(service or LayoutService(**service_kwargs))

    app.register_blueprint(layout_bp)
    return app


# ── Run directly: python -m web.app ──────────────────────────────────
if __name__ == "__main__":
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        force=True,
    )
    application = create_app()
    print("\n  Table layout API")
    print("  http://localhost:5000/api/strategies\n")
    application.run(debug=True, host="0.0.0.0", port=5000)
