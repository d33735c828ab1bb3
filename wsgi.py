"""WSGI entry point: gunicorn wsgi:app"""

import logging
import os
import signal
import sys

from dotenv import load_dotenv

load_dotenv()

from Lumen.api.server import LumenAPIServer  # noqa: E402
from Lumen.config.logging_config import setup_logging_from_config  # noqa: E402
from Lumen.config.settings import get_config  # noqa: E402
from Lumen.core.handler import IntentHandler  # noqa: E402

logger = logging.getLogger("LUMEN.WSGI")

# Global state for graceful shutdown
_app_state = {"shutting_down": False}


def graceful_shutdown(signum, frame):
    """Handle graceful shutdown on SIGTERM/SIGINT."""
    logger.info(f"Received signal {signum}, initiating graceful shutdown...")
    _app_state["shutting_down"] = True
    logger.info("Shutdown complete")
    sys.exit(0)


def create_app():
    """Create Flask app with production configuration."""
    config = get_config(os.getenv("LUMEN_CONFIG"))
    setup_logging_from_config(config.logging)

    logger.info("Initializing Lumen intent handler...")
    handler = IntentHandler(config)

    logger.info("Creating API server...")
    app = LumenAPIServer.from_config(config, handler).create_flask_app()

    @app.before_request
    def check_shutdown():
        """Check if app is shutting down."""
        from flask import jsonify
        if _app_state.get("shutting_down"):
            return jsonify({
                "success": False,
                "data": {"message": "Server is shutting down"},
                "error": "SERVICE_SHUTTING_DOWN",
            }), 503

    signal.signal(signal.SIGTERM, graceful_shutdown)
    signal.signal(signal.SIGINT, graceful_shutdown)

    logger.info(f"Lumen API server ready (rules {handler.rules.version})")
    return app


if __name__ == "__main__":
    app = create_app()
    debug = os.getenv("FLASK_ENV") == "development"
    config = get_config(os.getenv("LUMEN_CONFIG"))
    workers = int(os.getenv("GUNICORN_WORKERS", "4"))

    if debug:
        logger.info(f"Starting development server on port {config.api.port}")
        app.run(host=config.api.host, port=config.api.port, debug=True, use_reloader=False)
    else:
        logger.info(f"Use gunicorn to start production server: gunicorn wsgi:app -w {workers}")
else:
    # Create app instance for WSGI servers
    app = create_app()
