"""
project: Doorway
module: __init__.py
License: MIT

Flask application factory.

Configuration is sourced from environment variables (optionally loaded from a
.env file) with development defaults. Map generation settings use the
``MAPGEN_*`` keys understood by ``GeneratorConfig``; values placed in the app
config take precedence over the process environment at request time.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

__version__ = "0.1.0"

# Load .env if present so MAPGEN_* and SECRET_KEY can be supplied without
# exporting shell variables during development.
load_dotenv()


def create_app(config_overrides=None):
    """Build and return a configured Flask app."""
    app = Flask(__name__, instance_relative_config=True)

    app.config.update(
        SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
        # Optional JSON catalog replacing the built-in piece pool
        MAPGEN_CATALOG_PATH=os.getenv("MAPGEN_CATALOG_PATH"),
        # Upper bound on attempts a single request may ask for
        MAPGEN_MAX_REQUEST_ATTEMPTS=int(os.getenv("MAPGEN_MAX_REQUEST_ATTEMPTS", "10")),
    )
    if config_overrides:
        app.config.update(config_overrides)

    from doorway.routes.mapgen_api import bp_mapgen

    app.register_blueprint(bp_mapgen)

    @app.errorhandler(500)
    def internal_error(e):
        error_id = uuid.uuid4().hex[:8]
        logging.exception("Unhandled exception (id=%s)", error_id)
        return jsonify({"error": "internal_error", "error_id": error_id}), 500

    return app
