"""
project: Doorway
module: mapgen_api.py
License: MIT

Map generation API routes.

Each POST runs an independent, synchronous generation with its own search
state; nothing is shared between requests except the read-only catalog.
"""

from flask import Blueprint, current_app, jsonify, request

from doorway.logging_utils import get_logger
from doorway.mapgen import (
    CatalogError,
    GeneratorConfig,
    IterationBudgetExceeded,
    LayoutMaterializer,
    MapGenerator,
    coerce_seed,
    default_catalog,
    load_catalog,
    render_ascii,
)
from doorway.validation import GENERATE_REQUEST, validate

bp_mapgen = Blueprint("mapgen", __name__)

_log = get_logger("mapgen.api")


def get_catalog():
    """Catalog from MAPGEN_CATALOG_PATH if configured, else the built-in pool."""
    path = current_app.config.get("MAPGEN_CATALOG_PATH")
    cached = current_app.extensions.get("mapgen_catalog")
    if cached is not None and cached[0] == path:
        return cached[1]
    catalog = load_catalog(path) if path else default_catalog()
    current_app.extensions["mapgen_catalog"] = (path, catalog)
    return catalog


@bp_mapgen.route("/api/mapgen/catalog")
def catalog_view():
    """Return the active piece catalog."""
    try:
        catalog = get_catalog()
    except (OSError, CatalogError) as e:
        return jsonify({"error": "catalog_unavailable", "detail": str(e)}), 500
    return jsonify(catalog.to_dict())


@bp_mapgen.route("/api/mapgen/config")
def config_view():
    """Return the effective generator configuration (env + app config)."""
    return jsonify(GeneratorConfig.from_app_config().to_dict())


@bp_mapgen.route("/api/mapgen/generate", methods=["POST"])
def generate():
    """Generate a layout.

    Body JSON (all optional):
      { "seed": <int|str>, "max_rooms": <int>, "iteration_budget": <int>,
        "max_bound_span": <int>, "min_path_length": <int>, "attempts": <int>,
        "restore_bounds_on_backtrack": <bool>, "include_ascii": <bool> }

    Response 200: { "seed", "room_count", "path_length", "iterations", "attempts",
                    "bounds", "placements", "rooms", "hallways", "metrics", ["ascii"] }
    Response 400: validation error; 422: generation failed or budget exceeded.
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    ok, payload = validate(data, GENERATE_REQUEST)
    if not ok:
        return jsonify({"error": "invalid_request", "field": payload["field"], "detail": payload["error"], "code": payload["code"]}), 400

    max_attempts = current_app.config.get("MAPGEN_MAX_REQUEST_ATTEMPTS", 10)
    if payload.get("attempts", 1) > max_attempts:
        return jsonify({"error": "invalid_request", "field": "attempts", "detail": f"must be <= {max_attempts}", "code": "max"}), 400

    include_ascii = payload.pop("include_ascii", False)
    if "seed" in payload:
        payload["seed"] = coerce_seed(payload["seed"])
    cfg = GeneratorConfig.from_app_config().replace(**payload)
    if cfg.seed is None:
        cfg = cfg.replace(seed=coerce_seed(None))

    try:
        catalog = get_catalog()
    except (OSError, CatalogError) as e:
        return jsonify({"error": "catalog_unavailable", "detail": str(e)}), 500

    materializer = LayoutMaterializer()
    generator = MapGenerator(catalog, cfg)
    try:
        result = generator.generate_with_retries(materializer)
    except IterationBudgetExceeded as e:
        _log.warn(event="mapgen_api_budget_exceeded", seed=cfg.seed, iterations=e.iterations)
        return jsonify({
            "error": "iteration_budget_exceeded",
            "seed": cfg.seed,
            "iterations": e.iterations,
            "budget": e.budget,
        }), 422

    if not result.success:
        return jsonify({
            "error": "generation_failed",
            "seed": cfg.seed,
            "attempts": result.attempts,
            "iterations": result.iterations,
        }), 422

    body = result.to_dict()
    body.update(materializer.to_dict())
    if include_ascii:
        body["ascii"] = render_ascii(result, catalog)
    return jsonify(body)
