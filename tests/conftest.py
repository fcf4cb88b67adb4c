import json
import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from doorway import create_app  # noqa: E402
from doorway.mapgen import GeneratorConfig, Piece, PieceCatalog  # noqa: E402


def make_catalog(origin_sides, pieces, exit_sides, exit_name="exit"):
    """Build a catalog of single-cell pieces.

    ``pieces`` is a list of (name, sides[, weight]) tuples; the origin is kept
    in the pool so tests exercise the "origin lacks the needed door" skip.
    """
    origin = Piece.single("origin", origin_sides)
    pool = [origin]
    for entry in pieces:
        name, sides = entry[0], entry[1]
        weight = entry[2] if len(entry) > 2 else 1
        pool.append(Piece.single(name, sides, weight))
    exit_piece = Piece.single(exit_name, exit_sides)
    pool.append(exit_piece)
    return PieceCatalog(pool, origin, exit_piece)


@pytest.fixture
def line_catalog():
    """Origin(E) -> mid(W,E) -> exit(W): the only layout is a straight line."""
    return make_catalog("E", [("mid", "WE")], "W")


@pytest.fixture
def line_config():
    return GeneratorConfig(max_rooms=3, min_path_length=2, max_bound_span=7, iteration_budget=1000, seed=1)


@pytest.fixture
def path_catalog():
    """Two-door pieces only, so every layout is a single winding corridor."""
    return make_catalog(
        "E",
        [("hall_ew", "WE", 3), ("hall_ns", "NS", 3), ("bend_ne", "NE", 2), ("bend_nw", "NW", 2),
         ("bend_se", "SE", 2), ("bend_sw", "SW", 2)],
        "W",
    )


@pytest.fixture
def tee_catalog():
    """A tee off the origin with caps; succeeds only when the north branch is filled first."""
    return make_catalog("E", [("tee", "WNS"), ("cap_s", "S"), ("cap_n", "N")], "N")


@pytest.fixture
def line_catalog_file(tmp_path):
    data = {
        "origin": "origin",
        "exit": "exit",
        "pieces": [
            {"name": "origin", "doors": ["E"]},
            {"name": "mid", "weight": 2, "doors": ["W", "E"]},
            {"name": "exit", "doors": ["W"]},
        ],
    }
    path = tmp_path / "line_catalog.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


@pytest.fixture
def test_app(line_catalog_file):
    app = create_app(
        {
            "TESTING": True,
            "MAPGEN_CATALOG_PATH": line_catalog_file,
            "MAPGEN_MAX_ROOMS": 3,
            "MAPGEN_MIN_PATH_LENGTH": 2,
            "MAPGEN_ITERATION_BUDGET": 1000,
        }
    )
    return app


@pytest.fixture
def client(test_app):
    return test_app.test_client()


@pytest.fixture(autouse=True)
def _clean_mapgen_env(monkeypatch):
    """Keep MAPGEN_* settings from the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("MAPGEN_"):
            monkeypatch.delenv(key, raising=False)
    yield
