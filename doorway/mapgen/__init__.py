"""Public map generation interface."""

from .catalog import PieceCatalog, catalog_from_dict, default_catalog, load_catalog  # noqa: F401
from .config import GeneratorConfig, coerce_seed  # noqa: F401
from .connectivity import UNREACHABLE, shortest_path_length  # noqa: F401
from .errors import CatalogError, ConfigError, GenerationError, IterationBudgetExceeded  # noqa: F401
from .geometry import Cell, Direction, Door, Piece  # noqa: F401
from .materialize import LayoutMaterializer, Materializer  # noqa: F401
from .pipeline import GenerationResult, MapGenerator, materialize_plan  # noqa: F401
from .render import render_ascii  # noqa: F401
from .search import BacktrackingSearch, Bounds, Placement, SearchOutcome  # noqa: F401
from .selection import weighted_pick_and_remove  # noqa: F401

__all__ = [
    "BacktrackingSearch",
    "Bounds",
    "CatalogError",
    "Cell",
    "ConfigError",
    "Direction",
    "Door",
    "GenerationError",
    "GenerationResult",
    "GeneratorConfig",
    "IterationBudgetExceeded",
    "LayoutMaterializer",
    "MapGenerator",
    "Materializer",
    "Piece",
    "PieceCatalog",
    "Placement",
    "SearchOutcome",
    "UNREACHABLE",
    "catalog_from_dict",
    "coerce_seed",
    "default_catalog",
    "load_catalog",
    "materialize_plan",
    "render_ascii",
    "shortest_path_length",
    "weighted_pick_and_remove",
]
