"""Run controller for map generation.

Coordinates one generation attempt: reset state, run the backtracking search
from the origin, and only on success hand the placement plan to the
materializer. Budget aborts surface as ``IterationBudgetExceeded``; an
exhausted search is reported as an unsuccessful ``GenerationResult`` and the
caller decides whether to retry.
"""
from __future__ import annotations
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..logging_utils import get_logger
from .catalog import PieceCatalog, default_catalog
from .config import GeneratorConfig, coerce_seed
from .errors import IterationBudgetExceeded
from .geometry import ORIGIN
from .materialize import Materializer
from .metrics import init_metrics
from .search import BacktrackingSearch, Bounds, Placement, SearchOutcome

_log = get_logger("mapgen")


@dataclass
class GenerationResult:
    success: bool
    seed: int
    placements: List[Placement] = field(default_factory=list)
    path_length: Optional[int] = None
    iterations: int = 0
    bounds: Optional[Bounds] = None
    attempts: int = 1
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def room_count(self) -> int:
        """Pieces in the layout, origin included."""
        return len(self.placements) + 1 if self.success else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "seed": self.seed,
            "room_count": self.room_count,
            "path_length": self.path_length,
            "iterations": self.iterations,
            "attempts": self.attempts,
            "bounds": self.bounds.to_dict() if self.bounds else None,
            "placements": [
                {
                    "piece": p.piece.name,
                    "offset": [p.offset.x, p.offset.y],
                    "door": {"side": p.connecting_door.direction.value,
                             "cell": [p.connecting_door.cell.x, p.connecting_door.cell.y]},
                }
                for p in self.placements
            ],
            "metrics": self.metrics,
        }


class MapGenerator:
    def __init__(self, catalog: Optional[PieceCatalog] = None, config: Optional[GeneratorConfig] = None, rng=None):
        self.catalog = catalog or default_catalog()
        self.config = (config or GeneratorConfig()).validate()
        self._rng = rng
        self.last_search: Optional[BacktrackingSearch] = None

    def generate(self, materializer: Optional[Materializer] = None, seed=None) -> GenerationResult:
        """Run one generation attempt.

        Raises IterationBudgetExceeded when the search runs past its budget.
        """
        cfg = self.config
        seed = coerce_seed(seed if seed is not None else cfg.seed)
        rng = self._rng if self._rng is not None else random.Random(seed)
        metrics = init_metrics() if cfg.enable_metrics else None

        # dispose of the previous generation before starting over
        if materializer is not None:
            materializer.clear()

        _log.info(event="mapgen_start", seed=seed, max_rooms=cfg.max_rooms, budget=cfg.iteration_budget)
        start = time.perf_counter()
        search = BacktrackingSearch(self.catalog, cfg, rng=rng, metrics=metrics)
        self.last_search = search
        outcome = search.run()
        search_ms = (time.perf_counter() - start) * 1000
        iterations = search.context.iterations

        if outcome is SearchOutcome.ABORTED:
            _log.error(event="mapgen_budget_exceeded", seed=seed, iterations=iterations, budget=cfg.iteration_budget)
            raise IterationBudgetExceeded(iterations, cfg.iteration_budget)

        if outcome is SearchOutcome.EXHAUSTED:
            if metrics is not None:
                metrics['runtime_ms'] = round(search_ms, 3)
                metrics['phase_ms'] = {'search': round(search_ms, 3)}
            _log.error(event="mapgen_failed", seed=seed, iterations=iterations)
            return GenerationResult(False, seed, iterations=iterations, metrics=metrics or {})

        placements = search.placements
        if materializer is not None:
            ms = time.perf_counter()
            materialize_plan(self.catalog, placements, materializer)
            mat_ms = (time.perf_counter() - ms) * 1000
        else:
            mat_ms = 0.0
        if metrics is not None:
            metrics['runtime_ms'] = round(search_ms + mat_ms, 3)
            metrics['phase_ms'] = {'search': round(search_ms, 3), 'materialize': round(mat_ms, 3)}
        result = GenerationResult(
            True,
            seed,
            placements=placements,
            path_length=search.path_length,
            iterations=iterations,
            bounds=Bounds.of(search.context.occupied),
            metrics=metrics or {},
        )
        _log.info(event="mapgen_complete", seed=seed, rooms=result.room_count, path=result.path_length, iterations=iterations)
        return result

    def generate_with_retries(self, materializer: Optional[Materializer] = None, attempts: Optional[int] = None, seed=None) -> GenerationResult:
        """Retry with fresh derived seeds until one attempt succeeds.

        Budget aborts count as failed attempts; if the final attempt aborted the
        exception is re-raised so callers can tell "too expensive" from "no layout".
        """
        attempts = attempts or self.config.attempts
        base = coerce_seed(seed if seed is not None else self.config.seed)
        last_abort: Optional[IterationBudgetExceeded] = None
        total_iterations = 0
        for attempt in range(attempts):
            attempt_seed = base + attempt
            try:
                result = self.generate(materializer, seed=attempt_seed)
            except IterationBudgetExceeded as e:
                last_abort = e
                total_iterations += e.iterations
                continue
            last_abort = None
            total_iterations += result.iterations
            result.attempts = attempt + 1
            if result.success:
                return result
        if last_abort is not None:
            raise last_abort
        return GenerationResult(False, base, iterations=total_iterations, attempts=attempts)


def materialize_plan(catalog: PieceCatalog, placements: List[Placement], materializer: Materializer) -> None:
    """Origin first, then each placement's piece followed by its connector."""
    materializer.place_piece(catalog.origin, ORIGIN)
    for p in placements:
        materializer.place_piece(p.piece, p.offset)
        materializer.place_connector(p.connecting_door, p.connecting_door.is_horizontal())


__all__ = ["GenerationResult", "MapGenerator", "materialize_plan"]
