"""Randomized backtracking search that assembles pieces door-to-door.

One search owns a single ``SearchContext`` (occupied cells, placement stack,
bounding box, exit bookkeeping, iteration count). Each recursion step mutates
it in place and undoes its own changes when the branch fails, so only one
branch is ever live.

Step at depth ``d`` (pieces accepted so far, origin included):
  1. count the iteration; past the budget the whole search is ABORTED
  2. shuffle the frontier of unconnected doors
  3. empty frontier -> leaf check (room count, single exit, shape, path length)
  4. otherwise connect the first frontier door, trying every catalog piece once
     in weight-biased random order; filters skip a candidate, never fail the step.
     The last filter drops candidates that leave the frontier impossible to
     close: more open doors than rooms left, or a door whose next cell is
     taken or outside the allowed span.
  5. no candidate leads to a solution -> EXHAUSTED (parent tries its next one)
"""
from __future__ import annotations
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, NamedTuple, Optional, Set

from ..logging_utils import get_logger
from .catalog import PieceCatalog
from .config import GeneratorConfig
from .connectivity import UNREACHABLE, shortest_path_length
from .geometry import Cell, Door, ORIGIN, Piece
from .metrics import init_metrics
from .placement import placement_offset
from .selection import weighted_pick_and_remove

_log = get_logger("mapgen.search")


class SearchOutcome(Enum):
    SUCCESS = "success"
    EXHAUSTED = "exhausted"
    ABORTED = "aborted"


class Placement(NamedTuple):
    piece: Piece
    offset: Cell
    connecting_door: Door

    @property
    def matched_door(self) -> Door:
        """The placed piece's door that joined ``connecting_door``."""
        return self.connecting_door.matching_door()


@dataclass(frozen=True)
class Bounds:
    min_x: int
    max_x: int
    min_y: int
    max_y: int

    @classmethod
    def of(cls, cells: Iterable[Cell]) -> "Bounds":
        cells = list(cells)
        xs = [c.x for c in cells]
        ys = [c.y for c in cells]
        return cls(min(xs), max(xs), min(ys), max(ys))

    def extended(self, cells: Iterable[Cell]) -> "Bounds":
        min_x, max_x, min_y, max_y = self.min_x, self.max_x, self.min_y, self.max_y
        for c in cells:
            min_x = min(min_x, c.x)
            max_x = max(max_x, c.x)
            min_y = min(min_y, c.y)
            max_y = max(max_y, c.y)
        return Bounds(min_x, max_x, min_y, max_y)

    @property
    def span_x(self) -> int:
        return self.max_x - self.min_x

    @property
    def span_y(self) -> int:
        return self.max_y - self.min_y

    def fits(self, max_span: int) -> bool:
        return self.span_x <= max_span and self.span_y <= max_span

    def to_dict(self) -> Dict[str, int]:
        return {"min_x": self.min_x, "max_x": self.max_x, "min_y": self.min_y, "max_y": self.max_y}


class SearchContext:
    """Mutable state of one in-flight search."""
    __slots__ = ("occupied", "placements", "bounds", "exit_count", "exit_position", "iterations")

    def __init__(self, origin: Piece):
        self.occupied: Set[Cell] = set(origin.occupied_cells(ORIGIN))
        self.placements: List[Placement] = []
        self.bounds = Bounds(*origin.extent(ORIGIN))
        self.exit_count = 0
        self.exit_position: Optional[Cell] = None
        self.iterations = 0


class BacktrackingSearch:
    def __init__(self, catalog: PieceCatalog, config: GeneratorConfig, rng=None, metrics: Optional[dict] = None):
        self.catalog = catalog
        self.config = config
        self.rng = rng if rng is not None else random.Random(config.seed)
        if metrics is None and config.enable_metrics:
            metrics = init_metrics()
        self.metrics = metrics
        self.context = SearchContext(catalog.origin)
        self.outcome: Optional[SearchOutcome] = None
        self.path_length: Optional[int] = None

    def run(self) -> SearchOutcome:
        """Reset all state, seed the frontier with the origin's doors and search."""
        self.context = SearchContext(self.catalog.origin)
        self.path_length = None
        frontier = self.catalog.origin.doors(ORIGIN)
        self.outcome = self._step(frontier, 1)
        if self.metrics is not None:
            self.metrics['iterations'] = self.context.iterations
        return self.outcome

    @property
    def placements(self) -> List[Placement]:
        return list(self.context.placements)

    def shortest_path(self) -> int:
        """BFS edge count from the origin to the placed exit (UNREACHABLE if none)."""
        ctx = self.context
        if ctx.exit_position is None:
            return UNREACHABLE
        return shortest_path_length(ctx.placements, ctx.exit_position, ORIGIN, origin=self.catalog.origin)

    def _bump(self, key: str, amount: int = 1):
        if self.metrics is not None:
            self.metrics[key] += amount

    def _slot_allows(self, depth: int, is_exit: bool) -> bool:
        last_slot = self.config.max_rooms - 1
        if depth >= self.config.max_rooms:
            return False
        if depth == last_slot:
            return is_exit
        return not is_exit

    def _can_close(self, frontier: List[Door], placed: int, new_cells: Set[Cell], bounds: Bounds) -> bool:
        # every remaining slot closes at most one door
        if len(frontier) > self.config.max_rooms - placed:
            return False
        occupied = self.context.occupied
        for door in frontier:
            target = door.matching_door().cell
            if target in occupied or target in new_cells:
                return False
            if not bounds.extended((target,)).fits(self.config.max_bound_span):
                return False
        return True

    def _leaf_check(self, depth: int) -> bool:
        ctx = self.context
        cfg = self.config
        if self.metrics is not None:
            self.metrics['leaf_checks'] += 1
        reason = None
        path_len = None
        if depth != cfg.max_rooms:
            reason = 'depth'
        elif ctx.exit_count != 1:
            reason = 'exit'
        elif not ctx.bounds.fits(cfg.max_bound_span):
            reason = 'shape'
        else:
            path_len = self.shortest_path()
            if path_len == UNREACHABLE or path_len < cfg.min_path_length:
                reason = 'path'
        _log.debug(
            event="mapgen_leaf",
            depth=depth,
            exits=ctx.exit_count,
            bounds_x=f"{ctx.bounds.min_x}..{ctx.bounds.max_x}",
            bounds_y=f"{ctx.bounds.min_y}..{ctx.bounds.max_y}",
            path=path_len,
            rejected=reason,
        )
        if reason is not None:
            if self.metrics is not None:
                self.metrics['leaf_failures'][reason] += 1
            return False
        self.path_length = path_len
        return True

    def _step(self, frontier: List[Door], depth: int) -> SearchOutcome:
        ctx = self.context
        cfg = self.config
        ctx.iterations += 1
        if ctx.iterations > cfg.iteration_budget:
            return SearchOutcome.ABORTED
        if self.metrics is not None and depth > self.metrics['max_depth']:
            self.metrics['max_depth'] = depth

        doors = list(frontier)
        self.rng.shuffle(doors)

        if not doors:
            return SearchOutcome.SUCCESS if self._leaf_check(depth) else SearchOutcome.EXHAUSTED

        door_to_connect = doors[0]
        need = door_to_connect.matching_direction()
        candidates = list(self.catalog.pieces)
        while candidates:
            candidate = weighted_pick_and_remove(candidates, self.rng)
            self._bump('candidates_drawn')
            is_exit = self.catalog.is_exit(candidate)

            if not self._slot_allows(depth, is_exit):
                self._bump('exit_rule_skips')
                continue
            if not candidate.has_door_on_side(need):
                self._bump('door_mismatches')
                continue
            if is_exit and ctx.exit_count >= 1:
                self._bump('exit_rule_skips')
                continue

            offset = placement_offset(door_to_connect, candidate)
            cells = candidate.occupied_cells(offset)
            if any(c in ctx.occupied for c in cells):
                self._bump('overlaps_rejected')
                continue

            old_bounds = ctx.bounds
            new_bounds = old_bounds.extended(cells)
            if not new_bounds.fits(cfg.max_bound_span):
                self._bump('shape_pruned')
                continue

            new_frontier = list(doors)
            new_frontier.remove(door_to_connect)
            new_frontier.extend(d for d in candidate.doors(offset) if not d.is_matching(door_to_connect))
            if not self._can_close(new_frontier, depth + 1, set(cells), new_bounds):
                self._bump('dead_ends_pruned')
                continue

            # accept
            ctx.bounds = new_bounds
            ctx.occupied.update(cells)
            placement = Placement(candidate, offset, door_to_connect)
            if is_exit:
                ctx.exit_count += 1
                ctx.exit_position = placement.matched_door.cell
            ctx.placements.append(placement)
            self._bump('placements_accepted')

            outcome = self._step(new_frontier, depth + 1)
            if outcome is not SearchOutcome.EXHAUSTED:
                return outcome

            # backtrack
            ctx.placements.pop()
            if is_exit:
                ctx.exit_count -= 1
                ctx.exit_position = None
            ctx.occupied.difference_update(cells)
            if cfg.restore_bounds_on_backtrack:
                ctx.bounds = old_bounds
            self._bump('backtracks')

        return SearchOutcome.EXHAUSTED


__all__ = ["SearchOutcome", "Placement", "Bounds", "SearchContext", "BacktrackingSearch"]
