"""Backtracking search scenarios on hand-checked piece pools."""

from __future__ import annotations

import random

from conftest import make_catalog

from doorway.mapgen import (
    BacktrackingSearch,
    Bounds,
    Cell,
    Direction,
    Door,
    GeneratorConfig,
    Piece,
    PieceCatalog,
    Placement,
    SearchOutcome,
)


def _search(catalog, **cfg):
    cfg.setdefault("seed", 1)
    return BacktrackingSearch(catalog, GeneratorConfig(**cfg), rng=random.Random(cfg["seed"]))


def test_straight_line_succeeds(line_catalog):
    s = _search(line_catalog, max_rooms=3, min_path_length=2, max_bound_span=7)
    assert s.run() is SearchOutcome.SUCCESS
    mid = line_catalog.get("mid")
    exit_piece = line_catalog.exit
    assert s.placements == [
        Placement(mid, Cell(1, 0), Door(Direction.EAST, Cell(0, 0))),
        Placement(exit_piece, Cell(2, 0), Door(Direction.EAST, Cell(1, 0))),
    ]
    assert s.path_length == 2
    assert s.context.iterations == 3
    assert s.context.exit_count == 1
    assert s.context.exit_position == Cell(2, 0)
    assert s.context.occupied == {Cell(0, 0), Cell(1, 0), Cell(2, 0)}


def test_path_too_short_exhausts_without_error(line_catalog):
    s = _search(line_catalog, max_rooms=3, min_path_length=6, max_bound_span=7)
    assert s.run() is SearchOutcome.EXHAUSTED
    assert s.placements == []
    assert s.metrics["leaf_failures"]["path"] == 1
    assert s.context.iterations == 3
    # everything but the origin was undone
    assert s.context.occupied == {Cell(0, 0)}
    assert s.context.exit_count == 0


def test_no_piece_fits_second_door_exhausts_at_depth_two():
    catalog = make_catalog("E", [("bend", "WN")], "W")
    s = _search(catalog, max_rooms=3, min_path_length=2)
    assert s.run() is SearchOutcome.EXHAUSTED
    assert s.metrics["max_depth"] == 2
    assert s.metrics["leaf_checks"] == 0
    assert s.context.iterations == 2


def test_budget_of_one_aborts(line_catalog):
    s = _search(line_catalog, max_rooms=3, min_path_length=2, iteration_budget=1)
    assert s.run() is SearchOutcome.ABORTED
    assert s.context.iterations == 2


def test_frontier_closing_early_fails_room_count():
    catalog = make_catalog("E", [("cap_w", "W")], "W")
    s = _search(catalog, max_rooms=3, min_path_length=0)
    assert s.run() is SearchOutcome.EXHAUSTED
    assert s.metrics["leaf_failures"]["depth"] == 1
    assert s.metrics["backtracks"] == 1


def test_exit_only_allowed_in_last_slot(line_catalog):
    # with four rooms the exit can never follow the origin directly
    s = _search(line_catalog, max_rooms=4, min_path_length=0)
    assert s.run() is SearchOutcome.SUCCESS
    names = [p.piece.name for p in s.placements]
    assert names == ["mid", "mid", "exit"]


def test_bounding_box_rejects_candidate_outside_span(line_catalog):
    s = _search(line_catalog, max_rooms=3, min_path_length=0, max_bound_span=0)
    assert s.run() is SearchOutcome.EXHAUSTED
    assert s.metrics["shape_pruned"] == 1
    assert s.metrics["placements_accepted"] == 0


def test_door_leading_out_of_span_prunes_and_box_is_restored(line_catalog):
    # the second mid would leave a door whose next cell lies past the span
    s = _search(line_catalog, max_rooms=5, min_path_length=0, max_bound_span=2)
    assert s.run() is SearchOutcome.EXHAUSTED
    assert s.metrics["dead_ends_pruned"] == 1
    assert s.metrics["placements_accepted"] == 1
    assert s.context.bounds == Bounds(0, 0, 0, 0)


def test_loose_bounds_keep_widened_box_after_backtrack(line_catalog):
    s = _search(line_catalog, max_rooms=5, min_path_length=0, max_bound_span=2, restore_bounds_on_backtrack=False)
    assert s.run() is SearchOutcome.EXHAUSTED
    assert s.metrics["dead_ends_pruned"] == 1
    assert s.context.bounds == Bounds(0, 1, 0, 0)


def test_rerun_resets_state(line_catalog):
    s = _search(line_catalog, max_rooms=3, min_path_length=2)
    assert s.run() is SearchOutcome.SUCCESS
    first = s.placements
    assert s.run() is SearchOutcome.SUCCESS
    assert s.placements == first
    assert s.context.iterations == 3
    assert len(s.context.occupied) == 3


def test_branching_layout_found_for_some_seeds(tee_catalog):
    outcomes = []
    for seed in range(20):
        s = _search(tee_catalog, max_rooms=4, min_path_length=2, seed=seed)
        outcome = s.run()
        assert outcome in (SearchOutcome.SUCCESS, SearchOutcome.EXHAUSTED)
        outcomes.append(outcome)
        if outcome is SearchOutcome.SUCCESS:
            by_name = {p.piece.name: p for p in s.placements}
            assert set(by_name) == {"tee", "cap_s", "exit"}
            assert by_name["tee"].offset == Cell(1, 0)
            assert by_name["cap_s"].offset == Cell(1, 1)
            assert by_name["exit"].offset == Cell(1, -1)
            assert s.placements[-1].piece.name == "exit"
            assert s.path_length == 2
    assert SearchOutcome.SUCCESS in outcomes


def test_metrics_disabled():
    catalog = make_catalog("E", [("mid", "WE")], "W")
    s = BacktrackingSearch(catalog, GeneratorConfig(max_rooms=3, min_path_length=2, enable_metrics=False, seed=3))
    assert s.metrics is None
    assert s.run() is SearchOutcome.SUCCESS


def _wide_catalog(east_door_cell):
    origin = Piece.single("origin", "E")
    wide = Piece(
        name="wide",
        door_templates=((Direction.WEST, Cell(0, 0)), (Direction.EAST, east_door_cell)),
        cells=(Cell(0, 0), Cell(1, 0)),
    )
    exit_piece = Piece.single("exit", "W")
    return PieceCatalog([origin, wide, exit_piece], origin, exit_piece)


def test_route_through_two_cell_piece_succeeds():
    catalog = _wide_catalog(Cell(1, 0))
    s = _search(catalog, max_rooms=3, min_path_length=3)
    assert s.run() is SearchOutcome.SUCCESS
    assert [(p.piece.name, p.offset) for p in s.placements] == [("wide", Cell(1, 0)), ("exit", Cell(3, 0))]
    # origin -> wide west door -> wide east door -> exit
    assert s.path_length == 3
    assert s.context.occupied == {Cell(0, 0), Cell(1, 0), Cell(2, 0), Cell(3, 0)}


def test_door_facing_own_footprint_is_a_dead_end():
    # the east door sits on the west cell and faces the piece's own east cell
    catalog = _wide_catalog(Cell(0, 0))
    s = _search(catalog, max_rooms=3, min_path_length=0)
    assert s.run() is SearchOutcome.EXHAUSTED
    assert s.metrics["dead_ends_pruned"] == 1
    assert s.metrics["placements_accepted"] == 0


def test_more_open_doors_than_rooms_left_is_a_dead_end(tee_catalog):
    # three rooms: after the tee only the exit slot remains for two open doors
    s = _search(tee_catalog, max_rooms=3, min_path_length=0)
    assert s.run() is SearchOutcome.EXHAUSTED
    assert s.metrics["dead_ends_pruned"] == 1
    assert s.metrics["placements_accepted"] == 0
