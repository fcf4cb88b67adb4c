from typing import Dict


def init_metrics() -> Dict[str, object]:
    return {
        'iterations': 0,
        'candidates_drawn': 0,
        'door_mismatches': 0,
        'exit_rule_skips': 0,
        'overlaps_rejected': 0,
        'shape_pruned': 0,
        'dead_ends_pruned': 0,
        'placements_accepted': 0,
        'backtracks': 0,
        'leaf_checks': 0,
        'leaf_failures': {'depth': 0, 'exit': 0, 'shape': 0, 'path': 0},
        'max_depth': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
