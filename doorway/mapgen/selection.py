"""Weighted random draw without replacement over a candidate pool."""
from __future__ import annotations
import random
from typing import List

from .geometry import Piece


def weighted_pick_and_remove(candidates: List[Piece], rng=None) -> Piece:
    """Remove and return one candidate, chosen with probability weight / total.

    Repeated calls on the same list enumerate every candidate exactly once.
    """
    if not candidates:
        raise ValueError("cannot draw from an empty candidate pool")
    if rng is None:
        rng = random
    total = sum(c.weight for c in candidates)
    pick = rng.randrange(total)
    cum = 0
    for i, candidate in enumerate(candidates):
        cum += candidate.weight
        if pick < cum:
            return candidates.pop(i)
    # unreachable while every weight is >= 1
    return candidates.pop()


__all__ = ["weighted_pick_and_remove"]
