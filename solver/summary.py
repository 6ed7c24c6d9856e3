# solver/summary.py: human-readable results and per-start marks
from __future__ import annotations

from enum import Enum
from typing import Dict

from board import Board
from models import Point
from pieces import Piece
from solver.cache import SolutionCache
from solver.computation import Algorithm, Computation, ComputeInput, Failed, Successful
from solver.orchestrator import solve_tour


class CellMark(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    GIVEN_UP = "given_up"

    @classmethod
    def from_computation(cls, comp: Computation) -> "CellMark":
        if isinstance(comp, Successful):
            return cls.SUCCEEDED
        if isinstance(comp, Failed):
            return cls.FAILED
        return cls.GIVEN_UP


def summarize(comp: Computation) -> str:
    return comp.describe()


def survey_starts(
    board: Board,
    piece: Piece,
    algorithm: Algorithm,
    safety_cap: int,
    cache: SolutionCache,
) -> Dict[Point, CellMark]:
    """Mark every available start cell with the outcome of a tour from it.

    Each start is an ordinary cached query, so a later query for any single
    start is served from ``cache``.
    """
    points = board.available_points()
    marks: Dict[Point, CellMark] = {}
    if not points:
        return marks
    base = ComputeInput(algorithm, board, piece, points[0], safety_cap)
    for start in points:
        comp = solve_tour(base.with_start(start), cache)
        marks[start] = CellMark.from_computation(comp)
    return marks


__all__ = ["CellMark", "summarize", "survey_starts"]
