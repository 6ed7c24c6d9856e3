# solver/backtrack.py: Warnsdorf-ordered open tour search
from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Union

from board import Board
from config import CFG
from models import Move, Point
from pieces import Piece
from solver.computation import (
    FAILED,
    GIVEN_UP,
    Computation,
    InvalidRequest,
    Outcome,
    PartialComputation,
)


class TourType(Enum):
    # only the moves tied for the lowest degree are tried
    HEURISTIC = "heuristic"
    # every move is tried, lowest degree first
    EXHAUSTIVE = "exhaustive"


@dataclass(frozen=True)
class NeverOccupied:
    can_finish_on: bool


class PreviouslyOccupied:
    __slots__ = ()

    def __repr__(self) -> str:
        return "PreviouslyOccupied"


PREVIOUSLY_OCCUPIED = PreviouslyOccupied()

CellState = Union[NeverOccupied, PreviouslyOccupied]


def ensure_recursion_headroom(depth: int) -> None:
    try:
        headroom = int(getattr(CFG, "RECURSION_HEADROOM", 200))
    except Exception:
        headroom = 200
    needed = depth + max(0, headroom)
    if sys.getrecursionlimit() < needed:
        sys.setrecursionlimit(needed)


def backtracking_tour(
    board: Board,
    piece: Piece,
    start: Point,
    safety_cap: int,
    tour_type: TourType = TourType.EXHAUSTIVE,
) -> Computation:
    """Search for an open tour of every available cell of ``board``.

    One recursive procedure serves both tour types.  From each cell the
    unvisited destinations are ordered by degree (Warnsdorf's rule); the
    heuristic search keeps only the lowest-degree ties, the exhaustive search
    keeps them all.  The first tour found wins.

    ``safety_cap`` bounds the number of states visited across the whole
    search tree.  Reaching it aborts every pending branch and yields
    :class:`GivenUp` with ``explored_states == safety_cap``.

    A successful solution lists the moves in travel order followed by a
    terminal self-loop on the last cell.
    """

    states: Dict[Point, CellState] = {}
    for p in board.available_points():
        cell = board.get(p)
        states[p] = NeverOccupied(cell.can_finish_on)
    if start not in states:
        raise InvalidRequest(f"Start {start} is not an available cell")

    offsets = piece.relative_moves()
    explored = 0

    def _free(p: Optional[Point]) -> bool:
        return p is not None and isinstance(states.get(p), NeverOccupied)

    def _degree(p: Point) -> int:
        return sum(1 for d in offsets if _free(p.displace(d)))

    def _search(remaining: int, current: Point) -> PartialComputation:
        nonlocal explored
        explored += 1
        if explored >= safety_cap:
            return GIVEN_UP

        if remaining == 0:
            state = states.get(current)
            assert isinstance(state, NeverOccupied), (
                f"Tour ended on previously occupied cell {current}"
            )
            if state.can_finish_on:
                return PartialComputation(Outcome.SUCCESSFUL, ())
            return FAILED

        candidates: List[Point] = []
        for d in offsets:
            q = current.displace(d)
            if _free(q):
                candidates.append(q)
        if not candidates:
            return FAILED

        # degrees are taken before ``current`` is marked, matching a fresh clone
        degrees = {q: _degree(q) for q in candidates}
        candidates.sort(key=degrees.__getitem__)
        if tour_type is TourType.HEURISTIC:
            lowest = degrees[candidates[0]]
            candidates = [q for q in candidates if degrees[q] == lowest]

        previous = states[current]
        states[current] = PREVIOUSLY_OCCUPIED
        try:
            for nxt in candidates:
                result = _search(remaining - 1, nxt)
                if result.outcome is Outcome.GIVEN_UP:
                    return GIVEN_UP
                if result.outcome is Outcome.SUCCESSFUL:
                    # moves accumulate deepest-first
                    return PartialComputation(
                        Outcome.SUCCESSFUL, result.moves + (Move(current, nxt),)
                    )
        finally:
            states[current] = previous
        return FAILED

    remaining = len(states) - 1
    ensure_recursion_headroom(remaining)
    result = _search(remaining, start)

    if result.outcome is Outcome.SUCCESSFUL:
        ordered = list(reversed(result.moves))
        last = ordered[-1].to if ordered else start
        ordered.append(Move(last, last))
        result = PartialComputation(Outcome.SUCCESSFUL, tuple(ordered))

    setattr(backtracking_tour, "last_stats", {
        "tour_type": tour_type.value,
        "cells": len(states),
        "safety_cap": safety_cap,
        "nodes": explored,
        "result": result.outcome.value,
    })
    return result.add_state_count(explored)


def warnsdorf_tour(board: Board, piece: Piece, start: Point, safety_cap: int) -> Computation:
    return backtracking_tour(board, piece, start, safety_cap, TourType.HEURISTIC)


def brute_force_tour(board: Board, piece: Piece, start: Point, safety_cap: int) -> Computation:
    return backtracking_tour(board, piece, start, safety_cap, TourType.EXHAUSTIVE)


__all__ = [
    "TourType",
    "NeverOccupied",
    "PREVIOUSLY_OCCUPIED",
    "backtracking_tour",
    "warnsdorf_tour",
    "brute_force_tour",
]
