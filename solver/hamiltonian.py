# solver/hamiltonian.py: closed tour search over an explicit move graph
from __future__ import annotations

from typing import Dict, List, NamedTuple, Optional, Set

from board import Board
from models import Path, Point
from pieces import Piece
from solver.backtrack import ensure_recursion_headroom
from solver.computation import Computation, Failed, InvalidRequest, Successful


class CycleSearch(NamedTuple):
    cycle: Optional[List[Point]]
    explored_states: int


def build_move_graph(board: Board, piece: Piece) -> Dict[int, Set[int]]:
    """Map each available cell (packed key) to the cells one move away."""
    graph: Dict[int, Set[int]] = {}
    for p in board.available_points():
        graph[p.key()] = {q.key() for q in board.valid_adjacent_points(p, piece)}
    return graph


def find_hamiltonian_cycle(board: Board, piece: Piece, start: Point) -> CycleSearch:
    """Depth-first search for a cycle through every available cell.

    No state cap is applied.  The returned cycle lists each vertex once,
    starting at ``start``; the closing edge back to ``start`` is implied.
    """
    graph = build_move_graph(board, piece)
    origin = start.key()
    if origin not in graph:
        raise InvalidRequest(f"Start {start} is not an available cell")

    total = len(graph)
    ordered = {k: sorted(v) for k, v in graph.items()}
    path: List[int] = [origin]
    visited: Set[int] = {origin}
    explored = 0

    def _extend(current: int) -> bool:
        nonlocal explored
        explored += 1
        if len(path) == total:
            return origin in graph[current]
        for nxt in ordered[current]:
            if nxt in visited:
                continue
            path.append(nxt)
            visited.add(nxt)
            if _extend(nxt):
                return True
            visited.discard(nxt)
            path.pop()
        return False

    ensure_recursion_headroom(total)
    found = _extend(origin)
    cycle = [Point.from_key(k) for k in path] if found else None
    setattr(find_hamiltonian_cycle, "last_stats", {
        "vertices": total,
        "edges": sum(len(v) for v in graph.values()),
        "nodes": explored,
        "result": "cycle" if found else "none",
    })
    return CycleSearch(cycle, explored)


def hamiltonian_tour(board: Board, piece: Piece, start: Point, safety_cap: int) -> Computation:
    """Engine entry for the cycle search.

    ``safety_cap`` is accepted for a uniform signature but not enforced, and
    a found cycle is reported as success with an empty move sequence.
    """
    search = find_hamiltonian_cycle(board, piece, start)
    if search.cycle is None:
        return Failed(search.explored_states)
    return Successful(Path(), search.explored_states)


__all__ = ["CycleSearch", "build_move_graph", "find_hamiltonian_cycle", "hamiltonian_tour"]
