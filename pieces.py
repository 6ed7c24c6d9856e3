# pieces.py: leaper definitions
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from models import Point

Offset = Tuple[int, int]


@dataclass(frozen=True)
class Piece:
    """A leaper: a fixed, position-independent set of relative moves."""

    name: str
    moves: Tuple[Offset, ...]

    def __post_init__(self):
        if not self.moves:
            raise ValueError("A piece needs at least one relative move")
        for dr, dc in self.moves:
            if dr == 0 and dc == 0:
                raise ValueError("The (0, 0) offset is not a move")

    def relative_moves(self) -> Tuple[Offset, ...]:
        return self.moves

    def is_valid_move(self, from_: Point, to: Point) -> bool:
        return (to.row - from_.row, to.column - from_.column) in self.moves

    def relative_points(self, start: Point) -> List[Point]:
        """Every destination reachable from ``start``, ignoring board bounds."""
        out: List[Point] = []
        for delta in self.moves:
            p = start.displace(delta)
            if p is not None:
                out.append(p)
        return out


def custom_piece(moves: Iterable[Iterable[int]], name: str = "Custom") -> Piece:
    seen: List[Offset] = []
    for m in moves:
        dr, dc = (int(v) for v in m)
        if (dr, dc) not in seen:
            seen.append((dr, dc))
    return Piece(name, tuple(seen))


def leaper(a: int, b: int, name: Optional[str] = None) -> Piece:
    """The (a, b)-leaper: all sign and axis permutations of ``(a, b)``.

    ``leaper(2, 1)`` yields the standard knight in its usual order.
    """
    a, b = int(a), int(b)
    perms = [
        (a, b), (b, a), (-b, a), (-a, b),
        (-a, -b), (-b, -a), (b, -a), (a, -b),
    ]
    return custom_piece(perms, name or f"({a}, {b})-leaper")


STANDARD_KNIGHT = leaper(2, 1, "Standard Knight")

PRESETS: Dict[str, Piece] = {
    "knight": STANDARD_KNIGHT,
    "camel": leaper(3, 1, "Camel"),
    "zebra": leaper(3, 2, "Zebra"),
    "giraffe": leaper(4, 1, "Giraffe"),
}


def preset(name: str) -> Optional[Piece]:
    return PRESETS.get((name or "").strip().lower())


__all__ = ["Piece", "STANDARD_KNIGHT", "PRESETS", "leaper", "custom_piece", "preset"]
