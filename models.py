# models.py: board coordinates, cell options, moves and paths
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from board import Board


@dataclass(frozen=True, order=True)
class Point:
    """A 1-indexed board coordinate."""

    row: int
    column: int

    def displace(self, delta: Tuple[int, int]) -> Optional["Point"]:
        """Return the point reached by ``delta`` or ``None`` if it leaves the positive quadrant."""
        row = self.row + delta[0]
        column = self.column + delta[1]
        if row < 1 or column < 1:
            return None
        return Point(row, column)

    @classmethod
    def new_checked(cls, row: int, column: int, board: "Board") -> Optional["Point"]:
        p = cls(row, column)
        return p if board.validate(p) else None

    def key(self) -> int:
        # packed for fast set membership in the graph search
        return (self.row << 16) | self.column

    @classmethod
    def from_key(cls, key: int) -> "Point":
        return cls(key >> 16, key & 0xFFFF)

    def __str__(self) -> str:
        return f"({self.row}, {self.column})"


@dataclass(frozen=True)
class Available:
    can_finish_on: bool = True

    @property
    def is_available(self) -> bool:
        return True


@dataclass(frozen=True)
class Unavailable:
    @property
    def is_available(self) -> bool:
        return False


CellOption = Union[Available, Unavailable]

UNAVAILABLE = Unavailable()


@dataclass(frozen=True, order=True)
class Move:
    from_: Point
    to: Point

    @classmethod
    def new_checked(cls, from_: Point, to: Point, board: "Board") -> Optional["Move"]:
        if board.validate(from_) and board.validate(to):
            return cls(from_, to)
        return None

    @property
    def is_terminal(self) -> bool:
        """A self-loop marks the last cell of a finished tour."""
        return self.from_ == self.to

    def __str__(self) -> str:
        return f"{self.from_} -> {self.to}"


class Path:
    """Ordered sequence of moves.

    A search that completes a tour closes the sequence with a terminal
    self-loop on the final cell.  ``tour_moves`` and
    ``all_passed_through_points`` see through that marker, ``len`` and
    iteration do not.
    """

    __slots__ = ("_moves",)

    def __init__(self, moves: Optional[List[Move]] = None):
        self._moves: List[Move] = list(moves or [])

    def append(self, move: Move) -> None:
        self._moves.append(move)

    def undo(self) -> Optional[Move]:
        """Remove and return the last move, or ``None`` when empty."""
        if not self._moves:
            return None
        return self._moves.pop()

    def last(self) -> Optional[Move]:
        return self._moves[-1] if self._moves else None

    def find_index(self, move: Move) -> Optional[int]:
        try:
            return self._moves.index(move)
        except ValueError:
            return None

    def tour_moves(self) -> List[Move]:
        moves = list(self._moves)
        while moves and moves[-1].is_terminal:
            moves.pop()
        return moves

    def all_passed_through_points(self) -> List[Point]:
        """The ``from`` of every move plus the final ``to``, in order."""
        if not self._moves:
            return []
        moves = self.tour_moves()
        if not moves:
            return [self._moves[-1].to]
        points = [m.from_ for m in moves]
        points.append(moves[-1].to)
        return points

    @property
    def tour_length(self) -> int:
        return len(self.tour_moves())

    def __len__(self) -> int:
        return len(self._moves)

    def __iter__(self) -> Iterator[Move]:
        return iter(self._moves)

    def __getitem__(self, idx):
        return self._moves[idx]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._moves == other._moves

    def __hash__(self) -> int:
        return hash(tuple(self._moves))

    def __repr__(self) -> str:
        return f"Path({self._moves!r})"

    def __str__(self) -> str:
        return "".join(f"{m}\n" for m in self._moves)


__all__ = [
    "Point",
    "Available",
    "Unavailable",
    "CellOption",
    "UNAVAILABLE",
    "Move",
    "Path",
]
