# solver/computation.py: public query/result types
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable, NamedTuple, Optional, Tuple, Union

from board import Board
from models import Move, Path, Point
from pieces import Piece


class InvalidRequest(ValueError):
    """A query that must be rejected before any search starts."""


class Algorithm(Enum):
    HEURISTIC_BACKTRACK = "Warnsdorf"
    EXHAUSTIVE_BACKTRACK = "Brute Force"
    HAMILTONIAN_CYCLE = "Hamiltonian Cycle"

    @property
    def label(self) -> str:
        return self.value

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @classmethod
    def from_name(cls, name: str) -> Optional["Algorithm"]:
        key = (name or "").strip().lower().replace("-", " ").replace("_", " ")
        return _ALIASES.get(key)


_DESCRIPTIONS = {
    Algorithm.HEURISTIC_BACKTRACK: (
        "An open tour search applying Warnsdorf's rule: from each cell only the "
        "moves whose destination has the fewest onward options are tried. It "
        "explores very little, but it can miss solutions that exist."
    ),
    Algorithm.EXHAUSTIVE_BACKTRACK: (
        "A recursive brute-force open tour search that still visits moves in "
        "Warnsdorf order before backtracking. Given enough safety budget it "
        "always finds a tour when one exists, so whenever the Warnsdorf search "
        "finds a tour this one does too. Boards without a tour "
        "can take exponentially long to rule out."
    ),
    Algorithm.HAMILTONIAN_CYCLE: (
        "A depth-first search for a closed tour over an explicit move graph. "
        "It ignores the safety cap and only reports whether a cycle exists; "
        "the cycle itself is not returned as a move sequence."
    ),
}

_ALIASES = {
    "warnsdorf": Algorithm.HEURISTIC_BACKTRACK,
    "heuristic": Algorithm.HEURISTIC_BACKTRACK,
    "heuristic backtrack": Algorithm.HEURISTIC_BACKTRACK,
    "weak": Algorithm.HEURISTIC_BACKTRACK,
    "brute force": Algorithm.EXHAUSTIVE_BACKTRACK,
    "bruteforce": Algorithm.EXHAUSTIVE_BACKTRACK,
    "exhaustive": Algorithm.EXHAUSTIVE_BACKTRACK,
    "exhaustive backtrack": Algorithm.EXHAUSTIVE_BACKTRACK,
    "hamiltonian": Algorithm.HAMILTONIAN_CYCLE,
    "hamiltonian cycle": Algorithm.HAMILTONIAN_CYCLE,
}


# ---------- results ----------

@dataclass(frozen=True)
class Successful:
    solution: Path
    explored_states: int

    @property
    def states(self) -> int:
        return self.explored_states

    @property
    def solution_length(self) -> int:
        return self.solution.tour_length

    def describe(self) -> str:
        return (
            f"Found a solution after {self.explored_states} states, "
            f"with {self.solution_length} moves"
        )


@dataclass(frozen=True)
class Failed:
    total_states: int

    @property
    def states(self) -> int:
        return self.total_states

    def describe(self) -> str:
        return f"Failed to find a solution after {self.total_states} states"


@dataclass(frozen=True)
class GivenUp:
    explored_states: int

    @property
    def states(self) -> int:
        return self.explored_states

    def describe(self) -> str:
        return f"Given up after {self.explored_states} states"


Computation = Union[Successful, Failed, GivenUp]


class Outcome(Enum):
    SUCCESSFUL = "successful"
    FAILED = "failed"
    GIVEN_UP = "given_up"


class PartialComputation(NamedTuple):
    """Search-internal result, before the state counter is attached."""

    outcome: Outcome
    moves: Tuple[Move, ...] = ()

    def add_state_count(self, count: int) -> Computation:
        if self.outcome is Outcome.SUCCESSFUL:
            return Successful(Path(list(self.moves)), count)
        if self.outcome is Outcome.FAILED:
            return Failed(count)
        return GivenUp(count)


FAILED = PartialComputation(Outcome.FAILED)
GIVEN_UP = PartialComputation(Outcome.GIVEN_UP)


# ---------- query ----------

@dataclass(frozen=True, eq=False)
class ComputeInput:
    """One tour query.  Compared and hashed by value.

    ``board`` is copied on construction so later edits to the caller's board
    never alter a query that is already queued or cached.
    """

    algorithm: Algorithm
    board: Board
    piece: Piece
    start: Point
    safety_cap: int
    _rows: tuple = field(init=False, repr=False)

    def __post_init__(self):
        snapshot = self.board.copy()
        object.__setattr__(self, "board", snapshot)
        object.__setattr__(self, "_rows", snapshot.rows())

    def cache_key(self) -> Hashable:
        """Everything that shapes the outcome except the safety cap.

        The cap is judged separately by the cache's staleness rule.
        """
        return (self.algorithm, self._rows, self.piece.moves, self.start)

    def validate(self) -> Optional[str]:
        if self.safety_cap < 1:
            return f"Safety cap must be at least 1 (got {self.safety_cap})"
        if self.start not in self.board.available_points():
            return f"Start {self.start} is not an available cell"
        return None

    def with_start(self, start: Point) -> "ComputeInput":
        return ComputeInput(self.algorithm, self.board, self.piece, start, self.safety_cap)

    def _key(self) -> tuple:
        return self.cache_key() + (self.safety_cap,)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComputeInput):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


__all__ = [
    "Algorithm",
    "Computation",
    "ComputeInput",
    "Failed",
    "FAILED",
    "GivenUp",
    "GIVEN_UP",
    "InvalidRequest",
    "Outcome",
    "PartialComputation",
    "Successful",
]
