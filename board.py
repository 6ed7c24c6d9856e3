# board.py: editable grid of cell options
from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from models import Available, CellOption, Point, UNAVAILABLE
from pieces import Piece

log = logging.getLogger(__name__)

_SYMBOLS = {"T": Available(True), "o": Available(False), "x": UNAVAILABLE}


class TargetState(Enum):
    ALL_FINISHABLE = "all"
    CERTAIN_FINISHABLE = "certain"
    NONE_FINISHABLE = "none"

    def default_cell(self) -> CellOption:
        """The option a newly enabled cell receives under this state."""
        return Available(can_finish_on=self is TargetState.ALL_FINISHABLE)


class Board:
    """Rectangular grid of :class:`CellOption`, rows and columns 1-indexed."""

    def __init__(self, rows: int = 8, columns: int = 8):
        if rows < 1 or columns < 1:
            raise ValueError(f"Board must be at least 1x1 (got {rows}x{columns})")
        self._cells: List[List[CellOption]] = [
            [Available(True) for _ in range(columns)] for _ in range(rows)
        ]

    @classmethod
    def from_cells(cls, cells: Sequence[Sequence[CellOption]]) -> "Board":
        if not cells or not cells[0]:
            raise ValueError("Board needs at least one cell")
        width = len(cells[0])
        if any(len(r) != width for r in cells):
            raise ValueError("Board rows must all have the same length")
        board = cls(len(cells), width)
        board._cells = [list(r) for r in cells]
        return board

    @classmethod
    def from_text(cls, lines: Sequence[str]) -> "Board":
        """Parse the :meth:`to_text` format (highest row first).

        ``T`` finishable, ``o`` available but not finishable, ``x`` disabled.
        """
        rows: List[List[CellOption]] = []
        for line in lines:
            tokens = [ch for ch in line if not ch.isspace()]
            try:
                rows.append([_SYMBOLS[ch] for ch in tokens])
            except KeyError as e:
                raise ValueError(f"Unknown cell symbol {e.args[0]!r}") from None
        rows.reverse()
        return cls.from_cells(rows)

    def to_text(self) -> str:
        lines = []
        for row in reversed(self._cells):
            out = []
            for cell in row:
                if not cell.is_available:
                    out.append("x")
                elif cell.can_finish_on:
                    out.append("T")
                else:
                    out.append("o")
            lines.append(" ".join(out))
        return "\n".join(lines)

    def copy(self) -> "Board":
        return Board.from_cells(self._cells)

    def rows(self) -> Tuple[Tuple[CellOption, ...], ...]:
        return tuple(tuple(r) for r in self._cells)

    # ---------- dimensions / lookup ----------

    @property
    def width(self) -> int:
        return len(self._cells[0])

    @property
    def height(self) -> int:
        return len(self._cells)

    def dimensions(self) -> Tuple[int, int]:
        return self.width, self.height

    def validate(self, p: Point) -> bool:
        if not (1 <= p.row <= self.height and 1 <= p.column <= self.width):
            return False
        return p.column <= len(self._cells[p.row - 1])

    def get(self, p: Point) -> Optional[CellOption]:
        if not self.validate(p):
            return None
        return self._cells[p.row - 1][p.column - 1]

    def is_available(self, p: Point) -> bool:
        cell = self.get(p)
        return cell is not None and cell.is_available

    def _require(self, p: Point) -> None:
        if not self.validate(p):
            raise ValueError(f"Invalid point: {p} on {self.height}x{self.width} board")

    def _set(self, p: Point, cell: CellOption) -> None:
        self._cells[p.row - 1][p.column - 1] = cell

    # ---------- point listings (row-major) ----------

    def all_points(self) -> List[Point]:
        return [
            Point(r, c)
            for r in range(1, self.height + 1)
            for c in range(1, self.width + 1)
        ]

    def available_points(self) -> List[Point]:
        return [p for p in self.all_points() if self._cells[p.row - 1][p.column - 1].is_available]

    def unavailable_points(self) -> List[Point]:
        return [p for p in self.all_points() if not self._cells[p.row - 1][p.column - 1].is_available]

    def valid_adjacent_points(self, start: Point, piece: Piece) -> List[Point]:
        return [p for p in piece.relative_points(start) if self.is_available(p)]

    # ---------- targets ----------

    def num_targets(self) -> int:
        n = 0
        for p in self.available_points():
            if self._cells[p.row - 1][p.column - 1].can_finish_on:
                n += 1
        return n

    def targets_state(self) -> TargetState:
        total = len(self.available_points())
        endable = self.num_targets()
        if endable == 0:
            return TargetState.NONE_FINISHABLE
        if endable == total:
            return TargetState.ALL_FINISHABLE
        return TargetState.CERTAIN_FINISHABLE

    def reset_targets(self) -> None:
        for p in self.available_points():
            self._set(p, Available(True))

    def check_for_targets_reset(self) -> None:
        """Heal a board where no available cell may finish a tour."""
        if self.targets_state() is TargetState.NONE_FINISHABLE:
            self.reset_targets()

    def toggle_target(self, p: Point) -> None:
        self._require(p)
        cell = self.get(p)
        if not cell.is_available:
            log.debug("Cannot target a cell that is disabled: %s", p)
            return
        log.info("Targeting/untargeting cell %s", p)
        if self.targets_state() is TargetState.ALL_FINISHABLE:
            # first target: every other cell stops being finishable
            for q in self.available_points():
                self._set(q, Available(False))
            self._set(p, Available(True))
            return
        self._set(p, Available(not cell.can_finish_on))
        self.check_for_targets_reset()

    # ---------- editing ----------

    def set_unavailable(self, p: Point) -> None:
        self._require(p)
        self._set(p, UNAVAILABLE)
        self.check_for_targets_reset()

    def set_available(self, p: Point) -> None:
        self._require(p)
        self._set(p, self.targets_state().default_cell())
        self.check_for_targets_reset()

    def resize_width(self, new_width: int) -> None:
        if new_width < 1:
            raise ValueError(f"Width must be positive (got {new_width})")
        new_cell = self.targets_state().default_cell()
        for row in self._cells:
            if len(row) < new_width:
                row.extend(new_cell for _ in range(new_width - len(row)))
            else:
                del row[new_width:]
        self.check_for_targets_reset()

    def resize_height(self, new_height: int) -> None:
        if new_height < 1:
            raise ValueError(f"Height must be positive (got {new_height})")
        width = self.width
        new_cell = self.targets_state().default_cell()
        if len(self._cells) < new_height:
            for _ in range(new_height - len(self._cells)):
                self._cells.append([new_cell] * width)
        else:
            del self._cells[new_height:]
        self.check_for_targets_reset()

    # ---------- text ----------

    def targets_description(self) -> str:
        state = self.targets_state()
        if state is TargetState.ALL_FINISHABLE:
            return "No specific cells are targeted."
        if state is TargetState.CERTAIN_FINISHABLE:
            return f"Only {self.num_targets()} cells are targeted."
        return "No cells are targeted."

    def description(self) -> str:
        return (
            f"{self.height}x{self.width} board with {len(self.available_points())} cells available "
            f"(and {len(self.unavailable_points())} cells disabled). {self.targets_description()}"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    __hash__ = None  # mutable; ComputeInput hashes rows() snapshots

    def __repr__(self) -> str:
        return f"Board({self.height}x{self.width})"

    def __str__(self) -> str:
        return self.to_text()


__all__ = ["Board", "TargetState"]
