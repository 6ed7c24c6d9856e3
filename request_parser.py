# request_parser.py: JSON/form payload -> ComputeInput
from __future__ import annotations

import re
from typing import Any, List, Optional, Tuple

from board import Board
from config import CFG
from models import Path, Point, Move
from pieces import Piece, custom_piece, leaper, preset
from solver.computation import Algorithm, ComputeInput

_PAIR_RE = re.compile(r"^\s*\(?\s*(?P<a>-?\d+)\s*[, x×]\s*(?P<b>-?\d+)\s*\)?\s*$")


def _first(val: Any) -> Any:
    # form mappings carry lists; JSON carries scalars
    if isinstance(val, list) and len(val) == 1 and not isinstance(val[0], (list, tuple)):
        return val[0]
    return val


def _to_int(x: Any) -> Optional[int]:
    if isinstance(x, bool):
        return None
    try:
        return int(float(x))
    except Exception:
        return None


def _to_pair(val: Any) -> Optional[Tuple[int, int]]:
    """Accept ``[r, c]``, ``{"row": r, "column": c}`` or ``"r,c"``."""
    val = _first(val)
    if isinstance(val, dict):
        a = _to_int(val.get("row"))
        b = _to_int(val.get("column", val.get("col")))
    elif isinstance(val, (list, tuple)) and len(val) == 2:
        a, b = _to_int(val[0]), _to_int(val[1])
    elif isinstance(val, str):
        m = _PAIR_RE.match(val)
        if not m:
            return None
        a, b = int(m.group("a")), int(m.group("b"))
    else:
        return None
    if a is None or b is None:
        return None
    return a, b


def parse_point(val: Any) -> Optional[Point]:
    pair = _to_pair(val)
    if pair is None or pair[0] < 1 or pair[1] < 1:
        return None
    return Point(*pair)


def _point_list(val: Any) -> Tuple[List[Point], Optional[str]]:
    if val is None:
        return [], None
    if not isinstance(val, (list, tuple)):
        return [], "expected a list of [row, column] pairs"
    out: List[Point] = []
    for item in val:
        p = parse_point(item)
        if p is None:
            return [], f"bad cell {item!r}"
        out.append(p)
    return out, None


def _in_size_bounds(n: int) -> bool:
    return CFG.BOARD_MIN_SIZE <= n <= CFG.BOARD_MAX_SIZE


def parse_board(like: Any) -> Tuple[Optional[Board], Optional[str]]:
    """Build a board from ``board`` rows text or ``width``/``height`` plus edits."""
    if not isinstance(like, dict):
        return None, "request body must be an object"

    raw = _first(like.get("board"))
    if isinstance(raw, dict):
        nested = dict(raw)
    else:
        nested = {"rows": raw} if raw is not None else {}
    for k in ("width", "height"):
        if k in like and k not in nested:
            nested[k] = _first(like[k])
    for k in ("disabled", "targets"):
        if k in like and k not in nested:
            nested[k] = like[k]

    rows = nested.get("rows")
    if rows is not None:
        lines = rows.splitlines() if isinstance(rows, str) else rows
        if not isinstance(lines, (list, tuple)) or not all(isinstance(s, str) for s in lines):
            return None, "board rows must be strings"
        try:
            board = Board.from_text([s for s in lines if s.strip()])
        except ValueError as e:
            return None, f"bad board: {e}"
    else:
        width = _to_int(nested.get("width", CFG.DEFAULT_COLUMNS))
        height = _to_int(nested.get("height", CFG.DEFAULT_ROWS))
        if width is None or height is None:
            return None, "board width and height must be integers"
        if not (_in_size_bounds(width) and _in_size_bounds(height)):
            return None, (
                f"board size {height}x{width} outside "
                f"{CFG.BOARD_MIN_SIZE}..{CFG.BOARD_MAX_SIZE}"
            )
        board = Board(height, width)

    if not (_in_size_bounds(board.width) and _in_size_bounds(board.height)):
        return None, (
            f"board size {board.height}x{board.width} outside "
            f"{CFG.BOARD_MIN_SIZE}..{CFG.BOARD_MAX_SIZE}"
        )

    disabled, err = _point_list(nested.get("disabled"))
    if err:
        return None, f"disabled: {err}"
    targets, err = _point_list(nested.get("targets"))
    if err:
        return None, f"targets: {err}"

    try:
        for p in disabled:
            board.set_unavailable(p)
        for p in targets:
            board.toggle_target(p)
    except ValueError as e:
        return None, str(e)
    return board, None


def parse_piece(val: Any) -> Tuple[Optional[Piece], Optional[str]]:
    """A preset name, ``{"leaper": [a, b]}`` or ``{"moves": [[dr, dc], ...]}``."""
    val = _first(val)
    if val is None or val == "":
        val = CFG.DEFAULT_PIECE
    try:
        if isinstance(val, str):
            piece = preset(val)
            if piece is None:
                pair = _to_pair(val)
                if pair is None:
                    return None, f"unknown piece {val!r}"
                piece = leaper(*pair)
            return piece, None
        if isinstance(val, dict):
            name = val.get("name")
            if "leaper" in val:
                pair = _to_pair(val["leaper"])
                if pair is None:
                    return None, "leaper needs two integers"
                return leaper(pair[0], pair[1], name), None
            if "moves" in val:
                moves = val["moves"]
                if not isinstance(moves, (list, tuple)):
                    return None, "moves must be a list of [dr, dc] pairs"
                pairs = []
                for m in moves:
                    pair = _to_pair(m)
                    if pair is None:
                        return None, f"bad move {m!r}"
                    pairs.append(pair)
                return custom_piece(pairs, name or "Custom"), None
    except ValueError as e:
        return None, str(e)
    return None, f"unknown piece {val!r}"


def parse_safety_cap(val: Any) -> Tuple[Optional[int], Optional[str]]:
    val = _first(val)
    if val is None or val == "":
        return CFG.SAFETY_CAP, None
    cap = _to_int(val)
    if cap is None:
        return None, f"safety cap must be an integer (got {val!r})"
    if not (CFG.SAFETY_CAP_MIN <= cap <= CFG.SAFETY_CAP_MAX):
        return None, (
            f"safety cap {cap} outside {CFG.SAFETY_CAP_MIN}..{CFG.SAFETY_CAP_MAX}"
        )
    return cap, None


def parse_tour_request(like: Any) -> Tuple[Optional[ComputeInput], Optional[str]]:
    """
    Return (query, error_message_or_None).
    The query is built but not validated against the board; the orchestrator
    rejects unavailable starts.
    """
    if not like or not isinstance(like, dict):
        return None, "nothing parsed from request"

    board, err = parse_board(like)
    if err:
        return None, err

    piece, err = parse_piece(like.get("piece"))
    if err:
        return None, err

    alg_name = _first(like.get("algorithm")) or CFG.DEFAULT_ALGORITHM
    algorithm = Algorithm.from_name(str(alg_name))
    if algorithm is None:
        return None, f"unknown algorithm {alg_name!r}"

    cap, err = parse_safety_cap(like.get("safety_cap"))
    if err:
        return None, err

    if "start" not in like:
        return None, "missing start"
    start = parse_point(like.get("start"))
    if start is None:
        return None, f"bad start {like.get('start')!r}"

    return ComputeInput(algorithm, board, piece, start, cap), None


def parse_path(val: Any, board: Board) -> Tuple[Optional[Path], Optional[str]]:
    """A manual path as a list of visited cells, first cell first."""
    points, err = _point_list(val)
    if err:
        return None, f"path: {err}"
    path = Path()
    if len(points) == 1:
        # a lone start cell is kept as a terminal self-loop
        if not board.validate(points[0]):
            return None, f"path leaves the board at {points[0]}"
        path.append(Move(points[0], points[0]))
        return path, None
    for a, b in zip(points, points[1:]):
        move = Move.new_checked(a, b, board)
        if move is None:
            return None, f"path leaves the board at {a} -> {b}"
        path.append(move)
    return path, None


__all__ = [
    "parse_board",
    "parse_path",
    "parse_piece",
    "parse_point",
    "parse_safety_cap",
    "parse_tour_request",
]
