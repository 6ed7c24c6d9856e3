# config.py
import os

# ======= Search caps =======
# Maximum number of recursive states a single query may visit before the
# search gives up.  The HTTP surface clamps requests to [MIN, MAX]; direct
# engine callers may pass any cap >= 1.
SAFETY_CAP     = int(os.getenv("TOUR_SAFETY_CAP", "6969"))
SAFETY_CAP_MIN = int(os.getenv("TOUR_SAFETY_CAP_MIN", "10"))
SAFETY_CAP_MAX = int(os.getenv("TOUR_SAFETY_CAP_MAX", "1000000"))

# Extra interpreter frames reserved on top of the tour length before a
# backtracking search starts.
RECURSION_HEADROOM = int(os.getenv("TOUR_RECURSION_HEADROOM", "200"))

# ======= Solution cache =======
CACHE_SIZE = int(os.getenv("TOUR_CACHE_SIZE", "10000"))

# ======= Board defaults =======
BOARD_MIN_SIZE = int(os.getenv("TOUR_BOARD_MIN_SIZE", "2"))
BOARD_MAX_SIZE = int(os.getenv("TOUR_BOARD_MAX_SIZE", "20"))
DEFAULT_ROWS    = int(os.getenv("TOUR_DEFAULT_ROWS", "8"))
DEFAULT_COLUMNS = int(os.getenv("TOUR_DEFAULT_COLUMNS", "8"))

# ======= Query defaults =======
DEFAULT_PIECE     = os.getenv("TOUR_DEFAULT_PIECE", "knight")
DEFAULT_ALGORITHM = os.getenv("TOUR_DEFAULT_ALGORITHM", "warnsdorf")

class CFG:
    SAFETY_CAP     = SAFETY_CAP
    SAFETY_CAP_MIN = SAFETY_CAP_MIN
    SAFETY_CAP_MAX = SAFETY_CAP_MAX

    RECURSION_HEADROOM = RECURSION_HEADROOM

    CACHE_SIZE = CACHE_SIZE

    BOARD_MIN_SIZE  = BOARD_MIN_SIZE
    BOARD_MAX_SIZE  = BOARD_MAX_SIZE
    DEFAULT_ROWS    = DEFAULT_ROWS
    DEFAULT_COLUMNS = DEFAULT_COLUMNS

    DEFAULT_PIECE     = DEFAULT_PIECE
    DEFAULT_ALGORITHM = DEFAULT_ALGORITHM

__all__ = ["CFG"]
