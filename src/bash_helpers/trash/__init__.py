"""Move files to the system trash."""

from bash_helpers.trash.exceptions import MoveError
from bash_helpers.trash.mover import TrashMover, TrashResult, TrashSummary, find_by_extension

__all__ = [
    "MoveError",
    "TrashMover",
    "TrashResult",
    "TrashSummary",
    "find_by_extension",
]
