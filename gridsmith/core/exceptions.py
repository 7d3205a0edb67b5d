"""Custom exception hierarchy for grid reconstruction."""

from .constants import StopReason


class GridSolverError(Exception):
    """Base exception for reconstruction failures."""


class InputError(GridSolverError):
    """Raised when the answer key cannot be turned into solver specs."""


class SearchExhausted(GridSolverError):
    """Raised when backtracking proved that no valid grid exists."""

    reason = StopReason.EXHAUSTED


class BudgetExceeded(GridSolverError):
    """Raised when the search hits its state or time budget."""

    def __init__(self, reason: StopReason) -> None:
        super().__init__(f"Search stopped: {reason.value}")
        self.reason = reason


class TemplateGridError(GridSolverError):
    """Raised when a template grid is malformed."""


class PlacementError(GridSolverError):
    """Raised when a board cell is forced into a conflicting state."""


class ValidationError(GridSolverError):
    """Raised when a built grid does not reproduce the expected clue numbering."""
