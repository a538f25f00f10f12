"""Error taxonomy for offline batch reconciliation.

Only ``BatchShapeError`` rejects a whole call. Everything else is absorbed into
the per-record results of a ``BatchResult``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class SyncError(Exception):
    """Base class for reconciliation errors."""


class BatchShapeError(SyncError):
    """Raised when a batch is malformed or violates its cardinality invariants."""

    def __init__(self, message: str, *, problems: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.problems: tuple[str, ...] = tuple(problems)

    def __str__(self) -> str:
        if not self.problems:
            return super().__str__()
        return f"{super().__str__()}: {'; '.join(self.problems)}"


class ResolutionError(SyncError):
    """Raised when a referenced local id has no entry in the id mapping."""


class PersistenceError(SyncError):
    """Raised when the store rejects a write."""


class ConstraintViolationError(PersistenceError):
    """Raised when a write violates a store constraint (unique, check, foreign key)."""


class NotFoundError(SyncError):
    """Raised when a required canonical record does not exist."""
