"""ironpulse exceptions."""

from pathlib import Path


class IronPulseError(Exception):
    """Base exception for ironpulse errors."""
    pass


class OutOfRangeError(IronPulseError, IndexError):
    """Raised when a session mutation addresses a missing exercise or set."""

    def __init__(self, message: str, exercise_id: str, set_index: int | None = None):
        super().__init__(message)
        self.exercise_id = exercise_id
        self.set_index = set_index


class StoreError(IronPulseError):
    """Raised when the history or plan store cannot be read or written."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class EmptySessionError(IronPulseError):
    """Raised when finalizing a session with no completed sets was refused."""
    pass
