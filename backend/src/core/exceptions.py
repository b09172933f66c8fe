"""
Scheduling error taxonomy.

All of these are expected, user-facing outcomes. Services raise them and the
API layer maps them to HTTP responses; storage failures are not wrapped and
propagate unchanged.
"""

from typing import List, Optional, Sequence


class SchedulingError(Exception):
    """Base class for user-facing scheduling errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class FormatError(SchedulingError):
    """Malformed time or date input (client input problem)."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class ValidationError(SchedulingError):
    """Structurally invalid availability or block definition."""


class NotFoundError(SchedulingError):
    """A partner, appointment or availability record does not exist."""


class SchedulingConflict(SchedulingError):
    """
    A proposed appointment cannot be committed.

    Carries every conflict found so the caller can render a specific
    "time unavailable" message, plus optional alternative start times.
    """

    def __init__(
        self,
        conflicts: Sequence[str],
        suggested_times: Optional[List[str]] = None,
    ):
        self.conflicts = list(conflicts)
        self.suggested_times = suggested_times
        super().__init__(f"Conflito de horário: {'; '.join(self.conflicts)}")


class InvalidTransitionError(Exception):
    """Raised when a booking proposal is moved out of a terminal state."""
