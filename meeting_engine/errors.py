"""
Errors for the Meeting Slot Engine
Validation, lookup and data-access failures raised by the engine and its stores
"""

from typing import Optional


class SchedulingError(Exception):
    """Base class for every error raised by the engine"""


class NotFoundError(SchedulingError):
    """An event, user or organizer does not exist"""


class ValidationError(SchedulingError):
    """Input rejected before any store access"""


class DataAccessError(SchedulingError):
    """A store could not answer a query

    The phase names the step that failed, e.g. "fetch event".
    """

    def __init__(self, phase: str, cause: Optional[BaseException] = None):
        self.phase = phase
        self.cause = cause
        message = phase if cause is None else f"{phase}: {cause}"
        super().__init__(message)


class ResolutionCancelled(SchedulingError):
    """Resolution stopped because the caller cancelled it"""
