"""
core/errors.py

Error taxonomy shared by the validation pipeline and the transition manager.
A ``Failure`` is a plain value; it only becomes an exception at the HTTP
boundary or inside a unit of work that must roll back.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    MISSING_FIELD = "MissingField"
    TOO_SHORT = "TooShort"
    NOT_POSITIVE_INTEGER = "NotPositiveInteger"
    INVALID_FORMAT = "InvalidFormat"
    NOT_IN_FUTURE = "NotInFuture"
    CLOSED_DAY = "ClosedDay"
    OUTSIDE_SERVICE_WINDOW = "OutsideServiceWindow"
    INVALID_INITIAL_STATUS = "InvalidInitialStatus"
    INVALID_STATUS = "InvalidStatus"
    FINISHED_STATUS_IMMUTABLE = "FinishedStatusImmutable"
    INVALID_TRANSITION = "InvalidTransition"
    NOT_FOUND = "NotFound"
    CONFLICT_ALREADY_OCCUPIED = "ConflictAlreadyOccupied"
    CONFLICT_NOT_BOOKED = "ConflictNotBooked"
    CONFLICT_NOT_OCCUPIED = "ConflictNotOccupied"
    INSUFFICIENT_CAPACITY = "InsufficientCapacity"


@dataclass(frozen=True)
class Failure:
    """A classified, human-readable reason a request was rejected."""

    code: ErrorCode
    message: str
    field: Optional[str] = None

    def __str__(self):
        return self.message
