"""
core/validation.py

Request payload validation for reservations and tables.

Every check is a pure function ``check(payload) -> Failure | None`` wrapped in
a named ``Rule``. A ``Pipeline`` evaluates its rules in order and stops at the
first failure, so later rules may rely on what earlier rules established (the
temporal rules only ever see well-formed date and time strings).
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Callable, Mapping, Optional, Sequence

from .errors import ErrorCode, Failure
from .models import Reservation
from .policy import ServicePolicy

Payload = Mapping[str, Any]
Check = Callable[[Payload], Optional[Failure]]

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")

STATUS_VALUES = tuple(Reservation.Status.values)


# ==============================================================================
# Results
# ==============================================================================

@dataclass(frozen=True)
class Rule:
    name: str
    check: Check


@dataclass(frozen=True)
class ValidationResult:
    payload: Payload
    failure: Optional[Failure] = None
    rule: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class Pipeline:
    """An explicit, ordered list of rules with a short-circuiting runner."""

    def __init__(self, rules: Sequence[Rule]):
        self.rules = tuple(rules)

    def __iter__(self):
        return iter(self.rules)

    @property
    def names(self):
        return [rule.name for rule in self.rules]

    def run(self, payload: Payload) -> ValidationResult:
        for rule in self.rules:
            failure = rule.check(payload)
            if failure is not None:
                return ValidationResult(payload=payload, failure=failure, rule=rule.name)
        return ValidationResult(payload=payload)


# ==============================================================================
# Parsing helpers
# ==============================================================================

def parse_reservation_date(value) -> Optional[date]:
    """Return the date for a strict ``YYYY-MM-DD`` string, else None."""
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_reservation_time(value) -> Optional[time]:
    """Return the time for a strict ``HH:MM`` string, else None."""
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        return None
    try:
        return datetime.strptime(value, "%H:%M").time()
    except ValueError:
        return None


def is_positive_integer(value) -> bool:
    # bool is a subclass of int; JSON true must not pass as 1.
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


# ==============================================================================
# Check factories
# ==============================================================================

def has_property(field: str) -> Check:
    def check(payload):
        value = payload.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            return Failure(ErrorCode.MISSING_FIELD, f"A '{field}' property is required.", field)
        return None
    return check


def has_min_length(field: str, length: int) -> Check:
    def check(payload):
        value = payload.get(field)
        if not isinstance(value, str) or len(value) < length:
            return Failure(
                ErrorCode.TOO_SHORT,
                f"The '{field}' property must be at least {length} characters long: '{value}'",
                field,
            )
        return None
    return check


def is_greater_than_zero(field: str) -> Check:
    def check(payload):
        value = payload.get(field)
        if not is_positive_integer(value):
            return Failure(
                ErrorCode.NOT_POSITIVE_INTEGER,
                f"The '{field}' property must be a number greater than zero: {value}",
                field,
            )
        return None
    return check


def has_reservation_date(payload):
    value = payload.get("reservation_date")
    if parse_reservation_date(value) is None:
        return Failure(
            ErrorCode.INVALID_FORMAT,
            f"The 'reservation_date' property must be a valid date: '{value}'",
            "reservation_date",
        )
    return None


def has_reservation_time(payload):
    value = payload.get("reservation_time")
    if parse_reservation_time(value) is None:
        return Failure(
            ErrorCode.INVALID_FORMAT,
            f"The 'reservation_time' property must be a valid time: '{value}'",
            "reservation_time",
        )
    return None


def is_future_date(policy: ServicePolicy) -> Check:
    def check(payload):
        day = parse_reservation_date(payload["reservation_date"])
        clock = parse_reservation_time(payload["reservation_time"])
        if not policy.is_future(datetime.combine(day, clock)):
            return Failure(
                ErrorCode.NOT_IN_FUTURE,
                "Reservation date/time must occur in the future: "
                f"{payload['reservation_date']} {payload['reservation_time']}",
                "reservation_date",
            )
        return None
    return check


def is_working_day(policy: ServicePolicy) -> Check:
    def check(payload):
        day = parse_reservation_date(payload["reservation_date"])
        if policy.is_closed_on(day):
            return Failure(
                ErrorCode.CLOSED_DAY,
                f"The restaurant is closed on {day:%A}s.",
                "reservation_date",
            )
        return None
    return check


def is_within_eligible_timeframe(policy: ServicePolicy) -> Check:
    def check(payload):
        clock = parse_reservation_time(payload["reservation_time"])
        if not policy.accepts_time(clock):
            last = policy.last_seating_minutes
            return Failure(
                ErrorCode.OUTSIDE_SERVICE_WINDOW,
                f"Please select a time between {policy.open_time:%H:%M} "
                f"and {last // 60:02d}:{last % 60:02d}.",
                "reservation_time",
            )
        return None
    return check


def has_optional_booked_status(payload):
    status = payload.get("status")
    if status is not None and status != Reservation.Status.BOOKED:
        return Failure(
            ErrorCode.INVALID_INITIAL_STATUS,
            f"Invalid status: '{status}'. A new reservation must have no status or a status of 'booked'.",
            "status",
        )
    return None


def has_valid_status(payload):
    status = payload.get("status")
    if status not in STATUS_VALUES:
        return Failure(
            ErrorCode.INVALID_STATUS,
            f"Invalid status: '{status}'. Status must be one of: {', '.join(STATUS_VALUES)}",
            "status",
        )
    return None


def has_optional_valid_status(payload):
    if payload.get("status") is None:
        return None
    return has_valid_status(payload)


# ==============================================================================
# Pipelines
# ==============================================================================

def reservation_field_rules(policy: ServicePolicy):
    return [
        Rule("first_name", has_property("first_name")),
        Rule("last_name", has_property("last_name")),
        Rule("mobile_number", has_property("mobile_number")),
        Rule("people", is_greater_than_zero("people")),
        Rule("reservation_date", has_reservation_date),
        Rule("reservation_time", has_reservation_time),
        Rule("future", is_future_date(policy)),
        Rule("working_day", is_working_day(policy)),
        Rule("service_window", is_within_eligible_timeframe(policy)),
    ]


def table_rules():
    return [
        Rule("table_name", has_property("table_name")),
        Rule("table_name_length", has_min_length("table_name", 2)),
        Rule("capacity", is_greater_than_zero("capacity")),
    ]


class ValidationPipelines:
    """The pipelines for each entity and operation, bound to one policy."""

    def __init__(self, policy: Optional[ServicePolicy] = None):
        self.policy = policy or ServicePolicy.from_settings()
        self.reservation_create = Pipeline(
            reservation_field_rules(self.policy) + [Rule("initial_status", has_optional_booked_status)]
        )
        self.reservation_update = Pipeline(
            reservation_field_rules(self.policy) + [Rule("status", has_optional_valid_status)]
        )
        self.reservation_status = Pipeline([Rule("status", has_valid_status)])
        self.table_create = Pipeline(table_rules())
        self.table_update = Pipeline(table_rules())
