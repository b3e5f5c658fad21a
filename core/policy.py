"""
core/policy.py

Opening-hours policy used by the reservation validation pipeline.
"""

from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Callable, FrozenSet

from django.conf import settings
from django.utils import timezone


def _parse_clock(value) -> time:
    if isinstance(value, time):
        return value
    return datetime.strptime(value, "%H:%M").time()


def _minutes(value: time) -> int:
    return value.hour * 60 + value.minute


@dataclass(frozen=True)
class ServicePolicy:
    """
    Immutable description of when the restaurant accepts reservations.

    ``closed_weekdays`` uses ``date.weekday()`` numbering (Monday = 0).
    ``now`` returns an aware datetime; it is injectable so callers can pin the
    clock.
    """

    closed_weekdays: FrozenSet[int] = frozenset({1})
    open_time: time = time(10, 30)
    close_time: time = time(22, 30)
    last_seating_buffer: timedelta = timedelta(minutes=60)
    now: Callable[[], datetime] = field(default=timezone.now, compare=False)

    def __post_init__(self):
        if self.first_seating_minutes > self.last_seating_minutes:
            raise ValueError(
                f"Service window is empty: opens {self.open_time:%H:%M}, "
                f"last seating {self.last_seating_minutes // 60:02d}:{self.last_seating_minutes % 60:02d}"
            )

    @classmethod
    def from_settings(cls, **overrides) -> "ServicePolicy":
        conf = getattr(settings, "RESERVATION_POLICY", {})
        values = {
            "closed_weekdays": frozenset(conf.get("CLOSED_WEEKDAYS", [1])),
            "open_time": _parse_clock(conf.get("OPEN_TIME", "10:30")),
            "close_time": _parse_clock(conf.get("CLOSE_TIME", "22:30")),
            "last_seating_buffer": timedelta(minutes=conf.get("LAST_SEATING_BUFFER_MINUTES", 60)),
        }
        values.update(overrides)
        return cls(**values)

    @property
    def first_seating_minutes(self) -> int:
        return _minutes(self.open_time)

    @property
    def last_seating_minutes(self) -> int:
        return _minutes(self.close_time) - int(self.last_seating_buffer.total_seconds() // 60)

    def is_closed_on(self, day) -> bool:
        return day.weekday() in self.closed_weekdays

    def accepts_time(self, value: time) -> bool:
        return self.first_seating_minutes <= _minutes(value) <= self.last_seating_minutes

    def is_future(self, moment: datetime) -> bool:
        """Strictly after the current moment; naive values are read in the current time zone."""
        if timezone.is_naive(moment):
            moment = timezone.make_aware(moment)
        return moment > self.now()
