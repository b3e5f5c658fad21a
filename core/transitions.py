"""
core/transitions.py

Reservation status changes and the two operations that move a reservation and
a table together: seating a party and finishing a table.

Seat and Finish run as one unit of work. Preconditions are checked on rows
locked inside that unit, and any failure raises ``ServiceError`` so neither
write is kept.
"""

import logging

from .errors import ErrorCode, Failure
from .exceptions import ServiceError
from .models import Reservation
from .persistence import ReservationStore, TableStore, after_commit, run_atomically
from .utils import broadcast_table_update

logger = logging.getLogger(__name__)

Status = Reservation.Status

RESERVATION_TRANSITIONS = {
    Status.BOOKED.value: {Status.SEATED.value, Status.CANCELLED.value},
    Status.SEATED.value: {Status.FINISHED.value},
    Status.FINISHED.value: set(),
    Status.CANCELLED.value: set(),
}


# Table occupancy follows these statuses, so only Seat and Finish may set them.
TABLE_DRIVEN_STATUSES = frozenset({Status.SEATED.value, Status.FINISHED.value})


def check_transition(current: str, target: str, via_table: bool = False):
    """
    Return the Failure that forbids ``current -> target``, or None.

    ``via_table`` is set by Seat and Finish, the only callers allowed to move
    a reservation into ``seated`` or ``finished``.
    """
    current, target = str(current), str(target)
    if current == target:
        return None
    if current == Status.FINISHED:
        return Failure(
            ErrorCode.FINISHED_STATUS_IMMUTABLE,
            "A finished reservation cannot be updated.",
            "status",
        )
    if target not in RESERVATION_TRANSITIONS.get(current, set()):
        return Failure(
            ErrorCode.INVALID_TRANSITION,
            f"Invalid reservation transition: {current} -> {target}",
            "status",
        )
    if target in TABLE_DRIVEN_STATUSES and not via_table:
        return Failure(
            ErrorCode.INVALID_TRANSITION,
            f"Reservations are {target} through a table: "
            "use PUT or DELETE /tables/<table_id>/seat.",
            "status",
        )
    return None


def assert_transition(current: str, target: str, via_table: bool = False) -> None:
    failure = check_transition(current, target, via_table=via_table)
    if failure is not None:
        raise ServiceError(failure)


class TransitionManager:
    def __init__(self, reservations=None, tables=None):
        self.reservations = reservations or ReservationStore()
        self.tables = tables or TableStore()

    # --------------------------------------------------------------------------
    # Single-row status change
    # --------------------------------------------------------------------------
    def change_status(self, reservation_id, new_status) -> Reservation:
        def work():
            reservation = self.reservations.read(reservation_id, for_update=True)
            assert_transition(reservation.status, new_status)
            previous = reservation.status
            reservation = self.reservations.update(reservation, {"status": new_status})
            logger.info(f"Reservation {reservation.pk} status {previous} -> {reservation.status}")
            return reservation

        return run_atomically(work)

    def update_reservation(self, reservation_id, data) -> Reservation:
        """Full-field update; a status included in ``data`` obeys the state machine."""
        def work():
            reservation = self.reservations.read(reservation_id, for_update=True)
            new_status = data.get("status")
            if new_status is not None:
                assert_transition(reservation.status, new_status)
            return self.reservations.update(reservation, data)

        return run_atomically(work)

    # --------------------------------------------------------------------------
    # Seat / Finish
    # --------------------------------------------------------------------------
    def seat(self, table_id, reservation_id):
        def work():
            table = self.tables.read(table_id, for_update=True)
            if reservation_id is None or reservation_id == "":
                raise ServiceError(Failure(
                    ErrorCode.MISSING_FIELD,
                    "A 'reservation_id' property is required.",
                    "reservation_id",
                ))
            reservation = self.reservations.read(reservation_id, for_update=True)

            if table.is_occupied:
                raise ServiceError(Failure(
                    ErrorCode.CONFLICT_ALREADY_OCCUPIED,
                    f"Table '{table.table_name}' is occupied.",
                    "table_id",
                ))
            if reservation.status != Status.BOOKED:
                raise ServiceError(Failure(
                    ErrorCode.CONFLICT_NOT_BOOKED,
                    f"Reservation {reservation.pk} is {reservation.status}; only booked reservations can be seated.",
                    "reservation_id",
                ))
            if reservation.people > table.capacity:
                raise ServiceError(Failure(
                    ErrorCode.INSUFFICIENT_CAPACITY,
                    f"Table '{table.table_name}' does not have sufficient capacity "
                    f"for {reservation.people} people (seats {table.capacity}).",
                    "reservation_id",
                ))

            assert_transition(reservation.status, Status.SEATED, via_table=True)
            self.reservations.update(reservation, {"status": Status.SEATED})
            table = self.tables.assign(table, reservation)
            after_commit(lambda: broadcast_table_update(table, action="seated"))
            logger.info(f"Seated reservation {reservation.pk} at table '{table.table_name}'")
            return table

        return run_atomically(work)

    def finish(self, table_id):
        def work():
            table = self.tables.read(table_id, for_update=True)
            if not table.is_occupied:
                raise ServiceError(Failure(
                    ErrorCode.CONFLICT_NOT_OCCUPIED,
                    f"Table '{table.table_name}' is not occupied.",
                    "table_id",
                ))

            reservation = self.reservations.read(table.reservation_id, for_update=True)
            assert_transition(reservation.status, Status.FINISHED, via_table=True)
            self.reservations.update(reservation, {"status": Status.FINISHED})
            table = self.tables.assign(table, None)
            after_commit(lambda: broadcast_table_update(table, action="finished"))
            logger.info(f"Finished reservation {reservation.pk}; table '{table.table_name}' is free")
            return table

        return run_atomically(work)
