"""
core/persistence.py

Thin query wrappers around the ORM plus the unit-of-work primitive used for
multi-row writes.
"""

import logging

from django.db import transaction

from .exceptions import ServiceError
from .models import Reservation, Table

logger = logging.getLogger(__name__)


def run_atomically(unit_of_work, using=None):
    """
    Run ``unit_of_work()`` so that all of its writes commit together or not
    at all. Any exception raised inside rolls the whole unit back and is
    re-raised to the caller.
    """
    with transaction.atomic(using=using):
        return unit_of_work()


def after_commit(callback, using=None):
    """Schedule ``callback`` for after the surrounding transaction commits."""
    transaction.on_commit(callback, using=using)


# ==============================================================================
# Reservations
# ==============================================================================

class ReservationStore:
    model = Reservation
    writable_fields = (
        "first_name",
        "last_name",
        "mobile_number",
        "people",
        "reservation_date",
        "reservation_time",
        "status",
    )

    def _values(self, data):
        return {key: data[key] for key in self.writable_fields if key in data and data[key] is not None}

    def create(self, data) -> Reservation:
        reservation = self.model(**self._values(data))
        reservation.save()
        reservation.refresh_from_db()
        return reservation

    def list(self, date):
        return self.model.objects.for_date(date)

    def search(self, mobile_number):
        return self.model.objects.search_mobile(mobile_number)

    def read(self, reservation_id, for_update=False) -> Reservation:
        queryset = self.model.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(pk=reservation_id)
        except (self.model.DoesNotExist, ValueError, TypeError):
            raise ServiceError.not_found("Reservation", reservation_id)

    def update(self, reservation: Reservation, data=None) -> Reservation:
        values = self._values(data or {})
        for key, value in values.items():
            setattr(reservation, key, value)
        reservation.save()
        reservation.refresh_from_db()
        return reservation


# ==============================================================================
# Tables
# ==============================================================================

class TableStore:
    model = Table
    writable_fields = ("table_name", "capacity")

    def _values(self, data):
        return {key: data[key] for key in self.writable_fields if key in data}

    def create(self, data) -> Table:
        table = self.model.objects.create(**self._values(data))
        logger.info(f"Table '{table.table_name}' created (seats {table.capacity}).")
        return table

    def list(self):
        return self.model.objects.select_related("reservation").order_by("table_name", "table_id")

    def read(self, table_id, for_update=False) -> Table:
        queryset = self.model.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(pk=table_id)
        except (self.model.DoesNotExist, ValueError, TypeError):
            raise ServiceError.not_found("Table", table_id)

    def update(self, table: Table, data=None) -> Table:
        for key, value in self._values(data or {}).items():
            setattr(table, key, value)
        table.save()
        return table

    def assign(self, table: Table, reservation) -> Table:
        """Point the table at ``reservation`` (None frees it)."""
        table.reservation = reservation
        table.save(update_fields=["reservation", "updated_at"])
        return table
