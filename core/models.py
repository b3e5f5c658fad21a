import re

from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models

# =============================================================================
# === BASE MANAGERS & UTILITIES ==============================================
# =============================================================================

NON_DIGITS = re.compile(r"\D")


def digits_only(value) -> str:
    return NON_DIGITS.sub("", str(value or ""))


class ReservationQuerySet(models.QuerySet):
    def active(self):
        """Reservations still expected in the dining room."""
        return self.exclude(status__in=[Reservation.Status.FINISHED, Reservation.Status.CANCELLED])

    def for_date(self, day):
        return self.active().filter(reservation_date=day).order_by("reservation_time", "reservation_id")

    def search_mobile(self, fragment):
        """Match on digits only, so '(555) 123' finds '555-1234'."""
        digits = digits_only(fragment)
        if not digits:
            return self.none()
        return self.filter(mobile_digits__contains=digits).order_by(
            "reservation_date", "reservation_time", "reservation_id"
        )


class TableQuerySet(models.QuerySet):
    def free(self):
        return self.filter(reservation__isnull=True)

    def occupied(self):
        return self.filter(reservation__isnull=False)


# =============================================================================
# === RESERVATIONS ============================================================
# =============================================================================

class Reservation(models.Model):
    class Status(models.TextChoices):
        BOOKED = "booked", "Booked"
        SEATED = "seated", "Seated"
        FINISHED = "finished", "Finished"
        CANCELLED = "cancelled", "Cancelled"

    reservation_id = models.BigAutoField(primary_key=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    mobile_number = models.CharField(max_length=30)
    mobile_digits = models.CharField(max_length=30, editable=False, db_index=True, default="")
    people = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    reservation_date = models.DateField(db_index=True)
    reservation_time = models.TimeField()
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.BOOKED, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ReservationQuerySet.as_manager()

    class Meta:
        ordering = ["reservation_date", "reservation_time"]

    def __str__(self):
        return f"{self.last_name}, {self.first_name} x{self.people} ({self.reservation_date} {self.reservation_time})"

    def save(self, *args, **kwargs):
        self.mobile_digits = digits_only(self.mobile_number)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "mobile_number" in update_fields:
            kwargs["update_fields"] = set(update_fields) | {"mobile_digits"}
        super().save(*args, **kwargs)

    @property
    def is_terminal(self) -> bool:
        return self.status in (self.Status.FINISHED, self.Status.CANCELLED)


# =============================================================================
# === TABLES ==================================================================
# =============================================================================

class Table(models.Model):
    table_id = models.BigAutoField(primary_key=True)
    table_name = models.CharField(max_length=50, validators=[MinLengthValidator(2)])
    capacity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    # Weak reference: the table does not own the reservation it currently holds.
    reservation = models.OneToOneField(
        Reservation,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="table",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TableQuerySet.as_manager()

    class Meta:
        ordering = ["table_name"]

    def __str__(self):
        return f"{self.table_name} (seats {self.capacity})"

    @property
    def is_occupied(self) -> bool:
        return self.reservation_id is not None
