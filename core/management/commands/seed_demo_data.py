from datetime import timedelta

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from core.models import Reservation, Table
from core.policy import ServicePolicy

TABLES = [
    ("Bar #1", 1),
    ("Bar #2", 1),
    ("#1", 6),
    ("#2", 6),
]

GUESTS = [
    ("Rick", "Sanchez", "202-555-0164", 6, "20:00"),
    ("Frank", "Palicky", "202-555-0153", 1, "20:00"),
    ("Bird", "Person", "808-555-0141", 1, "18:00"),
    ("Tiger", "Lion", "808-555-0140", 3, "19:00"),
    ("Anthony", "Charboneau", "620-646-8897", 2, "12:30"),
]


class Command(BaseCommand):
    help = 'Seed the database with demo tables and upcoming reservations'

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush", action="store_true",
            help="Delete existing reservations and tables first.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            Table.objects.all().delete()
            Reservation.objects.all().delete()

        for name, capacity in TABLES:
            table, created = Table.objects.get_or_create(table_name=name, defaults={"capacity": capacity})
            if created:
                self.stdout.write(f"Created table {table}")

        day = self._next_open_day(ServicePolicy.from_settings())
        for first_name, last_name, mobile_number, people, clock in GUESTS:
            Reservation.objects.create(
                first_name=first_name,
                last_name=last_name,
                mobile_number=mobile_number,
                people=people,
                reservation_date=day,
                reservation_time=clock,
            )
            self.stdout.write(f"Booked {last_name}, {first_name} x{people} on {day} at {clock}")

        self.stdout.write(self.style.SUCCESS('Successfully seeded the database with demo data'))

    def _next_open_day(self, policy):
        day = timezone.localdate() + timedelta(days=1)
        while policy.is_closed_on(day):
            day += timedelta(days=1)
        return day
