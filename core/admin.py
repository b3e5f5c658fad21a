# core/admin.py

from django.contrib import admin

from .models import Reservation, Table


# =============================================================================
# === RESERVATION ADMIN =======================================================
# =============================================================================

@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "reservation_id", "last_name", "first_name", "mobile_number",
        "people", "reservation_date", "reservation_time", "status",
    )
    list_filter = ("status", "reservation_date")
    search_fields = ("last_name", "first_name", "mobile_number", "mobile_digits")
    readonly_fields = ("mobile_digits", "created_at", "updated_at")
    date_hierarchy = "reservation_date"
    ordering = ("-reservation_date", "reservation_time")

    @admin.action(description="Cancel selected booked reservations")
    def cancel_booked(self, request, queryset):
        updated = 0
        for reservation in queryset.filter(status=Reservation.Status.BOOKED):
            reservation.status = Reservation.Status.CANCELLED
            reservation.save(update_fields=["status", "updated_at"])
            updated += 1
        self.message_user(request, f"{updated} reservation(s) cancelled.")

    actions = ["cancel_booked"]


# =============================================================================
# === TABLE ADMIN =============================================================
# =============================================================================

@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ("table_name", "capacity", "reservation", "occupied")
    search_fields = ("table_name",)
    # Occupancy only changes through seat/finish.
    readonly_fields = ("reservation", "created_at", "updated_at")
    ordering = ("table_name",)

    @admin.display(boolean=True, description="Occupied")
    def occupied(self, obj):
        return obj.is_occupied
