# core/serializers.py

from rest_framework import serializers
from .models import Reservation, Table


# ==============================================================================
# Reservation Serializer
# ==============================================================================

class ReservationSerializer(serializers.ModelSerializer):
    """Wire representation of a reservation: dates as YYYY-MM-DD, times as HH:MM."""

    reservation_date = serializers.DateField(format="%Y-%m-%d")
    reservation_time = serializers.TimeField(format="%H:%M")

    class Meta:
        model = Reservation
        fields = [
            'reservation_id',
            'first_name',
            'last_name',
            'mobile_number',
            'people',
            'reservation_date',
            'reservation_time',
            'status',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


# ==============================================================================
# Table Serializer
# ==============================================================================

class TableSerializer(serializers.ModelSerializer):
    """
    Tables expose the seated reservation's id only; occupancy changes go
    through the seat/finish endpoints.
    """

    reservation_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Table
        fields = [
            'table_id',
            'table_name',
            'capacity',
            'reservation_id',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
