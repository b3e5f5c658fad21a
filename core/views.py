import logging

from django.utils import timezone

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .errors import ErrorCode, Failure
from .exceptions import ServiceError
from .persistence import ReservationStore, TableStore
from .policy import ServicePolicy
from .serializers import ReservationSerializer, TableSerializer
from .transitions import TransitionManager
from .validation import ValidationPipelines, parse_reservation_date

logger = logging.getLogger(__name__)


# ==============================================================================
# REQUEST HELPERS
# ==============================================================================

def request_data(request):
    """Return the ``data`` object of a ``{"data": {...}}`` request body."""
    body = request.data
    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, dict):
        raise ServiceError(Failure(ErrorCode.MISSING_FIELD, "Request body must have a 'data' object.", "data"))
    return data


def validated(pipeline, payload):
    result = pipeline.run(payload)
    if not result.ok:
        raise ServiceError(result.failure)
    return result.payload


class ServiceViewSet(viewsets.ViewSet):
    """Shared wiring: stores, the transition manager and policy-bound pipelines."""

    reservations = ReservationStore()
    tables = TableStore()

    def get_policy(self):
        return ServicePolicy.from_settings()

    def get_pipelines(self):
        return ValidationPipelines(self.get_policy())

    def get_transitions(self):
        return TransitionManager(self.reservations, self.tables)


# ==============================================================================
# RESERVATIONS
# ==============================================================================

class ReservationViewSet(ServiceViewSet):
    """
    /reservations                 GET (by ?date= or ?mobile_number=), POST
    /reservations/<id>            GET, PUT
    /reservations/<id>/status     PUT
    """

    def list(self, request):
        mobile_number = request.query_params.get("mobile_number")
        if mobile_number is not None:
            queryset = self.reservations.search(mobile_number)
        else:
            raw_date = request.query_params.get("date")
            if raw_date is None:
                day = timezone.localdate()
            else:
                day = parse_reservation_date(raw_date)
                if day is None:
                    raise ServiceError(Failure(
                        ErrorCode.INVALID_FORMAT,
                        f"The 'date' query parameter must be a valid date: '{raw_date}'",
                        "date",
                    ))
            queryset = self.reservations.list(day)
        return Response({"data": ReservationSerializer(queryset, many=True).data})

    def create(self, request):
        payload = validated(self.get_pipelines().reservation_create, request_data(request))
        reservation = self.reservations.create(payload)
        logger.info(f"Reservation {reservation.pk} created for {reservation.reservation_date} {reservation.reservation_time}")
        return Response({"data": ReservationSerializer(reservation).data}, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        reservation = self.reservations.read(pk)
        return Response({"data": ReservationSerializer(reservation).data})

    def update(self, request, pk=None):
        self.reservations.read(pk)
        payload = validated(self.get_pipelines().reservation_update, request_data(request))
        reservation = self.get_transitions().update_reservation(pk, payload)
        return Response({"data": ReservationSerializer(reservation).data})

    @action(detail=True, methods=["put"], url_path="status", url_name="status")
    def update_status(self, request, pk=None):
        self.reservations.read(pk)
        payload = validated(self.get_pipelines().reservation_status, request_data(request))
        reservation = self.get_transitions().change_status(pk, payload["status"])
        return Response({"data": ReservationSerializer(reservation).data})


# ==============================================================================
# TABLES
# ==============================================================================

class TableViewSet(ServiceViewSet):
    """
    /tables                 GET, POST
    /tables/<id>            GET, PUT
    /tables/<id>/seat       PUT (seat a reservation), DELETE (finish)
    """

    def list(self, request):
        return Response({"data": TableSerializer(self.tables.list(), many=True).data})

    def create(self, request):
        payload = validated(self.get_pipelines().table_create, request_data(request))
        table = self.tables.create(payload)
        return Response({"data": TableSerializer(table).data}, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        return Response({"data": TableSerializer(self.tables.read(pk)).data})

    def update(self, request, pk=None):
        table = self.tables.read(pk)
        payload = validated(self.get_pipelines().table_update, request_data(request))
        table = self.tables.update(table, payload)
        return Response({"data": TableSerializer(table).data})

    @action(detail=True, methods=["put"], url_path="seat")
    def seat(self, request, pk=None):
        data = request_data(request)
        table = self.get_transitions().seat(pk, data.get("reservation_id"))
        return Response({"data": TableSerializer(table).data})

    @seat.mapping.delete
    def finish(self, request, pk=None):
        table = self.get_transitions().finish(pk)
        return Response({"data": TableSerializer(table).data})
