from datetime import datetime, time
from unittest import mock

from django.test import SimpleTestCase
from django.utils import timezone

from core.errors import ErrorCode
from core.policy import ServicePolicy
from core.validation import (
    ValidationPipelines,
    parse_reservation_date,
    parse_reservation_time,
)

from .factories import MONDAY, TUESDAY, WEDNESDAY, reservation_payload, upcoming

# A fixed clock: noon on an open day.
TODAY = upcoming(WEDNESDAY)
NOW = timezone.make_aware(datetime.combine(TODAY, time(12, 0)))


def pinned_policy(**overrides):
    return ServicePolicy(now=lambda: NOW, **overrides)


class ParsingTests(SimpleTestCase):
    def test_parse_reservation_date(self):
        self.assertEqual(parse_reservation_date("2099-01-05").isoformat(), "2099-01-05")
        for value in ["2099-13-45", "2099-02-30", "2099-1-5", "01/05/2099", "", None, 20990105]:
            with self.subTest(value=value):
                self.assertIsNone(parse_reservation_date(value))

    def test_parse_reservation_time(self):
        self.assertEqual(parse_reservation_time("09:05"), time(9, 5))
        for value in ["9:05", "24:00", "12:60", "18:00:00", "6pm", None]:
            with self.subTest(value=value):
                self.assertIsNone(parse_reservation_time(value))


class ReservationCreatePipelineTests(SimpleTestCase):
    def setUp(self):
        self.pipeline = ValidationPipelines(pinned_policy()).reservation_create

    def run_with(self, **overrides):
        payload = reservation_payload(**{"reservation_date": TODAY.isoformat(), **overrides})
        return self.pipeline.run(payload)

    def assertFails(self, result, code, rule=None):
        self.assertFalse(result.ok, "expected the payload to be rejected")
        self.assertEqual(result.failure.code, code)
        if rule is not None:
            self.assertEqual(result.rule, rule)

    def test_valid_payload_passes_unchanged(self):
        payload = reservation_payload(reservation_date=TODAY.isoformat())
        result = self.pipeline.run(payload)
        self.assertTrue(result.ok)
        self.assertIsNone(result.failure)
        self.assertIs(result.payload, payload)

    def test_rule_order(self):
        self.assertEqual(self.pipeline.names, [
            "first_name",
            "last_name",
            "mobile_number",
            "people",
            "reservation_date",
            "reservation_time",
            "future",
            "working_day",
            "service_window",
            "initial_status",
        ])

    def test_missing_or_blank_names_and_mobile(self):
        for field in ["first_name", "last_name", "mobile_number"]:
            for value in [None, "", "   "]:
                with self.subTest(field=field, value=value):
                    self.assertFails(self.run_with(**{field: value}), ErrorCode.MISSING_FIELD, field)

    def test_absent_field_is_missing(self):
        payload = reservation_payload(reservation_date=TODAY.isoformat())
        del payload["last_name"]
        result = self.pipeline.run(payload)
        self.assertFails(result, ErrorCode.MISSING_FIELD, "last_name")
        self.assertIn("last_name", result.failure.message)

    def test_first_failure_wins(self):
        result = self.run_with(first_name="", people=0, reservation_date="nope")
        self.assertFails(result, ErrorCode.MISSING_FIELD, "first_name")

    def test_people_must_be_a_positive_integer(self):
        for value in [0, -1, 2.5, "3", True, None]:
            with self.subTest(value=value):
                self.assertFails(self.run_with(people=value), ErrorCode.NOT_POSITIVE_INTEGER, "people")

    def test_people_accepts_positive_integers(self):
        for value in [1, 50]:
            with self.subTest(value=value):
                self.assertTrue(self.run_with(people=value).ok)

    def test_invalid_date_stops_before_temporal_rules(self):
        policy = ServicePolicy(now=mock.Mock(side_effect=AssertionError("clock must not be read")))
        pipeline = ValidationPipelines(policy).reservation_create
        result = pipeline.run(reservation_payload(reservation_date="2099-13-45"))
        self.assertFails(result, ErrorCode.INVALID_FORMAT, "reservation_date")
        policy.now.assert_not_called()

    def test_invalid_time_format(self):
        for value in ["6:00", "18:00:00", "six", None]:
            with self.subTest(value=value):
                self.assertFails(self.run_with(reservation_time=value), ErrorCode.INVALID_FORMAT, "reservation_time")

    def test_past_and_present_are_not_in_future(self):
        self.assertFails(self.run_with(reservation_time="11:59"), ErrorCode.NOT_IN_FUTURE, "future")
        self.assertFails(self.run_with(reservation_time="12:00"), ErrorCode.NOT_IN_FUTURE, "future")
        self.assertTrue(self.run_with(reservation_time="12:01").ok)

    def test_closed_day(self):
        tuesday = upcoming(TUESDAY, after=TODAY).isoformat()
        for clock in ["18:00", "10:00"]:
            with self.subTest(clock=clock):
                result = self.run_with(reservation_date=tuesday, reservation_time=clock)
                self.assertFails(result, ErrorCode.CLOSED_DAY, "working_day")
                self.assertIn("Tuesday", result.failure.message)

    def test_service_window_bounds(self):
        day = upcoming(MONDAY, after=TODAY).isoformat()
        cases = {
            "10:00": False,
            "10:29": False,
            "10:30": True,
            "21:30": True,
            "21:31": False,
            "22:45": False,
        }
        for clock, accepted in cases.items():
            with self.subTest(clock=clock):
                result = self.run_with(reservation_date=day, reservation_time=clock)
                if accepted:
                    self.assertTrue(result.ok)
                else:
                    self.assertFails(result, ErrorCode.OUTSIDE_SERVICE_WINDOW, "service_window")

    def test_initial_status(self):
        self.assertTrue(self.run_with(status="booked").ok)
        self.assertTrue(self.run_with(status=None).ok)
        for value in ["seated", "finished", "cancelled", "bogus"]:
            with self.subTest(value=value):
                self.assertFails(self.run_with(status=value), ErrorCode.INVALID_INITIAL_STATUS, "initial_status")

    def test_custom_policy(self):
        policy = pinned_policy(
            closed_weekdays=frozenset({0}),
            open_time=time(17, 0),
            close_time=time(23, 0),
            last_seating_buffer=ServicePolicy().last_seating_buffer,
        )
        pipeline = ValidationPipelines(policy).reservation_create
        monday = upcoming(MONDAY, after=TODAY).isoformat()
        tuesday = upcoming(TUESDAY, after=TODAY).isoformat()

        result = pipeline.run(reservation_payload(reservation_date=monday))
        self.assertEqual(result.failure.code, ErrorCode.CLOSED_DAY)
        self.assertTrue(pipeline.run(reservation_payload(reservation_date=tuesday, reservation_time="22:00")).ok)
        result = pipeline.run(reservation_payload(reservation_date=tuesday, reservation_time="12:00"))
        self.assertEqual(result.failure.code, ErrorCode.OUTSIDE_SERVICE_WINDOW)
        self.assertIn("17:00 and 22:00", result.failure.message)


class ReservationUpdateAndStatusPipelineTests(SimpleTestCase):
    def setUp(self):
        self.pipelines = ValidationPipelines(pinned_policy())

    def test_update_accepts_any_known_status_or_none(self):
        for value in [None, "booked", "seated", "finished", "cancelled"]:
            with self.subTest(value=value):
                payload = reservation_payload(reservation_date=TODAY.isoformat(), status=value)
                self.assertTrue(self.pipelines.reservation_update.run(payload).ok)

    def test_update_rejects_unknown_status(self):
        payload = reservation_payload(reservation_date=TODAY.isoformat(), status="bogus")
        result = self.pipelines.reservation_update.run(payload)
        self.assertEqual(result.failure.code, ErrorCode.INVALID_STATUS)

    def test_update_runs_field_rules(self):
        payload = reservation_payload(reservation_date=TODAY.isoformat(), people=0)
        result = self.pipelines.reservation_update.run(payload)
        self.assertEqual(result.failure.code, ErrorCode.NOT_POSITIVE_INTEGER)

    def test_status_pipeline(self):
        for value in ["booked", "seated", "finished", "cancelled"]:
            with self.subTest(value=value):
                self.assertTrue(self.pipelines.reservation_status.run({"status": value}).ok)
        for value in ["unknown", "", None, "BOOKED"]:
            with self.subTest(value=value):
                result = self.pipelines.reservation_status.run({"status": value})
                self.assertEqual(result.failure.code, ErrorCode.INVALID_STATUS)


class TablePipelineTests(SimpleTestCase):
    def setUp(self):
        self.pipeline = ValidationPipelines(pinned_policy()).table_create

    def test_valid_table(self):
        self.assertTrue(self.pipeline.run({"table_name": "#1", "capacity": 6}).ok)

    def test_table_name(self):
        self.assertEqual(self.pipeline.run({"capacity": 6}).failure.code, ErrorCode.MISSING_FIELD)
        result = self.pipeline.run({"table_name": "A", "capacity": 6})
        self.assertEqual(result.failure.code, ErrorCode.TOO_SHORT)
        self.assertEqual(result.rule, "table_name_length")

    def test_capacity(self):
        for value in [0, -2, "4", 1.5, None, False]:
            with self.subTest(value=value):
                result = self.pipeline.run({"table_name": "Bar #1", "capacity": value})
                self.assertEqual(result.failure.code, ErrorCode.NOT_POSITIVE_INTEGER)
