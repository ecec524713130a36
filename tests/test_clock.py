"""Tests for the clock math layer."""

from datetime import datetime, timedelta

import pytest
import tzlocal

from geochron.clock import ClockTimeEngine, PytzTimezoneDatabase, hand_angles
from geochron.errors import InvalidTimezone
from geochron.i18n import LocaleFormatter
from tests.conftest import utc


class TestReadings:
    def test_utc_reading_matches_instant(self, engine):
        instant = utc(2024, 3, 5, 14, 7, 9, 250_000)
        reading = engine.compute_reading(instant, "UTC", clock_id=3)
        assert reading.clock_id == 3
        assert reading.timezone == "UTC"
        assert (reading.hour, reading.minute, reading.second) == (14, 7, 9)
        assert reading.millisecond == 250
        assert reading.formatted_time == "14:07:09"

    def test_tokyo_new_year(self, engine):
        reading = engine.compute_reading(utc(2024, 1, 1, 0, 0), "Asia/Tokyo")
        assert reading.hour == 9
        assert (reading.local.year, reading.local.month, reading.local.day) == (2024, 1, 1)
        assert reading.local.weekday == 0
        assert reading.formatted_date == "1 January 2024"
        assert reading.formatted_weekday == "Monday"

    def test_date_line_crossing(self, engine):
        # Still New Year's Eve in Los Angeles
        reading = engine.compute_reading(utc(2024, 1, 1, 0, 0), "America/Los_Angeles")
        assert (reading.local.month, reading.local.day, reading.hour) == (12, 31, 16)
        assert reading.formatted_weekday == "Sunday"

    def test_half_hour_offset(self, engine):
        reading = engine.compute_reading(utc(2024, 1, 1, 0, 0), "Asia/Kolkata")
        assert (reading.hour, reading.minute) == (5, 30)

    @pytest.mark.parametrize(
        "instant, hour",
        [(utc(2024, 1, 15, 12), 7), (utc(2024, 7, 1, 12), 8)],
    )
    def test_daylight_saving(self, engine, instant, hour):
        assert engine.compute_reading(instant, "America/New_York").hour == hour

    def test_naive_instant_is_utc(self, engine):
        naive = engine.compute_reading(datetime(2024, 1, 1, 0, 0), "Asia/Tokyo")
        aware = engine.compute_reading(utc(2024, 1, 1, 0, 0), "Asia/Tokyo")
        assert naive == aware

    def test_unknown_timezone(self, engine):
        with pytest.raises(InvalidTimezone) as exc_info:
            engine.compute_reading(utc(2024, 1, 1), "Mars/Olympus_Mons")
        assert exc_info.value.timezone == "Mars/Olympus_Mons"
        assert isinstance(exc_info.value, ValueError)

    def test_korean_formatter(self, tzdb):
        engine = ClockTimeEngine(tzdb, LocaleFormatter("ko"))
        reading = engine.compute_reading(utc(2024, 1, 1, 0, 0), "Asia/Seoul")
        assert reading.formatted_date == "2024년 1월 1일"
        assert reading.formatted_weekday == "월요일"
        assert reading.formatted_time == "09:00:00"


class TestHandAngles:
    @pytest.mark.parametrize(
        "fields, expected",
        [
            ((0, 0, 0, 0), (0.0, 0.0, 0.0)),
            ((15, 30, 0, 0), (105.0, 180.0, 0.0)),
            ((12, 0, 30, 500), (0.0, 3.0, 183.0)),
            ((23, 59, 59, 999), (359.5, 359.9, 359.994)),
        ],
    )
    def test_angles(self, fields, expected):
        assert hand_angles(*fields) == pytest.approx(expected)

    def test_hour_hand_ignores_seconds(self):
        assert hand_angles(3, 10, 0, 0)[0] == hand_angles(3, 10, 59, 999)[0]

    def test_hands_advance_within_the_hour(self, engine):
        start = utc(2024, 6, 21, 10, 0, 0)
        previous = None
        for ms in range(0, 3_600_000, 7_919):
            reading = engine.compute_reading(start + timedelta(milliseconds=ms), "Europe/Paris")
            hands = (
                reading.hour_hand_degrees,
                reading.minute_hand_degrees,
                reading.second_hand_degrees + reading.minute * 360,
            )
            if previous is not None:
                assert all(now >= before for now, before in zip(hands, previous))
            previous = hands

    def test_second_hand_wraps_at_minute(self, engine):
        before = engine.compute_reading(utc(2024, 6, 21, 10, 0, 59, 900_000), "UTC")
        after = engine.compute_reading(utc(2024, 6, 21, 10, 1, 0), "UTC")
        assert before.second_hand_degrees == pytest.approx(359.4)
        assert after.second_hand_degrees == 0.0


class TestTimezoneDatabase:
    def test_validity(self):
        tzdb = PytzTimezoneDatabase()
        assert tzdb.is_valid("Europe/Berlin")
        assert not tzdb.is_valid("Europe/Atlantis")
        assert not tzdb.is_valid("")

    def test_local_zone_from_host(self, monkeypatch):
        monkeypatch.setattr(tzlocal, "get_localzone_name", lambda: "Europe/Berlin")
        assert PytzTimezoneDatabase().local_zone_name() == "Europe/Berlin"

    def test_unknown_host_zone_falls_back_to_utc(self, monkeypatch, log_messages):
        monkeypatch.setattr(tzlocal, "get_localzone_name", lambda: "Local/Nowhere")
        assert PytzTimezoneDatabase().local_zone_name() == "UTC"
        assert any("Local/Nowhere" in m for m in log_messages)

    def test_host_lookup_failure_falls_back_to_utc(self, monkeypatch):
        def broken():
            raise LookupError("no zoneinfo")

        monkeypatch.setattr(tzlocal, "get_localzone_name", broken)
        assert PytzTimezoneDatabase().local_zone_name() == "UTC"
