"""Tests for the German date parser."""

import logging
from datetime import date, datetime, timedelta, timezone

import pytest

from conftest import BERLIN
from src.modules.parser.dates import parse_german_date

REFERENCE = datetime(2025, 12, 9, 14, 30, 15, 250000, tzinfo=BERLIN)


class TestRelativeDates:
    @pytest.mark.parametrize(
        ("text", "delta"),
        [
            ("vor 2 Stunden", timedelta(hours=2)),
            ("vor 1 Stunde", timedelta(hours=1)),
            ("VOR 12 STUNDEN", timedelta(hours=12)),
            ("vor 30 Minuten", timedelta(minutes=30)),
            ("vor 1 Minute", timedelta(minutes=1)),
            ("vor 3 Tagen", timedelta(days=3)),
            ("vor 1 Tag", timedelta(days=1)),
        ],
    )
    def test_subtracts_exact_duration(self, text: str, delta: timedelta) -> None:
        assert parse_german_date(text, REFERENCE) == REFERENCE - delta

    def test_yesterday(self) -> None:
        assert parse_german_date("Gestern", REFERENCE) == REFERENCE - timedelta(days=1)

    def test_today_returns_reference(self) -> None:
        assert parse_german_date("heute, 10:15 Uhr", REFERENCE) == REFERENCE

    def test_relative_wins_over_absolute(self) -> None:
        result = parse_german_date("vor 2 Stunden (01.01.2020)", REFERENCE)
        assert result == REFERENCE - timedelta(hours=2)

    def test_yesterday_wins_over_absolute(self) -> None:
        result = parse_german_date("gestern, 15. Januar 2024", REFERENCE)
        assert result == REFERENCE - timedelta(days=1)

    def test_uses_current_time_without_reference(self) -> None:
        before = datetime.now(BERLIN)
        result = parse_german_date("vor 2 Stunden")
        after = datetime.now(BERLIN)
        assert before - timedelta(hours=2) <= result <= after - timedelta(hours=2)


class TestDaylightSavingTime:
    def test_hours_are_elapsed_time_across_spring_forward(self) -> None:
        reference = datetime(2025, 3, 30, 3, 30, tzinfo=BERLIN)
        result = parse_german_date("vor 2 Stunden", reference)

        assert reference.astimezone(timezone.utc) - result.astimezone(timezone.utc) == timedelta(hours=2)
        assert result.replace(tzinfo=None) == datetime(2025, 3, 30, 0, 30)

    def test_day_is_elapsed_time_across_spring_forward(self) -> None:
        reference = datetime(2025, 3, 31, 0, 30, tzinfo=BERLIN)
        result = parse_german_date("vor 1 Tag", reference)

        assert result.date() == date(2025, 3, 29)
        assert result.hour == 23

    def test_yesterday_is_elapsed_time_across_spring_forward(self) -> None:
        reference = datetime(2025, 3, 31, 0, 30, tzinfo=BERLIN)
        assert parse_german_date("gestern", reference).date() == date(2025, 3, 29)

    def test_day_is_elapsed_time_across_fall_back(self) -> None:
        reference = datetime(2025, 10, 26, 12, 0, tzinfo=BERLIN)
        result = parse_german_date("vor 1 Tag", reference)

        assert reference.astimezone(timezone.utc) - result.astimezone(timezone.utc) == timedelta(days=1)
        assert result.replace(tzinfo=None) == datetime(2025, 10, 25, 13, 0)


class TestAbsoluteDates:
    def test_month_name(self) -> None:
        result = parse_german_date("15. Januar 2024", REFERENCE)
        assert (result.year, result.month, result.day) == (2024, 1, 15)

    def test_month_name_with_umlaut(self) -> None:
        result = parse_german_date("Veröffentlicht am 3. März 2024", REFERENCE)
        assert (result.year, result.month, result.day) == (2024, 3, 3)

    def test_month_name_is_case_insensitive(self) -> None:
        result = parse_german_date("9. DEZEMBER 2025", REFERENCE)
        assert (result.year, result.month, result.day) == (2025, 12, 9)

    def test_month_name_without_umlaut(self) -> None:
        result = parse_german_date("3. Maerz 2024", REFERENCE)
        assert (result.year, result.month, result.day) == (2024, 3, 3)

    def test_numeric(self) -> None:
        result = parse_german_date("09.12.2025", REFERENCE)
        assert (result.year, result.month, result.day) == (2025, 12, 9)

    def test_numeric_single_digits(self) -> None:
        result = parse_german_date("1.2.2024", REFERENCE)
        assert (result.year, result.month, result.day) == (2024, 2, 1)

    def test_iso(self) -> None:
        result = parse_german_date("2025-12-11", REFERENCE)
        assert (result.year, result.month, result.day) == (2025, 12, 11)

    def test_iso_datetime_attribute(self) -> None:
        result = parse_german_date("2025-12-11T08:00:00+01:00", REFERENCE)
        assert (result.year, result.month, result.day) == (2025, 12, 11)

    def test_absolute_dates_are_midnight_in_timezone(self) -> None:
        result = parse_german_date("09.12.2025", REFERENCE)
        assert result == datetime(2025, 12, 9, tzinfo=BERLIN)

    def test_unknown_month_name_falls_through_to_numeric(self) -> None:
        result = parse_german_date("1. Quintember 2024 / 02.03.2024", REFERENCE)
        assert (result.year, result.month, result.day) == (2024, 3, 2)


class TestFallback:
    def test_unparseable_returns_reference_and_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            result = parse_german_date("invalid date", REFERENCE)

        assert result == REFERENCE
        assert "invalid date" in caplog.text

    def test_unparseable_without_reference_is_now(self) -> None:
        before = datetime.now(BERLIN)
        result = parse_german_date("irgendwann")
        after = datetime.now(BERLIN)
        assert before <= result <= after

    def test_impossible_calendar_date_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            result = parse_german_date("31.02.2024", REFERENCE)
        assert result == REFERENCE
        assert "31.02.2024" in caplog.text

    def test_empty_text(self) -> None:
        assert parse_german_date("", REFERENCE) == REFERENCE
