from datetime import timedelta

import pytest

from config import Settings
from rules import is_business_day, is_within_business_hours
from slots import find_next_available, round_up_half_hour
from conftest import ZONES, utc


@pytest.mark.parametrize("value, expected", [
    (utc(2024, 1, 15, 10, 0), utc(2024, 1, 15, 10, 0)),
    (utc(2024, 1, 15, 10, 30), utc(2024, 1, 15, 10, 30)),
    (utc(2024, 1, 15, 10, 1), utc(2024, 1, 15, 10, 30)),
    (utc(2024, 1, 15, 10, 45), utc(2024, 1, 15, 11, 0)),
    (utc(2024, 1, 15, 10, 30, 5), utc(2024, 1, 15, 11, 0)),
    (utc(2024, 1, 15, 23, 50), utc(2024, 1, 16, 0, 0)),
])
def test_round_up_half_hour(value, expected):
    assert round_up_half_hour(value) == expected


def test_empty_store_returns_the_rounded_start(repo, settings):
    slot = find_next_available(repo, utc(2024, 1, 15, 10, 10), "UTC", settings)
    assert slot.start_utc == utc(2024, 1, 15, 10, 30)
    assert slot.end_utc == utc(2024, 1, 15, 11, 30)
    assert slot.local_start == "2024-01-15T10:30:00+00:00"


def test_friday_afternoon_rolls_over_the_weekend(repo, settings):
    slot = find_next_available(repo, utc(2024, 1, 19, 16, 30), "UTC", settings)
    assert slot.local_start == "2024-01-22T09:00:00+00:00"


def test_early_morning_is_clamped_to_opening(repo, settings):
    slot = find_next_available(repo, utc(2024, 1, 15, 7, 10), "UTC", settings)
    assert slot.start_utc == utc(2024, 1, 15, 9, 0)


def test_slot_is_presented_in_the_callers_zone(repo, settings):
    slot = find_next_available(repo, utc(2024, 1, 15, 14, 0), "America/New_York", settings)
    assert slot.local_start == "2024-01-15T09:00:00-05:00"


def test_conflict_moves_past_latest_end(add, repo, settings):
    add(utc(2024, 1, 15, 10, 0), utc(2024, 1, 15, 11, 15))
    add(utc(2024, 1, 15, 11, 30), utc(2024, 1, 15, 12, 0))
    slot = find_next_available(repo, utc(2024, 1, 15, 10, 0), "UTC", settings)
    # 10:00 en conflit -> 11:30, encore en conflit -> 12:00
    assert slot.start_utc == utc(2024, 1, 15, 12, 0)


def test_fully_booked_day_moves_to_next_business_day(add, repo, settings):
    add(utc(2024, 1, 19, 9), utc(2024, 1, 19, 11))
    add(utc(2024, 1, 19, 11), utc(2024, 1, 19, 13))
    add(utc(2024, 1, 19, 13), utc(2024, 1, 19, 15))
    add(utc(2024, 1, 19, 15), utc(2024, 1, 19, 17))
    slot = find_next_available(repo, utc(2024, 1, 19, 9), "UTC", settings)
    assert slot.start_utc == utc(2024, 1, 22, 9)


def test_custom_duration_must_fit_before_closing(repo, settings):
    slot = find_next_available(repo, utc(2024, 1, 15, 15, 30), "UTC", settings, duration=timedelta(hours=2))
    assert slot.start_utc == utc(2024, 1, 16, 9)
    assert slot.end_utc == utc(2024, 1, 16, 11)


def test_extra_busy_intervals_are_avoided(repo, settings):
    busy = [(utc(2024, 1, 15, 10), utc(2024, 1, 15, 11))]
    slot = find_next_available(repo, utc(2024, 1, 15, 10), "UTC", settings, busy=busy)
    assert slot.start_utc == utc(2024, 1, 15, 11)


def test_horizon_exhausted_returns_none(add, repo):
    settings = Settings(allowed_timezones=ZONES, search_horizon_days=0)
    add(utc(2024, 1, 15, 9), utc(2024, 1, 15, 11))
    add(utc(2024, 1, 15, 11), utc(2024, 1, 15, 13))
    add(utc(2024, 1, 15, 13), utc(2024, 1, 15, 15))
    add(utc(2024, 1, 15, 15), utc(2024, 1, 15, 17))
    assert find_next_available(repo, utc(2024, 1, 15, 9), "UTC", settings) is None
    assert find_next_available(repo, utc(2024, 1, 20, 9), "UTC", settings) is None


def test_search_is_deterministic_and_compliant(add, repo, settings):
    add(utc(2024, 1, 15, 9), utc(2024, 1, 15, 10, 30), priority="high")
    add(utc(2024, 1, 15, 11), utc(2024, 1, 15, 12))
    first = find_next_available(repo, utc(2024, 1, 15, 9), "Asia/Tokyo", settings)
    second = find_next_available(repo, utc(2024, 1, 15, 9), "Asia/Tokyo", settings)
    assert first == second
    assert is_business_day(first.start_utc)
    assert is_within_business_hours(first.start_utc, first.end_utc, settings)
    assert repo.find_overlapping(first.start_utc, first.end_utc) == []
    assert first.start_utc == utc(2024, 1, 15, 12)
