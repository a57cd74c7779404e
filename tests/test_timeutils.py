from datetime import datetime, timezone

import pytest

from errors import ValidationError
from timeutils import ensure_utc, format_local, from_utc, to_storage, to_utc
from conftest import utc


def test_to_utc_interprets_wall_clock_in_zone():
    assert to_utc("2024-01-15T10:00:00", "America/New_York") == utc(2024, 1, 15, 15, 0)
    assert to_utc("2024-01-15T10:00:00", "Asia/Tokyo") == utc(2024, 1, 15, 1, 0)


def test_to_utc_keeps_explicit_offset():
    assert to_utc("2024-01-15T10:00:00+09:00", "America/New_York") == utc(2024, 1, 15, 1, 0)
    assert to_utc("2024-01-15T10:00:00Z", "Asia/Tokyo") == utc(2024, 1, 15, 10, 0)


def test_to_utc_follows_daylight_saving():
    # New York est en UTC-4 l'été
    assert to_utc("2024-07-15T10:00:00", "America/New_York") == utc(2024, 7, 15, 14, 0)


@pytest.mark.parametrize("local, tz", [
    ("2024-01-15T10:00:00-05:00", "America/New_York"),
    ("2024-01-15T18:30:00+09:00", "Asia/Tokyo"),
    ("2024-01-15T09:00:00-06:00", "America/Mexico_City"),
    ("2024-01-15T09:00:00+00:00", "UTC"),
])
def test_round_trip(local, tz):
    assert from_utc(to_utc(local, tz), tz) == local


def test_invalid_datetime_is_a_validation_error():
    with pytest.raises(ValidationError):
        to_utc("not a date", "UTC")


def test_unknown_zone_is_a_validation_error():
    with pytest.raises(ValidationError):
        to_utc("2024-01-15T10:00:00", "Mars/Olympus")


def test_storage_values_are_aware_utc():
    # une valeur naïve relue d'un ancien pilote est de l'UTC
    assert ensure_utc(datetime(2024, 1, 15, 10, 0)) == utc(2024, 1, 15, 10, 0)
    stored = to_storage(to_utc("2024-01-15T10:00:00", "Asia/Tokyo"))
    assert stored.tzinfo is not None
    assert stored.utcoffset().total_seconds() == 0
    assert stored == utc(2024, 1, 15, 1, 0)


@pytest.mark.parametrize("wall_clock, tz, presented", [
    ("2024-01-15T10:00", "America/New_York", "2024-01-15T10:00:00-05:00"),
    ("2024-01-15T10:00:00", "Asia/Tokyo", "2024-01-15T10:00:00+09:00"),
    ("2024-07-15T10:00:00", "America/New_York", "2024-07-15T10:00:00-04:00"),
])
def test_round_trip_yields_the_presentation_format(wall_clock, tz, presented):
    # sans décalage, l'aller-retour ajoute le décalage de la zone
    assert from_utc(to_utc(wall_clock, tz), tz) == presented
    # le format de présentation, lui, est un point fixe
    assert from_utc(to_utc(presented, tz), tz) == presented


def test_format_local():
    assert format_local(datetime(2024, 1, 15, 15, 0, tzinfo=timezone.utc), "America/New_York") == "2024-01-15 10:00"
