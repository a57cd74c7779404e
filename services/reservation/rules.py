# ============================================================
# rules.py — Règles du calendrier ouvré
# ------------------------------------------------------------
# Prédicats purs sur des instants UTC :
#   - jour ouvré (lundi → vendredi), toujours évalué en UTC
#   - heures ouvrées (09:00 → 17:00 UTC par défaut)
#   - bornes de durée (30 → 120 minutes par défaut)
# ============================================================
from datetime import datetime, timedelta

from config import Settings, settings as default_settings
from timeutils import ensure_utc


def is_business_day(instant: datetime) -> bool:
    # weekday() : lundi = 0 ... dimanche = 6, calculé sur l'UTC
    return ensure_utc(instant).weekday() < 5


def is_within_business_hours(start: datetime, end: datetime, settings: Settings = default_settings) -> bool:
    start, end = ensure_utc(start), ensure_utc(end)
    if start.date() != end.date():
        return False
    if start.hour < settings.business_start_hour or start.hour >= settings.business_end_hour:
        return False
    # la fin peut toucher 17:00 pile, pas au-delà
    closing = end.replace(hour=settings.business_end_hour, minute=0, second=0, microsecond=0)
    return end <= closing


def duration_minutes(start: datetime, end: datetime) -> int:
    return int((ensure_utc(end) - ensure_utc(start)).total_seconds() // 60)


def is_valid_duration(minutes: int, settings: Settings = default_settings) -> bool:
    return settings.min_duration_minutes <= minutes <= settings.max_duration_minutes


def is_valid_span(start: datetime, end: datetime, settings: Settings = default_settings) -> bool:
    # comparaison exacte : 120 min 30 s dépasse la borne
    span = ensure_utc(end) - ensure_utc(start)
    return (timedelta(minutes=settings.min_duration_minutes)
            <= span <= timedelta(minutes=settings.max_duration_minutes))


def is_valid_timezone(tz: str, settings: Settings = default_settings) -> bool:
    return tz in settings.allowed_timezones


def next_business_day(instant: datetime, settings: Settings = default_settings) -> datetime:
    """Premier jour ouvré à partir de `instant` (inclus), à l'heure d'ouverture UTC."""
    day = ensure_utc(instant)
    while not is_business_day(day):
        day += timedelta(days=1)
    return day.replace(hour=settings.business_start_hour, minute=0, second=0, microsecond=0)
