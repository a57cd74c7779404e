# ============================================================
# timeutils.py — Normalisation des fuseaux horaires
# ------------------------------------------------------------
# Conversion heure locale <-> instant UTC. Tout le moteur
# travaille en UTC ; les heures locales ne servent qu'à
# l'affichage et au re-calage d'une réservation déplacée.
# Les cas DST sont délégués à la base tz (zoneinfo).
# ============================================================
from datetime import datetime, timezone
from typing import Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from errors import ValidationError


def _zone(tz: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"unknown timezone: {tz}")


def parse_wall_clock(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        raise ValidationError(f"invalid datetime: {value!r}")


def ensure_utc(dt: datetime) -> datetime:
    # un datetime naïf vient du stockage : il est déjà en UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_utc(local: Union[str, datetime], tz: str) -> datetime:
    """Interprète une heure murale dans `tz` et renvoie l'instant UTC équivalent.

    Une chaîne qui porte déjà un décalage (`+09:00`) est prise telle quelle.
    """
    dt = parse_wall_clock(local) if isinstance(local, str) else local
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_zone(tz))
    return dt.astimezone(timezone.utc)


def from_utc(instant: datetime, tz: str) -> str:
    """Instant UTC -> heure locale ISO 8601 avec décalage (inverse de to_utc)."""
    return ensure_utc(instant).astimezone(_zone(tz)).isoformat()


def format_local(instant: datetime, tz: str) -> str:
    return ensure_utc(instant).astimezone(_zone(tz)).strftime("%Y-%m-%d %H:%M")


def to_storage(instant: datetime) -> datetime:
    # on stocke toujours un instant UTC avec fuseau
    return ensure_utc(instant)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
