# ============================================================
# slots.py — Recherche du prochain créneau libre
# ------------------------------------------------------------
# Recherche linéaire bornée vers l'avant :
#   1. arrondi à la demi-heure supérieure
#   2. saute les week-ends et les heures hors bureau
#   3. interroge le stockage pour la fenêtre candidate
#   4. en cas de conflit, repart de la fin la plus tardive
# La borne `search_horizon_days` (jours avancés, pas jours
# écoulés) garantit la terminaison.
# ============================================================
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from config import Settings, settings as default_settings
from repository import ReservationRepository
from rules import is_business_day
from timeutils import ensure_utc, from_utc

logger = logging.getLogger(__name__)

Interval = Tuple[datetime, datetime]


@dataclass(frozen=True)
class Slot:
    start_utc: datetime
    end_utc: datetime
    local_start: str
    local_end: str


def round_up_half_hour(dt: datetime) -> datetime:
    dt = ensure_utc(dt)
    if dt.minute % 30 == 0 and dt.second == 0 and dt.microsecond == 0:
        return dt
    base = dt.replace(minute=(dt.minute // 30) * 30, second=0, microsecond=0)
    return base + timedelta(minutes=30)


def _next_day_opening(dt: datetime, settings: Settings) -> datetime:
    return (dt + timedelta(days=1)).replace(
        hour=settings.business_start_hour, minute=0, second=0, microsecond=0
    )


def _place_window(floor: datetime, length: timedelta, settings: Settings) -> Tuple[Optional[datetime], datetime]:
    """Applique les règles de calendrier à `floor`.

    Renvoie (début de fenêtre valide, floor) ou (None, ouverture du jour suivant)
    quand la journée de `floor` ne peut plus accueillir la fenêtre.
    """
    if not is_business_day(floor) or floor.hour >= settings.business_end_hour:
        return None, _next_day_opening(floor, settings)
    if floor.hour < settings.business_start_hour:
        floor = floor.replace(hour=settings.business_start_hour, minute=0, second=0, microsecond=0)
    closing = floor.replace(hour=settings.business_end_hour, minute=0, second=0, microsecond=0)
    if floor + length > closing:
        return None, _next_day_opening(floor, settings)
    return floor, floor


def _conflicts(
    repo: ReservationRepository, start: datetime, end: datetime, busy: Iterable[Interval]
) -> List[datetime]:
    ends = [ensure_utc(r.end_time) for r in repo.find_overlapping(start, end)]
    ends.extend(ensure_utc(b_end) for b_start, b_end in busy
                if ensure_utc(b_start) < end and ensure_utc(b_end) > start)
    return ends


def find_next_available(
    repo: ReservationRepository,
    from_time: datetime,
    tz: str,
    settings: Settings = default_settings,
    duration: Optional[timedelta] = None,
    busy: Iterable[Interval] = (),
) -> Optional[Slot]:
    """Premier créneau libre et conforme au calendrier à partir de `from_time`.

    `duration` vaut par défaut `settings.slot_minutes` ; `busy` ajoute des
    intervalles occupés qui ne sont pas (encore) dans le stockage.
    Renvoie None si l'horizon est épuisé.
    """
    length = duration or timedelta(minutes=settings.slot_minutes)
    busy = list(busy)
    floor = round_up_half_hour(from_time)
    days_checked = 0
    logger.info("[slots] searching from %s (%s)", floor.isoformat(), tz)

    while days_checked <= settings.search_horizon_days:
        start, floor = _place_window(floor, length, settings)
        if start is None:
            days_checked += 1
            continue

        end = start + length
        conflict_ends = _conflicts(repo, start, end, busy)
        if not conflict_ends:
            slot = Slot(start, end, from_utc(start, tz), from_utc(end, tz))
            logger.info("[slots] free slot %s -> %s", slot.local_start, slot.local_end)
            return slot

        # chaque fin en conflit est > start, donc floor avance strictement
        floor = round_up_half_hour(max(conflict_ends))

    logger.info("[slots] horizon of %d days exhausted", settings.search_horizon_days)
    return None
