# ============================================================
# displacement.py — Déplacement d'une réservation évincée
# ------------------------------------------------------------
# Une réservation "normal" qui gêne une demande "high" est
# recalée sur le premier créneau libre après sa propre fin,
# dans son propre fuseau. Seuls start_time / end_time changent :
# id, priorité, ressources et fuseau sont conservés.
# ============================================================
import logging
from typing import Iterable

from config import Settings, settings as default_settings
from errors import NotFoundError, RelocationError
from models import Reservation
from repository import ReservationRepository
from slots import Interval, find_next_available
from timeutils import ensure_utc, to_utc

logger = logging.getLogger(__name__)


def displace_reservation(
    repo: ReservationRepository,
    reservation_id: int,
    tz: str,
    settings: Settings = default_settings,
    busy: Iterable[Interval] = (),
) -> Reservation:
    r = repo.get(reservation_id)
    if not r:
        raise NotFoundError(f"reservation {reservation_id} not found")

    duration = ensure_utc(r.end_time) - ensure_utc(r.start_time)
    # le créneau doit accueillir toute la durée, pas seulement une heure
    slot = find_next_available(
        repo, ensure_utc(r.end_time), tz, settings,
        duration=duration, busy=busy,
    )
    if slot is None:
        logger.error("[displacement] no slot to relocate reservation %s", reservation_id)
        raise RelocationError(f"no available slot to relocate reservation {reservation_id}")

    new_start = to_utc(slot.local_start, tz)
    new_end = new_start + duration
    moved = repo.update_interval(reservation_id, new_start, new_end)
    logger.info("[displacement] reservation %s moved to %s", reservation_id, slot.local_start)
    return moved
