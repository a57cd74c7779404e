# ============================================================
# collisions.py — Détection de collisions
# ------------------------------------------------------------
# Cherche les réservations stockées qui chevauchent [start, end)
# et décide si elles peuvent être déplacées par priorité :
# seule une demande "high" déplace des réservations "normal".
#
# Toutes les réservations en conflit sont remontées (pas
# seulement la première) : le déplacement n'a lieu que si
# CHACUNE est déplaçable, sinon la demande est en conflit.
# ============================================================
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from models import Priority, Reservation
from repository import ReservationRepository

logger = logging.getLogger(__name__)


def can_displace(candidate_priority: str, stored_priority: str) -> bool:
    return candidate_priority == Priority.HIGH.value and stored_priority == Priority.NORMAL.value


@dataclass
class Collision:
    reservations: List[Reservation] = field(default_factory=list)
    can_displace: bool = False
    # vrai si au moins un conflit porte aussi sur le projecteur ; purement
    # informatif, la décision de déplacement ne dépend que des priorités
    projector_conflict: bool = False

    @property
    def ids(self) -> List[int]:
        return [r.id for r in self.reservations]


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and a_end > b_start


def detect_collision(
    repo: ReservationRepository,
    start: datetime,
    end: datetime,
    needs_projector: bool,
    priority: str,
) -> Optional[Collision]:
    rows = repo.find_overlapping(start, end)
    logger.info("[collisions] %s -> %s: %d overlapping", start.isoformat(), end.isoformat(), len(rows))
    if not rows:
        return None

    collision = Collision(
        reservations=rows,
        can_displace=all(can_displace(priority, r.priority) for r in rows),
        projector_conflict=needs_projector and any(r.projector for r in rows),
    )
    logger.info("[collisions] ids=%s can_displace=%s", collision.ids, collision.can_displace)
    return collision
