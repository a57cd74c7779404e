# ============================================================
# scheduler.py — Orchestration des réservations
# ------------------------------------------------------------
# Enchaîne, dans cet ordre :
#   validation -> conversion UTC -> règles calendrier
#   -> détection de collision -> (déplacement) -> insertion
#
# Toute opération qui écrit passe par un verrou unique
# (un seul écrivain) et une seule transaction : si un
# déplacement échoue, rien n'est inséré ni modifié.
# ============================================================
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, List, Optional

from sqlmodel import Session

from collisions import detect_collision
from config import Settings, settings as default_settings
from displacement import displace_reservation
from errors import ConflictError, ValidationError
from models import Priority, Reservation, ReservationRequest
from repository import ReservationRepository
from rules import (
    is_business_day,
    is_valid_span,
    is_valid_timezone,
    is_within_business_hours,
)
from slots import Slot, find_next_available
from timeutils import ensure_utc, from_utc, to_storage, to_utc, utcnow

logger = logging.getLogger(__name__)

# écrivain unique pour tout le processus
_WRITE_LOCK = threading.Lock()


@dataclass
class CreateResult:
    reservation: Reservation
    displaced: List[Reservation] = field(default_factory=list)


def serialize(r: Reservation) -> dict:
    return {
        "id": r.id,
        "startTime": from_utc(r.start_time, r.timezone),
        "endTime": from_utc(r.end_time, r.timezone),
        "startTimeUTC": ensure_utc(r.start_time).isoformat(),
        "endTimeUTC": ensure_utc(r.end_time).isoformat(),
        "priority": r.priority,
        "projector": bool(r.projector),
        "capacity": r.capacity,
        "timezone": r.timezone,
        "createdAt": ensure_utc(r.created_at).isoformat(),
    }


class ReservationService:
    def __init__(
        self,
        session: Session,
        settings: Settings = default_settings,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session = session
        self.repo = ReservationRepository(session)
        self.settings = settings
        self.clock = clock

    # --------------------------------------------------------
    # Validation
    # --------------------------------------------------------
    def _check_timezone(self, tz: Optional[str]) -> str:
        if not tz or not is_valid_timezone(tz, self.settings):
            raise ValidationError("timezone not allowed")
        return tz

    def _check_resources(self, resources: Any) -> dict:
        if not isinstance(resources, dict) or not isinstance(resources.get("projector"), bool):
            raise ValidationError("invalid resources")
        capacity = resources.get("capacity")
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise ValidationError("invalid resources")
        if capacity > self.settings.max_capacity:
            raise ValidationError(f"maximum capacity is {self.settings.max_capacity} people")
        return {"projector": resources["projector"], "capacity": capacity}

    def _check_calendar(self, start: datetime, end: datetime) -> None:
        s = self.settings
        if start >= end:
            raise ValidationError("startTime must be before endTime")
        if not is_business_day(start):
            raise ValidationError("reservations are only allowed on business days")
        if not is_within_business_hours(start, end, s):
            raise ValidationError(
                f"reservations must be between {s.business_start_hour:02d}:00 and {s.business_end_hour:02d}:00 UTC"
            )
        if not is_valid_span(start, end, s):
            raise ValidationError(
                f"duration must be between {s.min_duration_minutes} and {s.max_duration_minutes} minutes"
            )

    # --------------------------------------------------------
    # Création
    # --------------------------------------------------------
    def create_reservation(self, req: ReservationRequest) -> CreateResult:
        logger.info("[scheduler] create request %s -> %s (%s)", req.start_time, req.end_time, req.timezone)
        tz = self._check_timezone(req.timezone)
        resources = self._check_resources(req.resources)
        if not req.start_time or not req.end_time:
            raise ValidationError("startTime and endTime are required")
        if req.priority not in (Priority.NORMAL.value, Priority.HIGH.value):
            raise ValidationError("priority must be 'normal' or 'high'")

        start = to_utc(req.start_time, tz)
        end = to_utc(req.end_time, tz)
        logger.info("[scheduler] converted to UTC %s -> %s", start.isoformat(), end.isoformat())
        self._check_calendar(start, end)

        with _WRITE_LOCK:
            try:
                result = self._create_locked(start, end, req.priority, resources, tz)
                self.session.commit()
            except Exception:
                self.session.rollback()
                raise
        logger.info("[scheduler] reservation %s created", result.reservation.id)
        return result

    def _create_locked(self, start, end, priority, resources, tz) -> CreateResult:
        collision = detect_collision(self.repo, start, end, resources["projector"], priority)
        displaced = []
        if collision:
            if not collision.can_displace:
                suggestion = find_next_available(self.repo, start, tz, self.settings)
                raise ConflictError(
                    "schedule conflict",
                    next_available=suggestion.local_start if suggestion else None,
                )
            for r in collision.reservations:
                # l'intervalle demandé n'est pas encore inséré : on le réserve
                displaced.append(
                    displace_reservation(self.repo, r.id, r.timezone, self.settings, busy=[(start, end)])
                )

        reservation = self.repo.create(Reservation(
            start_time=start,
            end_time=end,
            priority=priority,
            projector=resources["projector"],
            capacity=resources["capacity"],
            timezone=tz,
            created_at=to_storage(self.clock()),
        ))
        return CreateResult(reservation, displaced)

    # --------------------------------------------------------
    # Lecture
    # --------------------------------------------------------
    def list_reservations(self) -> List[Reservation]:
        return self.repo.list_by_start()

    def next_available(self, start_time: Optional[str], tz: Optional[str]) -> Optional[Slot]:
        if not start_time or not tz:
            raise ValidationError("missing required parameters")
        tz = self._check_timezone(tz)
        return find_next_available(self.repo, to_utc(start_time, tz), tz, self.settings)
