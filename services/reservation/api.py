# ============================================================
# Reservation API Router
# ------------------------------------------------------------
# Expose les endpoints REST de la salle de réunion :
#   - POST /api/reservations    création (avec déplacement)
#   - GET  /api/reservations    liste triée par début UTC
#   - GET  /api/next-available  prochain créneau libre
# Les erreurs métier (errors.py) sont traduites dans app.py.
# ============================================================
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, create_engine

from config import settings
from errors import NotFoundError
from models import ReservationRequest
from scheduler import ReservationService, serialize

logger = logging.getLogger(__name__)

# SQLite (défaut) refuse par défaut le partage de connexion entre threads
_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
engine = create_engine(settings.database_url, pool_pre_ping=True, connect_args=_connect_args)
router = APIRouter()


# Dépendance FastAPI : fournit une Session DB par requête, auto-close
def get_session():
    with Session(engine) as s:
        yield s


def get_service(s: Session = Depends(get_session)) -> ReservationService:
    return ReservationService(s, settings)


# ------------------------------------------------------------
# POST /api/reservations — Créer une réservation
# ------------------------------------------------------------
# 201 avec la réservation créée (heures locales + UTC) et la
# liste des réservations déplacées, le cas échéant.
# ------------------------------------------------------------
@router.post("/api/reservations", status_code=201)
def create_reservation(req: ReservationRequest, service: ReservationService = Depends(get_service)):
    result = service.create_reservation(req)
    created = result.reservation
    body = serialize(created)
    return {
        "id": created.id,
        "message": "reservation created",
        "reservation": {
            "id": created.id,
            "startTime": body["startTime"],
            "endTime": body["endTime"],
            "startTimeUTC": body["startTimeUTC"],
            "endTimeUTC": body["endTimeUTC"],
            "priority": created.priority,
            "resources": {"projector": created.projector, "capacity": created.capacity},
            "timezone": created.timezone,
        },
        "displaced": [serialize(r) for r in result.displaced],
    }


@router.get("/api/reservations")
def list_reservations(service: ReservationService = Depends(get_service)):
    return [serialize(r) for r in service.list_reservations()]


# ------------------------------------------------------------
# GET /api/next-available — Prochain créneau libre
# ------------------------------------------------------------
# Aucune écriture ; 404 si rien dans l'horizon de recherche.
# ------------------------------------------------------------
@router.get("/api/next-available")
def next_available(
    start_time: Optional[str] = Query(None, alias="startTime"),
    timezone: Optional[str] = Query(None),
    service: ReservationService = Depends(get_service),
):
    slot = service.next_available(start_time, timezone)
    if slot is None:
        raise NotFoundError(f"no available slot in the next {settings.search_horizon_days} days")
    return {"nextAvailable": slot.local_start, "nextAvailableUTC": slot.start_utc.isoformat()}
