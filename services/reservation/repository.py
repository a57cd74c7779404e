# ============================================================
# repository.py — Accès aux données Reservation
# ------------------------------------------------------------
# Pattern "Repository" au-dessus de la table Reservation.
# Les méthodes font un flush, jamais de commit : c'est
# l'orchestrateur (scheduler.py) qui valide ou annule la
# transaction complète.
# ============================================================
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from errors import StoreError
from models import Reservation
from timeutils import to_storage

logger = logging.getLogger(__name__)


class ReservationRepository:
    def __init__(self, session: Session):
        self.session = session

    def create(self, r: Reservation) -> Reservation:
        r.start_time = to_storage(r.start_time)
        r.end_time = to_storage(r.end_time)
        try:
            self.session.add(r)
            self.session.flush()
            self.session.refresh(r)
        except SQLAlchemyError as e:
            logger.error("[store] insert failed: %s", e)
            raise StoreError("failed to create reservation") from e
        return r

    def get(self, reservation_id: int) -> Optional[Reservation]:
        try:
            return self.session.get(Reservation, reservation_id)
        except SQLAlchemyError as e:
            logger.error("[store] get %s failed: %s", reservation_id, e)
            raise StoreError("failed to load reservation") from e

    def list_by_start(self) -> List[Reservation]:
        try:
            return list(self.session.exec(
                select(Reservation).order_by(Reservation.start_time, Reservation.id)
            ).all())
        except SQLAlchemyError as e:
            logger.error("[store] list failed: %s", e)
            raise StoreError("failed to list reservations") from e

    def find_overlapping(self, start: datetime, end: datetime) -> List[Reservation]:
        # stored.start < end AND stored.end > start couvre les trois cas :
        # chevauchement du début, de la fin, ou inclusion dans un sens ou l'autre
        query = (
            select(Reservation)
            .where(Reservation.start_time < to_storage(end), Reservation.end_time > to_storage(start))
            .order_by(Reservation.start_time, Reservation.id)
        )
        try:
            return list(self.session.exec(query).all())
        except SQLAlchemyError as e:
            logger.error("[store] overlap query failed: %s", e)
            raise StoreError("failed to query overlapping reservations") from e

    def update_interval(self, reservation_id: int, start: datetime, end: datetime) -> Optional[Reservation]:
        r = self.get(reservation_id)
        if r:
            r.start_time = to_storage(start)
            r.end_time = to_storage(end)
            try:
                self.session.flush()
                self.session.refresh(r)
            except SQLAlchemyError as e:
                logger.error("[store] update %s failed: %s", reservation_id, e)
                raise StoreError("failed to update reservation") from e
        return r

    def count(self) -> int:
        try:
            return self.session.exec(select(func.count()).select_from(Reservation)).one()
        except SQLAlchemyError as e:
            logger.error("[store] count failed: %s", e)
            raise StoreError("failed to count reservations") from e
