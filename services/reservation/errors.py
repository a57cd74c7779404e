# ============================================================
# errors.py — Exceptions métier du service Reservation
# ------------------------------------------------------------
# Les modules métier lèvent ces exceptions ; app.py les traduit
# en réponses HTTP (400 / 404 / 409 / 500).
# ============================================================
from typing import Optional


class ReservationError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"error": self.message}


class ValidationError(ReservationError):
    """Entrée refusée : zone, ressources, jour/heures ouvrées ou durée."""
    status_code = 400


class ConflictError(ReservationError):
    """Chevauchement non déplaçable ; porte le prochain créneau suggéré (ou None)."""
    status_code = 409

    def __init__(self, message: str, next_available: Optional[str] = None):
        super().__init__(message)
        self.next_available = next_available

    def to_payload(self) -> dict:
        return {"error": self.message, "nextAvailable": self.next_available}


class NotFoundError(ReservationError):
    status_code = 404


class RelocationError(NotFoundError):
    # la réservation déplacée n'a pas trouvé de nouveau créneau
    status_code = 409


class StoreError(ReservationError):
    status_code = 500
