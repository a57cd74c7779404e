# ============================================================
# models.py — Modèles de données (Reservation Service)
# ------------------------------------------------------------
#   1. Reservation : table SQLModel, une ligne par réservation
#      de la salle (heures en UTC)
#   2. ReservationRequest : corps JSON du POST
# ============================================================
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field as PydanticField
from sqlmodel import SQLModel, Field


class Priority(str, Enum):
    NORMAL = "normal"
    HIGH = "high"


# ------------------------------------------------------------
# Reservation
# ------------------------------------------------------------
# Heures en UTC avec fuseau. Seul le déplacement
# (displacement.py) modifie une ligne existante, et
# uniquement start_time / end_time.
# ------------------------------------------------------------
class Reservation(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    start_time: datetime = Field(index=True)
    end_time: datetime = Field(index=True)
    priority: str = Priority.NORMAL.value
    projector: bool = False
    capacity: int
    timezone: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# Les clés JSON suivent le contrat public (camelCase) ;
# tous les champs sont optionnels et `resources` reste brut :
# scheduler.py produit ses propres erreurs (400 et non 422).
class ReservationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_time: Optional[str] = PydanticField(default=None, alias="startTime")
    end_time: Optional[str] = PydanticField(default=None, alias="endTime")
    priority: str = Priority.NORMAL.value
    resources: Optional[Any] = None
    timezone: Optional[str] = None
