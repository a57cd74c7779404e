# ============================================================
# config.py — Configuration du service Reservation
# ------------------------------------------------------------
# Toutes les valeurs viennent de l'environnement (avec des
# valeurs par défaut raisonnables). Les fonctions métier reçoivent
# un objet Settings explicite au lieu de lire des globales.
# ============================================================
import os
from dataclasses import dataclass
from typing import Tuple

DEFAULT_TIMEZONES = ("America/New_York", "Asia/Tokyo", "America/Mexico_City")


def _int_env(name: str, default: int) -> int:
    # une valeur absente ou non numérique retombe sur le défaut
    raw = os.getenv(name)
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _list_env(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if not raw:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    allowed_timezones: Tuple[str, ...] = DEFAULT_TIMEZONES
    business_start_hour: int = 9
    business_end_hour: int = 17
    min_duration_minutes: int = 30
    max_duration_minutes: int = 120
    max_capacity: int = 8
    search_horizon_days: int = 30
    slot_minutes: int = 60
    database_url: str = "sqlite:///./reservations.db"
    allowed_origins: Tuple[str, ...] = ("http://localhost:3000",)
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3001


def load_settings() -> Settings:
    return Settings(
        allowed_timezones=_list_env("ALLOWED_TIMEZONES", DEFAULT_TIMEZONES),
        business_start_hour=_int_env("BUSINESS_START_HOUR", 9),
        business_end_hour=_int_env("BUSINESS_END_HOUR", 17),
        min_duration_minutes=_int_env("MIN_DURATION_MINUTES", 30),
        max_duration_minutes=_int_env("MAX_DURATION_MINUTES", 120),
        max_capacity=_int_env("MAX_CAPACITY", 8),
        search_horizon_days=_int_env("SEARCH_HORIZON_DAYS", 30),
        slot_minutes=_int_env("SLOT_MINUTES", 60),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./reservations.db"),
        allowed_origins=_list_env("ALLOWED_ORIGINS", ("http://localhost:3000",)),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int_env("PORT", 3001),
    )


settings = load_settings()
