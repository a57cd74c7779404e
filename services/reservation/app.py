# ============================================================
# app.py — Point d'entrée du service Reservation
# ------------------------------------------------------------
# Initialise l'application FastAPI :
#   - configure le logging
#   - crée les tables au démarrage
#   - active CORS pour le front
#   - traduit les erreurs métier en réponses JSON
#   - monte les routes de l'API
# Lancement : `python app.py` (uvicorn, PORT=3001 par défaut)
# ============================================================
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel

import models  # noqa: F401  (enregistre la table Reservation)
from api import engine, router
from config import settings
from errors import ReservationError

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    SQLModel.metadata.create_all(engine)
    logger.info("[app] reservation service started")
    yield


app = FastAPI(title="Reservation Service", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ReservationError)
async def handle_reservation_error(request: Request, exc: ReservationError):
    log = logger.error if exc.status_code >= 500 else logger.info
    log("[app] %s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.get("/")
def root():
    return {"message": "Meeting room reservation API"}


app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
