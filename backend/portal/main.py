"""
Point d'entrée principal de l'API du portail scolaire.
Démarrage : uvicorn portal.main:app --reload  (depuis le dossier backend/)
"""

import logging
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portal.exceptions import ConflictError, ReferentialError, TransactionFailure, ValidationError
from portal.routers import entities, notifications, timetable
from portal.stores.base import EntityStore
from portal.stores.factory import get_store

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Portail scolaire API",
    description="Notes, absences, emplois du temps et notifications aux parents",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# CORS : autorise tous les ports localhost en développement (à restreindre en production).
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)

for entity_router in entities.routers:
    app.include_router(entity_router)
app.include_router(timetable.router)
app.include_router(notifications.router)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc), "errors": exc.errors})


@app.exception_handler(ReferentialError)
async def referential_error_handler(request: Request, exc: ReferentialError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(ConflictError)
async def conflict_error_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(TransactionFailure)
async def transaction_failure_handler(request: Request, exc: TransactionFailure) -> JSONResponse:
    logger.error("Transaction annulée : %s", exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour garantir que la réponse 500
    passe bien par CORSMiddleware (qui injecte les headers CORS).
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Une erreur interne est survenue."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "Portail scolaire API", "version": "0.1.0"}


@app.get("/api/status", tags=["Santé"])
def store_status(store: EntityStore = Depends(get_store)):
    """Vérifie que le magasin de données répond."""
    if not store.ping():
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": "Erreur de connexion à la base de données"},
        )
    return {
        "status": "success",
        "backend": store.backend_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
