"""
Application FastAPI — Point d'entrée
====================================

Rôle
----
- Instancie l'app FastAPI, configure le CORS pour le front local,
- Monte les routeurs (REST + WebSocket),
- Traduit les erreurs de règles du moteur en réponses JSON typées.

Notes
-----
- ⚠️ Le middleware CORS doit être ajouté AVANT les include_router.
- Les erreurs sont renvoyées sous la forme {"detail": {"code": ..., "message": ...}}.
- Lancement local : `confession-box` (ou `uvicorn confession_box.main:app`), bind HOST/PORT des settings.
"""
import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from confession_box.routes.game import router as game_router
from confession_box.routes.health import router as health_router
from confession_box.routes.websocket import router as ws_router
from confession_box.config.settings import settings
from confession_box.services.errors import (
    CapacityError,
    DuplicateNameError,
    DuplicateVoteError,
    GameError,
    NotFoundError,
    PersistenceError,
    SelfVoteError,
    StateError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# --- App FastAPI principale  ---
app = FastAPI(title=settings.APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(game_router)
app.include_router(health_router)
app.include_router(ws_router)              # WebSocket endpoint (/ws/game)

# Code HTTP par famille d'erreur (les sous-classes non listées -> 400)
ERROR_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    CapacityError: 409,
    DuplicateNameError: 409,
    DuplicateVoteError: 409,
    SelfVoteError: 409,
    StateError: 409,
}


@app.exception_handler(GameError)
async def game_error_handler(request: Request, exc: GameError):
    status = ERROR_STATUS.get(type(exc), 400)
    return JSONResponse(status_code=status, content={"detail": {"code": exc.code, "message": exc.message}})


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    return JSONResponse(status_code=500, content={"detail": {"code": exc.code, "message": str(exc)}})


# --- Racine utile pour "ping" simple (sans /health) ---
@app.get("/")
async def root():
    return {"ok": True, "service": "confession-box"}


# --- Hook de démarrage ---
@app.on_event("startup")
async def configure_logging():
    """Configure le logging racine puis liste les routes montées (diagnostic)."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Data dir: %s (key=%s)", settings.DATA_DIR, settings.STORAGE_KEY)
    for r in app.routes:
        logger.debug("route %s %s", getattr(r, "path", "?"), getattr(r, "methods", None))


def run() -> None:
    """Lance le serveur local sur HOST/PORT."""
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
