"""
Module routes/health.py
Rôle:
- Endpoint de santé (service OK + présence d'une partie en cours).
"""
from fastapi import APIRouter, Depends

from confession_box.config.settings import settings
from confession_box.services.game_engine import GameEngine, get_game_engine

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(engine: GameEngine = Depends(get_game_engine)):
    """Renvoie un OK minimal avec le nom de service et le statut de la partie."""
    session = engine.snapshot()
    return {
        "ok": True,
        "service": settings.APP_NAME,
        "game_status": session.status.value if session else None,
    }
