"""
Module routes/game.py
Rôle:
- Exposer au front local (tablette/PC de la soirée) le contrat public du moteur.

Intégrations:
- GameEngine (via `get_game_engine`, surchargeable en tests par dependency_overrides).
- Les erreurs de règles (`GameError`) sont converties en JSON par les handlers de `main.py`.

Endpoints:
- POST/GET/DELETE /game                      : créer, lire, effacer la partie
- POST /game/players, DELETE /game/players/{id}
- POST /game/confessions/start, POST /game/confessions
- GET  /game/players/{id}/confessions, GET /game/confessions/ready
- POST /game/start, POST /game/rounds/next
- POST /game/rounds/current/votes, GET /game/rounds/current/votes/complete
- POST /game/rounds/current/reveal
- GET  /game/stats, GET /game/categories
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from confession_box.models.game import (
    CategoryOption,
    Confession,
    ConfessionCategory,
    GameSession,
    GameStats,
    Player,
    RoundResult,
    category_options,
)
from confession_box.services.game_engine import GameEngine, get_game_engine

router = APIRouter(prefix="/game", tags=["game"])


class PlayerPayload(BaseModel):
    name: str


class ConfessionPayload(BaseModel):
    player_id: str
    text: str
    category: ConfessionCategory


class VotePayload(BaseModel):
    voter_id: str
    voted_for_id: str


@router.post("")
async def create_game(engine: GameEngine = Depends(get_game_engine)):
    """Nouvelle partie (remplace l'ancienne sans confirmation : c'est au front de demander)."""
    session_id = engine.create_new_game()
    return {"ok": True, "session_id": session_id}


@router.get("", response_model=Optional[GameSession])
async def get_game(engine: GameEngine = Depends(get_game_engine)):
    """Snapshot courant (null si aucune partie)."""
    return engine.snapshot()


@router.delete("")
async def clear_game(engine: GameEngine = Depends(get_game_engine)):
    engine.clear_game_data()
    return {"ok": True}


@router.post("/players", response_model=Player)
async def add_player(payload: PlayerPayload, engine: GameEngine = Depends(get_game_engine)):
    return engine.add_player(payload.name)


@router.delete("/players/{player_id}")
async def remove_player(player_id: str, engine: GameEngine = Depends(get_game_engine)):
    engine.remove_player(player_id)
    return {"ok": True}


@router.get("/players/{player_id}/confessions", response_model=List[Confession])
async def player_confessions(player_id: str, engine: GameEngine = Depends(get_game_engine)):
    return engine.get_player_confessions(player_id)


@router.post("/confessions/start")
async def start_confessions(engine: GameEngine = Depends(get_game_engine)):
    engine.start_confessions()
    return {"ok": True}


@router.post("/confessions", response_model=Confession)
async def add_confession(payload: ConfessionPayload, engine: GameEngine = Depends(get_game_engine)):
    return engine.add_confession(payload.player_id, payload.text, payload.category)


@router.get("/confessions/ready")
async def confessions_ready(engine: GameEngine = Depends(get_game_engine)):
    return {"ready": engine.all_players_have_confessions()}


@router.post("/start")
async def start_game(engine: GameEngine = Depends(get_game_engine)):
    started = engine.start_game()
    return {"ok": True, "round_started": started}


@router.post("/rounds/next")
async def next_round(engine: GameEngine = Depends(get_game_engine)):
    started = engine.next_round()
    return {"ok": True, "round_started": started}


@router.post("/rounds/current/votes")
async def vote(payload: VotePayload, engine: GameEngine = Depends(get_game_engine)):
    engine.vote(payload.voter_id, payload.voted_for_id)
    return {"ok": True, "all_voted": engine.all_players_voted()}


@router.get("/rounds/current/votes/complete")
async def votes_complete(engine: GameEngine = Depends(get_game_engine)):
    return {"all_voted": engine.all_players_voted()}


@router.post("/rounds/current/reveal", response_model=RoundResult)
async def reveal_round(engine: GameEngine = Depends(get_game_engine)):
    return engine.reveal_round()


@router.get("/stats", response_model=Optional[GameStats])
async def game_stats(engine: GameEngine = Depends(get_game_engine)):
    return engine.get_game_stats()


@router.get("/categories", response_model=List[CategoryOption])
async def categories():
    """Catégories (douce -> épicée) avec libellé, emoji et suggestions."""
    return category_options()
