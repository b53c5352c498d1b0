"""
WebSocket endpoint.

- /ws/game : flux en lecture seule du snapshot de partie.
  * `session_state` à la connexion (payload null si aucune partie),
  * `session_update` après chaque mutation du moteur,
  * `{"type":"ping"}` côté client -> `{"type":"pong"}`.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from confession_box.models.game import GameSession
from confession_box.services.game_engine import GameEngine, get_game_engine

router = APIRouter()
logger = logging.getLogger(__name__)


def _dump(session: Optional[GameSession]) -> Optional[dict]:
    return session.model_dump(mode="json") if session else None


@router.websocket("/ws/game")
async def websocket_game_stream(ws: WebSocket, engine: GameEngine = Depends(get_game_engine)):
    await ws.accept()
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    # le moteur peut publier depuis un autre thread (routes sync, tests)
    def _on_change(session: Optional[GameSession]) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, session)

    unsubscribe = engine.subscribe(_on_change)

    async def _send_json(payload: dict):
        text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
        await ws.send_text(text)

    async def _pump():
        while True:
            session = await queue.get()
            await _send_json({"type": "session_update", "payload": _dump(session)})

    pump: Optional[asyncio.Task] = None
    try:
        await _send_json({"type": "session_state", "payload": _dump(engine.snapshot())})
        pump = asyncio.create_task(_pump())
        while True:
            raw = await ws.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                # Message non JSON -> ignore
                continue
            if isinstance(msg, dict) and msg.get("type") == "ping":
                await _send_json({"type": "pong"})
    except WebSocketDisconnect:
        pass
    finally:
        unsubscribe()
        if pump is not None:
            pump.cancel()
            try:
                await pump
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.warning("Snapshot pump stopped with an error", exc_info=True)
        try:
            await ws.close()
        except RuntimeError:
            pass
