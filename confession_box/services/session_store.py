"""
Session store
=============

Adaptateur de persistance du blob unique de partie (`<DATA_DIR>/<STORAGE_KEY>.json`).

- `load()`  → `GameSession | None` ; un blob illisible est journalisé, supprimé,
  puis traité comme "aucune session" (jamais d'exception au démarrage).
- `save()`  → écrit le snapshot complet ; un échec IO lève `PersistenceError`.
- `clear()` → efface le blob.

Le store ne connaît rien des règles : il sérialise/désérialise `GameSession`.
"""
from __future__ import annotations

import logging
from pathlib import Path
from threading import RLock
from typing import Optional

import orjson
from pydantic import ValidationError as ModelValidationError

from confession_box.config.settings import settings
from confession_box.models.game import GameSession
from .errors import PersistenceError
from .io_utils import delete_json, read_json, write_json

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, data_dir: Optional[str | Path] = None, storage_key: Optional[str] = None) -> None:
        self.data_dir = Path(data_dir or settings.DATA_DIR)
        self.storage_key = storage_key or settings.STORAGE_KEY
        self._lock = RLock()

    @property
    def path(self) -> Path:
        return self.data_dir / f"{self.storage_key}.json"

    def load(self) -> Optional[GameSession]:
        """Recharge la session persistée (None si absente ou corrompue)."""
        with self._lock:
            try:
                raw = read_json(self.path)
                if raw is None:
                    return None
                return GameSession.model_validate(raw)
            except (orjson.JSONDecodeError, ModelValidationError, OSError):
                logger.error(
                    "Discarding unreadable session blob",
                    exc_info=True,
                    extra={"storage_path": str(self.path)},
                )
                self._discard()
                return None

    def save(self, session: GameSession) -> None:
        """Persiste le snapshot complet."""
        with self._lock:
            try:
                write_json(self.path, session.model_dump(mode="json"))
            except (OSError, TypeError) as exc:
                logger.error(
                    "Session blob write failed",
                    exc_info=True,
                    extra={"storage_path": str(self.path), "session_id": session.id},
                )
                raise PersistenceError("Impossible d'enregistrer la partie") from exc

    def clear(self) -> None:
        with self._lock:
            try:
                delete_json(self.path)
            except OSError as exc:
                logger.error("Session blob delete failed", exc_info=True, extra={"storage_path": str(self.path)})
                raise PersistenceError("Impossible d'effacer la partie") from exc

    def _discard(self) -> None:
        try:
            delete_json(self.path)
        except OSError:
            logger.warning("Could not delete corrupt session blob", extra={"storage_path": str(self.path)})
