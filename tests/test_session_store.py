from datetime import datetime, timezone

import orjson
import pytest

from confession_box.models.game import (
    Confession,
    ConfessionCategory,
    GameSession,
    GameStatus,
    Player,
    Round,
)
from confession_box.services.errors import PersistenceError


def _session():
    players = [
        Player(id="p1", name="Alice", color="#6c5ce7", avatar="🎭"),
        Player(id="p2", name="Bruno", color="#a29bfe", avatar="🎪"),
    ]
    confession = Confession(
        id="c1", player_id="p1", text="J'ai déjà dansé devant le miroir",
        category=ConfessionCategory.FUNNY, is_used=True,
    )
    return GameSession(
        id="s1",
        players=players,
        confessions=[confession],
        current_round=Round(confession=confession, votes={"p2": "p1"}),
        heat_level=2,
        created_at=datetime(2026, 10, 19, 21, 30, 15, 123456, tzinfo=timezone.utc),
        status=GameStatus.PLAYING,
    )


def test_load_without_blob_returns_none(store):
    assert store.load() is None


def test_round_trip_preserves_session(store):
    session = _session()
    store.save(session)

    loaded = store.load()
    assert loaded == session
    assert loaded.created_at == session.created_at
    assert isinstance(loaded.created_at, datetime)


def test_blob_uses_iso_timestamp(store):
    store.save(_session())
    raw = orjson.loads(store.path.read_bytes())
    assert raw["created_at"].startswith("2026-10-19T21:30:15.123456")
    assert raw["status"] == "playing"
    assert raw["current_round"]["votes"] == {"p2": "p1"}


def test_corrupt_blob_is_discarded(store):
    store.path.parent.mkdir(parents=True, exist_ok=True)
    store.path.write_bytes(b"{not json")
    assert store.load() is None
    assert not store.path.exists()


def test_invalid_shape_is_discarded(store):
    store.path.parent.mkdir(parents=True, exist_ok=True)
    store.path.write_bytes(orjson.dumps({"id": "s1", "heat_level": 12}))
    assert store.load() is None
    assert not store.path.exists()


def test_clear_is_idempotent(store):
    store.save(_session())
    store.clear()
    store.clear()
    assert store.load() is None


def test_failed_write_leaves_no_temp_file(store):
    # un répertoire à la place du blob fait échouer le remplacement final
    store.path.mkdir(parents=True)
    with pytest.raises(PersistenceError):
        store.save(_session())
    assert store.path.is_dir()
    assert list(store.data_dir.iterdir()) == [store.path]
