import random

import pytest

from confession_box.models.game import ConfessionCategory
from confession_box.services.game_engine import GameEngine
from confession_box.services.session_store import SessionStore

NAMES = ("Alice", "Bruno", "Chloé", "Dario")


@pytest.fixture
def store(tmp_path):
    return SessionStore(data_dir=tmp_path, storage_key="test_game")


@pytest.fixture
def engine(store):
    return GameEngine(store, rng=random.Random(7))


@pytest.fixture
def game(engine):
    """Partie créée avec 4 joueurs, encore en setup."""
    engine.create_new_game()
    players = [engine.add_player(name) for name in NAMES]
    return engine, players


def write_confessions(engine, player, count=3, category=ConfessionCategory.FUNNY):
    return [
        engine.add_confession(player.id, f"Confession n°{i} de {player.name}", category)
        for i in range(count)
    ]
