from confession_box.models.game import (
    Confession,
    ConfessionCategory,
    GameSession,
    Player,
    Round,
)
from confession_box.services.stats import compute_game_stats


def _player(pid):
    return Player(id=pid, name=pid.upper(), color="#000000", avatar="🎭")


def _round(author, votes, correct):
    confession = Confession(
        id=f"c-{author}-{len(votes)}",
        player_id=author,
        text="Une confession assez longue",
        category=ConfessionCategory.FUNNY,
        is_used=True,
    )
    return Round(confession=confession, votes=votes, revealed=True, correct_guesses=correct)


def test_stats_without_rounds():
    session = GameSession(id="s", players=[_player("a"), _player("b")])
    stats = compute_game_stats(session)
    assert stats.total_rounds == 0
    assert stats.heat_level == 1
    assert [s.accuracy for s in stats.player_stats] == [0.0, 0.0]


def test_stats_accuracy_and_exposure():
    players = [_player(pid) for pid in ("a", "b", "c", "d")]
    rounds = [
        _round("b", {"a": "b", "c": "b", "d": "a", "b": "c"}, ["a", "c"]),
        _round("a", {"b": "c", "c": "a", "d": "a", "a": "b"}, ["c", "d"]),
    ]
    session = GameSession(id="s", players=players, completed_rounds=rounds, heat_level=2)

    stats = compute_game_stats(session)
    by_id = {s.player.id: s for s in stats.player_stats}

    assert stats.total_rounds == 2
    assert stats.heat_level == 2
    assert by_id["c"].correct_guesses == 2
    assert by_id["c"].accuracy == 100.0
    assert by_id["a"].correct_guesses == 1
    assert by_id["a"].accuracy == 50.0
    assert by_id["b"].correct_guesses == 0
    assert by_id["a"].confessions_revealed == 1
    assert by_id["b"].confessions_revealed == 1
    assert by_id["d"].confessions_revealed == 0


def test_current_round_is_not_counted():
    players = [_player("a"), _player("b")]
    current = _round("a", {"b": "a"}, ["b"])
    session = GameSession(id="s", players=players, current_round=current)
    stats = compute_game_stats(session)
    assert stats.total_rounds == 0
    assert all(s.correct_guesses == 0 for s in stats.player_stats)
