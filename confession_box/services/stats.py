"""
Service: stats.py
Agrégation des statistiques de fin de partie (lecture seule, aucune mutation).

Pour chaque joueur du roster courant, sur les manches terminées :
- correct_guesses : manches où il a trouvé l'auteur,
- confessions_revealed : manches où sa propre confession a été tirée,
- accuracy : correct_guesses / total_rounds * 100 (0 sans manche terminée).
"""
from __future__ import annotations

from confession_box.models.game import GameSession, GameStats, PlayerStats


def compute_game_stats(session: GameSession) -> GameStats:
    rounds = session.completed_rounds
    total_rounds = len(rounds)

    player_stats = []
    for player in session.players:
        correct = sum(1 for r in rounds if player.id in r.correct_guesses)
        revealed = sum(1 for r in rounds if r.confession.player_id == player.id)
        accuracy = (correct / total_rounds) * 100 if total_rounds > 0 else 0.0
        player_stats.append(
            PlayerStats(
                player=player.model_copy(),
                correct_guesses=correct,
                confessions_revealed=revealed,
                accuracy=accuracy,
            )
        )

    return GameStats(
        total_rounds=total_rounds,
        heat_level=session.heat_level,
        player_stats=player_stats,
    )
