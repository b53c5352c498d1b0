"""
Service: game_engine.py
Rôle:
- Détenir l'unique session de partie "vivante" et exposer toutes ses mutations
  (roster, confessions, phases, manches, votes, révélation).
- Persister puis publier le nouveau snapshot à chaque mutation.

Cycle de vie:
- setup → confessions → playing → finished (jamais de retour arrière).
- Une manche = une confession tirée, des votes anonymes, une révélation.
- Le heat level monte de 1 toutes les `ROUNDS_PER_HEAT_LEVEL` manches terminées.

Atomicité:
- Chaque mutation travaille sur une copie profonde de la session. La copie n'est
  installée (et publiée) qu'après validation + écriture réussie du blob : un appel
  en échec laisse la session exactement dans son état précédent.

API exposée aux routes:
- ENGINE.create_new_game(), add_player(), remove_player(), start_confessions()
- ENGINE.add_confession(), get_player_confessions(), all_players_have_confessions()
- ENGINE.start_game(), next_round(), vote(), all_players_voted(), reveal_round()
- ENGINE.get_game_stats(), clear_game_data()
- ENGINE.snapshot(), subscribe(listener)
"""
from __future__ import annotations

import logging
import random
from collections import Counter
from contextlib import contextmanager
from threading import RLock
from typing import Callable, Iterator, List, Optional, Type
from uuid import uuid4

from confession_box.config.settings import Settings, settings
from confession_box.models.game import (
    HEAT_LEVEL_CATEGORIES,
    PLAYER_AVATARS,
    PLAYER_COLORS,
    Confession,
    ConfessionCategory,
    GameSession,
    GameStats,
    GameStatus,
    Player,
    Round,
    STATUS_ORDER,
    RoundResult,
    VoteResult,
)
from .errors import (
    CapacityError,
    DuplicateNameError,
    DuplicateVoteError,
    GameError,
    NotFoundError,
    SelfVoteError,
    StateError,
    ValidationError,
)
from .selection import ConfessionPicker
from .session_store import SessionStore
from .stats import compute_game_stats

logger = logging.getLogger(__name__)

SessionListener = Callable[[Optional[GameSession]], None]


def _has_started(status: GameStatus) -> bool:
    return STATUS_ORDER.index(status) >= STATUS_ORDER.index(GameStatus.PLAYING)


def _new_id() -> str:
    return uuid4().hex


def _reflow_palette(players: List[Player]) -> None:
    """Réattribue couleur/avatar selon la position dans le roster."""
    for index, player in enumerate(players):
        player.color = PLAYER_COLORS[index % len(PLAYER_COLORS)]
        player.avatar = PLAYER_AVATARS[index % len(PLAYER_AVATARS)]


class GameEngine:
    def __init__(
        self,
        store: SessionStore,
        *,
        rng: Optional[random.Random] = None,
        config: Settings = settings,
        autoload: bool = True,
    ) -> None:
        self.store = store
        self.config = config
        self.picker = ConfessionPicker(rng=rng, seed=config.RANDOM_SEED)
        self._max_heat = min(config.MAX_HEAT_LEVEL, max(HEAT_LEVEL_CATEGORIES))
        self._lock = RLock()
        self._listeners: List[SessionListener] = []
        self._session: Optional[GameSession] = store.load() if autoload else None

    # -----------------------------
    # Snapshot / abonnements
    # -----------------------------
    def snapshot(self) -> Optional[GameSession]:
        """Copie du snapshot courant (None si aucune partie)."""
        with self._lock:
            return self._session.model_copy(deep=True) if self._session else None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Enregistre un listener appelé après chaque mutation. Retourne la désinscription."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self, session: Optional[GameSession]) -> None:
        for listener in list(self._listeners):
            try:
                listener(session.model_copy(deep=True) if session else None)
            except Exception:
                logger.exception("Session listener failed", extra={"listener": repr(listener)})

    def _commit(self, session: GameSession) -> None:
        self.store.save(session)
        self._session = session
        self._publish(session)

    @contextmanager
    def _mutation(self, missing: Type[GameError] = ValidationError) -> Iterator[GameSession]:
        """Fournit une copie de travail; elle n'est installée que si le bloc aboutit."""
        with self._lock:
            if self._session is None:
                raise missing("Aucune partie en cours")
            working = self._session.model_copy(deep=True)
            yield working
            self._commit(working)

    # -----------------------------
    # Cycle de vie de la session
    # -----------------------------
    def create_new_game(self) -> str:
        """Remplace toute partie existante par une session vierge."""
        session = GameSession(id=_new_id())
        with self._lock:
            self._commit(session)
        logger.info("New game created", extra={"session_id": session.id})
        return session.id

    def clear_game_data(self) -> None:
        """Efface le blob persisté et la session vivante."""
        with self._lock:
            self.store.clear()
            self._session = None
            self._publish(None)
        logger.info("Game data cleared")

    # -----------------------------
    # Roster
    # -----------------------------
    def add_player(self, name: str) -> Player:
        cfg = self.config
        with self._mutation() as session:
            if len(session.players) >= cfg.MAX_PLAYERS:
                raise CapacityError(f"Maximum de {cfg.MAX_PLAYERS} joueurs atteint")

            clean = (name or "").strip()
            if not cfg.NAME_MIN_LENGTH <= len(clean) <= cfg.NAME_MAX_LENGTH:
                raise ValidationError(
                    f"Le nom doit faire entre {cfg.NAME_MIN_LENGTH} et {cfg.NAME_MAX_LENGTH} caractères"
                )
            if any(p.name.casefold() == clean.casefold() for p in session.players):
                raise DuplicateNameError("Ce nom est déjà pris")

            slot = len(session.players)
            player = Player(
                id=_new_id(),
                name=clean,
                color=PLAYER_COLORS[slot % len(PLAYER_COLORS)],
                avatar=PLAYER_AVATARS[slot % len(PLAYER_AVATARS)],
            )
            session.players.append(player)

        logger.info("Player added", extra={"player_id": player.id, "roster_size": slot + 1})
        return player.model_copy()

    def remove_player(self, player_id: str) -> None:
        """Retire un joueur (no-op si absent). Ses confessions restent dans le pool."""
        with self._lock:
            if self._session is None or self._session.find_player(player_id) is None:
                return
            with self._mutation() as session:
                session.players = [p for p in session.players if p.id != player_id]
                _reflow_palette(session.players)

                current = session.current_round
                if current is not None:
                    if current.revealed:
                        # résultat figé : on retire seulement le votant
                        current.votes = {v: t for v, t in current.votes.items() if v != player_id}
                        current.correct_guesses = [v for v in current.correct_guesses if v != player_id]
                    else:
                        current.votes = {
                            voter: target
                            for voter, target in current.votes.items()
                            if voter != player_id and target != player_id
                        }
        logger.info("Player removed", extra={"player_id": player_id})

    def start_confessions(self) -> None:
        with self._mutation() as session:
            if _has_started(session.status):
                raise StateError("La partie a déjà commencé")
            if len(session.players) < self.config.MIN_PLAYERS:
                raise ValidationError(f"Minimum de {self.config.MIN_PLAYERS} joueurs nécessaire")
            session.status = GameStatus.CONFESSIONS

    # -----------------------------
    # Confessions
    # -----------------------------
    def add_confession(self, player_id: str, text: str, category: ConfessionCategory | str) -> Confession:
        cfg = self.config
        with self._mutation() as session:
            clean = (text or "").strip()
            if not cfg.CONFESSION_MIN_LENGTH <= len(clean) <= cfg.CONFESSION_MAX_LENGTH:
                raise ValidationError(
                    f"La confession doit faire entre {cfg.CONFESSION_MIN_LENGTH} "
                    f"et {cfg.CONFESSION_MAX_LENGTH} caractères"
                )
            try:
                kind = ConfessionCategory(category)
            except ValueError:
                raise ValidationError(f"Catégorie inconnue: {category}") from None
            if session.find_player(player_id) is None:
                raise NotFoundError("Joueur introuvable")

            confession = Confession(id=_new_id(), player_id=player_id, text=clean, category=kind)
            session.confessions.append(confession)

        logger.debug(
            "Confession added",
            extra={"player_id": player_id, "category": kind.value, "confession_id": confession.id},
        )
        return confession.model_copy()

    def get_player_confessions(self, player_id: str) -> List[Confession]:
        with self._lock:
            if self._session is None:
                return []
            return [c.model_copy() for c in self._session.confessions if c.player_id == player_id]

    def _has_all_confessions(self, session: GameSession) -> bool:
        per_player = Counter(c.player_id for c in session.confessions)
        minimum = self.config.MIN_CONFESSIONS_PER_PLAYER
        return all(per_player[p.id] >= minimum for p in session.players)

    def all_players_have_confessions(self) -> bool:
        with self._lock:
            if self._session is None:
                return False
            return self._has_all_confessions(self._session)

    # -----------------------------
    # Manches
    # -----------------------------
    def start_game(self) -> bool:
        """Passe en `playing` et ouvre la première manche dans la même mutation."""
        with self._mutation() as session:
            if _has_started(session.status):
                raise StateError("La partie a déjà commencé")
            if len(session.players) < self.config.MIN_PLAYERS:
                raise ValidationError(f"Minimum de {self.config.MIN_PLAYERS} joueurs nécessaire")
            if not self._has_all_confessions(session):
                raise ValidationError("Tous les joueurs n'ont pas écrit leurs confessions")
            session.status = GameStatus.PLAYING
            started = self._advance(session)

        logger.info("Game started", extra={"session_id": session.id, "round_started": started})
        return started

    def next_round(self) -> bool:
        """Archive la manche révélée puis tire la suivante. False si la partie est terminée."""
        with self._lock:
            if self._session is None or self._session.status == GameStatus.FINISHED:
                return False
            if self._session.status != GameStatus.PLAYING:
                raise StateError("La partie n'a pas commencé")
            with self._mutation() as session:
                started = self._advance(session)
        return started

    def _advance(self, session: GameSession) -> bool:
        current = session.current_round
        if current is not None:
            if current.revealed:
                session.completed_rounds.append(current)
                done = len(session.completed_rounds)
                if done % self.config.ROUNDS_PER_HEAT_LEVEL == 0:
                    session.heat_level = min(self._max_heat, session.heat_level + 1)
            else:
                logger.warning(
                    "Discarding unrevealed round",
                    extra={"session_id": session.id, "confession_id": current.confession.id},
                )
            session.current_round = None

        picked = self.picker.pick(session.confessions, session.heat_level)
        if picked is None:
            session.status = GameStatus.FINISHED
            logger.info(
                "No eligible confession left, game finished",
                extra={"session_id": session.id, "completed_rounds": len(session.completed_rounds)},
            )
            return False

        picked.is_used = True
        session.current_round = Round(confession=picked.model_copy())
        logger.debug(
            "Round opened",
            extra={"session_id": session.id, "confession_id": picked.id, "heat_level": session.heat_level},
        )
        return True

    # -----------------------------
    # Votes / révélation
    # -----------------------------
    def vote(self, voter_id: str, voted_for_id: str) -> None:
        with self._mutation(missing=StateError) as session:
            current = session.current_round
            if current is None:
                raise StateError("Aucune manche en cours")
            if current.revealed:
                raise StateError("La manche a déjà été révélée")
            if session.find_player(voter_id) is None:
                raise NotFoundError("Joueur introuvable")
            if voter_id in current.votes:
                raise DuplicateVoteError("Ce joueur a déjà voté")
            if session.find_player(voted_for_id) is None:
                raise NotFoundError("Joueur visé introuvable")
            if voter_id == voted_for_id:
                raise SelfVoteError("Impossible de voter pour soi-même")
            current.votes[voter_id] = voted_for_id

    def all_players_voted(self) -> bool:
        with self._lock:
            session = self._session
            if session is None or session.current_round is None:
                return False
            votes = session.current_round.votes
            return all(p.id in votes for p in session.players)

    def reveal_round(self) -> RoundResult:
        """
        Révèle la manche courante.
        - Premier appel: marque `revealed`, enregistre les bons devineurs, persiste.
        - Appels suivants: reconstruisent le même résultat sans rien modifier.
        """
        with self._lock:
            current = self._session.current_round if self._session else None
            if current is None:
                raise StateError("Aucune manche en cours")
            if current.revealed:
                return self._build_result(self._session, current)

            with self._mutation(missing=StateError) as session:
                current = session.current_round
                author_id = current.confession.player_id
                current.revealed = True
                current.correct_guesses = [
                    voter for voter, target in current.votes.items()
                    if voter != author_id and target == author_id
                ]
                result = self._build_result(session, current)

        logger.info(
            "Round revealed",
            extra={
                "session_id": session.id,
                "confession_id": current.confession.id,
                "correct": len(result.correct_guessers),
                "wrong": len(result.wrong_guessers),
            },
        )
        return result

    @staticmethod
    def _build_result(session: GameSession, current: Round) -> RoundResult:
        author_id = current.confession.player_id
        counts = Counter(current.votes.values())

        tallies = [
            VoteResult(player_id=p.id, player_name=p.name, votes=counts.get(p.id, 0), is_correct=False)
            for p in session.players
            if p.id != author_id
        ]

        correct: List[Player] = []
        wrong: List[Player] = []
        for voter_id in current.votes:
            # l'auteur vote comme les autres mais n'est pas évalué
            if voter_id == author_id:
                continue
            voter = session.find_player(voter_id)
            if voter is None:
                continue
            if voter_id in current.correct_guesses:
                correct.append(voter.model_copy())
            else:
                wrong.append(voter.model_copy())

        author = session.find_player(author_id)
        return RoundResult(
            confession=current.confession.model_copy(),
            actual_author=author.model_copy() if author else None,
            votes=tallies,
            vote_counts=dict(counts),
            correct_guessers=correct,
            wrong_guessers=wrong,
        )

    # -----------------------------
    # Statistiques
    # -----------------------------
    def get_game_stats(self) -> Optional[GameStats]:
        with self._lock:
            if self._session is None:
                return None
            return compute_game_stats(self._session)


# -----------------------------
# Singleton applicatif
# -----------------------------
_instance: Optional[GameEngine] = None
_instance_lock = RLock()


def get_game_engine() -> GameEngine:
    """Instance unique du moteur pour l'app (chargement paresseux du blob)."""
    global _instance
    with _instance_lock:
        if _instance is None:
            _instance = GameEngine(SessionStore())
        return _instance
