"""
Models / game.py
Rôle:
- Définir les entités typées d'une partie (joueur, confession, manche, session).
- Porter les tables fixes du jeu (palettes, catégories par heat level, suggestions).

Notes:
- Les modèles n'ont pas de comportement : toute règle vit dans `GameEngine`.
- `created_at` est sérialisé en ISO-8601 (`model_dump(mode="json")`) et réhydraté
  en `datetime` par pydantic au chargement.
- Les catégories sont ordonnées de la plus douce à la plus épicée.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ConfessionCategory(str, Enum):
    FUNNY = "funny"
    CHILDISH = "childish"
    EMBARRASSING = "embarrassing"
    ROMANTIC = "romantic"
    SPICY = "spicy"


class GameStatus(str, Enum):
    SETUP = "setup"
    CONFESSIONS = "confessions"
    PLAYING = "playing"
    FINISHED = "finished"


# Ordre de progression des statuts (jamais de retour arrière)
STATUS_ORDER: List[GameStatus] = [
    GameStatus.SETUP,
    GameStatus.CONFESSIONS,
    GameStatus.PLAYING,
    GameStatus.FINISHED,
]


class Player(BaseModel):
    """Joueur du roster courant. `color`/`avatar` suivent sa position."""
    id: str
    name: str
    color: str
    avatar: str


class Confession(BaseModel):
    """Texte anonyme écrit par `player_id` (qui peut ne plus être dans le roster)."""
    id: str
    player_id: str
    text: str
    category: ConfessionCategory
    is_used: bool = False


class Round(BaseModel):
    """Une confession tirée, ses votes (votant -> auteur supposé) et son résultat."""
    confession: Confession
    votes: Dict[str, str] = Field(default_factory=dict)
    revealed: bool = False
    correct_guesses: List[str] = Field(default_factory=list)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GameSession(BaseModel):
    """Snapshot complet de la partie; remplacé en bloc à chaque mutation."""
    id: str
    players: List[Player] = Field(default_factory=list)
    confessions: List[Confession] = Field(default_factory=list)
    current_round: Optional[Round] = None
    completed_rounds: List[Round] = Field(default_factory=list)
    heat_level: int = Field(default=1, ge=1, le=5)
    created_at: datetime = Field(default_factory=_utcnow)
    status: GameStatus = GameStatus.SETUP

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None


# -----------------------------
# Résultats (lecture seule)
# -----------------------------
class VoteResult(BaseModel):
    player_id: str
    player_name: str
    votes: int = 0
    is_correct: bool = False


class RoundResult(BaseModel):
    """
    Bilan d'une révélation.
    - `votes`: décompte par candidat, auteur exclu.
    - `vote_counts`: décompte brut par joueur visé (auteur compris).
    - `actual_author` vaut None si l'auteur a quitté la partie.
    """
    confession: Confession
    actual_author: Optional[Player] = None
    votes: List[VoteResult] = Field(default_factory=list)
    vote_counts: Dict[str, int] = Field(default_factory=dict)
    correct_guessers: List[Player] = Field(default_factory=list)
    wrong_guessers: List[Player] = Field(default_factory=list)


class PlayerStats(BaseModel):
    player: Player
    correct_guesses: int = 0
    confessions_revealed: int = 0
    accuracy: float = 0.0


class GameStats(BaseModel):
    total_rounds: int = 0
    heat_level: int = 1
    player_stats: List[PlayerStats] = Field(default_factory=list)


class CategoryOption(BaseModel):
    """Entrée du sélecteur de catégorie côté front."""
    value: ConfessionCategory
    label: str
    emoji: str
    suggestions: List[str] = Field(default_factory=list)


# -----------------------------
# Tables fixes
# -----------------------------
PLAYER_COLORS: List[str] = [
    "#6c5ce7", "#a29bfe", "#fd79a8", "#fdcb6e",
    "#e84393", "#00b894", "#e17055", "#74b9ff",
]

PLAYER_AVATARS: List[str] = [
    "🎭", "🎪", "🎨", "🎯", "🎲", "🎸", "🎺", "🎼",
]

_MILD = (ConfessionCategory.FUNNY, ConfessionCategory.CHILDISH)

HEAT_LEVEL_CATEGORIES: Dict[int, tuple] = {
    1: _MILD,
    2: _MILD,
    3: _MILD + (ConfessionCategory.EMBARRASSING,),
    4: _MILD + (ConfessionCategory.EMBARRASSING, ConfessionCategory.ROMANTIC),
    5: tuple(ConfessionCategory),
}

_CATEGORY_LABELS: Dict[ConfessionCategory, str] = {
    ConfessionCategory.FUNNY: "Drôle",
    ConfessionCategory.CHILDISH: "Enfantin",
    ConfessionCategory.EMBARRASSING: "Gênant",
    ConfessionCategory.ROMANTIC: "Romantique",
    ConfessionCategory.SPICY: "Épicé",
}

_CATEGORY_EMOJIS: Dict[ConfessionCategory, str] = {
    ConfessionCategory.FUNNY: "🤣",
    ConfessionCategory.CHILDISH: "🧸",
    ConfessionCategory.EMBARRASSING: "😳",
    ConfessionCategory.ROMANTIC: "💕",
    ConfessionCategory.SPICY: "🌶️",
}

CONFESSION_SUGGESTIONS: Dict[ConfessionCategory, List[str]] = {
    ConfessionCategory.FUNNY: [
        "J'ai tellement ri que j'ai dû changer de pantalon",
        "J'ai déjà parlé tout seul en public sans m'en rendre compte",
        "J'ai fait semblant de comprendre une blague que je n'avais pas comprise",
        "J'ai déjà dansé tout nu devant le miroir",
        "J'ai voulu impressionner quelqu'un et je me suis ridiculisé",
    ],
    ConfessionCategory.CHILDISH: [
        "Je dors encore avec une peluche",
        "J'ai déjà pleuré devant un dessin animé",
        "Je mange encore en cachette comme un enfant",
        "J'ai joué aux poupées ou aux petites voitures récemment",
        "J'ai encore peur du noir de temps en temps",
    ],
    ConfessionCategory.EMBARRASSING: [
        "Je me suis déjà tapé la honte devant mon crush",
        "Je suis déjà tombé en public de façon spectaculaire",
        "J'ai déjà envoyé un message à la mauvaise personne",
        "Je me suis déjà fait surprendre en train de faire un truc gênant",
        "J'ai menti et je me suis fait griller sur le moment",
    ],
    ConfessionCategory.ROMANTIC: [
        "J'ai écrit une lettre d'amour que je n'ai jamais envoyée",
        "J'ai déjà espionné un ex sur les réseaux sociaux",
        "J'ai fait semblant d'aller bien après une rupture",
        "Je suis tombé amoureux de quelqu'un d'inaccessible",
        "J'ai déjà eu un crush sur quelqu'un du groupe",
    ],
    ConfessionCategory.SPICY: [
        "J'ai déjà fait un rêve osé avec quelqu'un du groupe",
        "J'ai fait quelque chose que je n'ai jamais raconté à personne",
        "J'ai déjà menti sur mon expérience",
        "J'ai eu un rendez-vous qui a très mal tourné",
        "J'ai fait quelque chose dont j'ai eu honte après coup",
    ],
}


def category_label(category: ConfessionCategory) -> str:
    return _CATEGORY_LABELS[ConfessionCategory(category)]


def category_emoji(category: ConfessionCategory) -> str:
    return _CATEGORY_EMOJIS[ConfessionCategory(category)]


def category_options() -> List[CategoryOption]:
    """Liste ordonnée (douce -> épicée) pour le sélecteur de catégorie."""
    return [
        CategoryOption(
            value=category,
            label=category_label(category),
            emoji=category_emoji(category),
            suggestions=list(CONFESSION_SUGGESTIONS[category]),
        )
        for category in ConfessionCategory
    ]
