"""
Service: selection.py
Politique de tirage des confessions.

- `allowed_categories(heat)` : catégories autorisées pour le PROCHAIN tirage.
- `eligible_confessions(...)` : confessions non utilisées ET autorisées.
- `ConfessionPicker` : tirage uniforme via un `random.Random` injectable (seedable).
"""
from __future__ import annotations

import random
from typing import Iterable, List, Optional

from confession_box.models.game import HEAT_LEVEL_CATEGORIES, Confession, ConfessionCategory


def allowed_categories(heat_level: int) -> tuple[ConfessionCategory, ...]:
    level = min(max(int(heat_level), 1), max(HEAT_LEVEL_CATEGORIES))
    return HEAT_LEVEL_CATEGORIES[level]


def eligible_confessions(confessions: Iterable[Confession], heat_level: int) -> List[Confession]:
    allowed = allowed_categories(heat_level)
    return [c for c in confessions if not c.is_used and c.category in allowed]


class ConfessionPicker:
    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None) -> None:
        self.rng = rng or random.Random(seed)

    def pick(self, confessions: Iterable[Confession], heat_level: int) -> Optional[Confession]:
        """Retourne une confession éligible tirée uniformément (None si aucune)."""
        candidates = eligible_confessions(confessions, heat_level)
        if not candidates:
            return None
        return candidates[self.rng.randrange(len(candidates))]
