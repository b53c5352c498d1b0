"""
Service: errors.py
Erreurs typées levées par le moteur de partie.

- Toutes les erreurs de règles dérivent de `GameError` (ValueError) et portent un
  `code` stable, repris tel quel dans les réponses HTTP (`detail.code`).
- `PersistenceError` signale un échec d'écriture du blob : la mutation est annulée.
"""


class GameError(ValueError):
    """Règle du jeu non respectée. La session reste inchangée."""

    code = "game_error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class ValidationError(GameError):
    code = "validation_error"


class CapacityError(GameError):
    code = "capacity_error"


class DuplicateNameError(GameError):
    code = "duplicate_name"


class DuplicateVoteError(GameError):
    code = "duplicate_vote"


class SelfVoteError(GameError):
    code = "self_vote"


class NotFoundError(GameError):
    code = "not_found"


class StateError(GameError):
    code = "state_error"


class PersistenceError(RuntimeError):
    """Échec d'écriture/suppression du blob de session."""

    code = "persistence_error"
