"""
Configuration de l'application (Settings)
=========================================

Rôle
----
- Centraliser les paramètres de l'app (nom, host/port, chemins, règles du jeu…).
- Les valeurs par défaut conviennent pour un usage local (une seule tablette/PC).
- Les variables peuvent être surchargées via un fichier `.env` ou l'environnement.

Intégrations
------------
- `pydantic-settings` charge automatiquement les variables d'env et `.env`.
- Le moteur et les routes importent `from confession_box.config.settings import settings`.

Exemples de `.env`
------------------
APP_NAME="Confession Box (Soirée)"
PORT=8080
DATA_DIR="/var/opt/confession_box/data"
RANDOM_SEED=42
LOG_LEVEL="DEBUG"
"""
from typing import List, Optional
import os

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Nom du service (apparaît dans /health)
    APP_NAME: str = "Confession Box"
    # Bind réseau (FastAPI / Uvicorn) : local uniquement par défaut
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Répertoire du blob persisté. Par défaut: <repo>/confession_box/data
    DATA_DIR: str = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")
    # Clé unique du blob de session (=> <DATA_DIR>/<STORAGE_KEY>.json)
    STORAGE_KEY: str = "confession_box_game"

    # Règles du roster
    MAX_PLAYERS: int = 8
    MIN_PLAYERS: int = 4
    NAME_MIN_LENGTH: int = 2
    NAME_MAX_LENGTH: int = 20

    # Règles des confessions
    MIN_CONFESSIONS_PER_PLAYER: int = 3
    CONFESSION_MIN_LENGTH: int = 10
    CONFESSION_MAX_LENGTH: int = 200

    # Escalade du heat level : +1 toutes les N manches terminées
    ROUNDS_PER_HEAT_LEVEL: int = 3
    MAX_HEAT_LEVEL: int = 5

    # Graine optionnelle du tirage (parties reproductibles en démo/tests)
    RANDOM_SEED: Optional[int] = None

    LOG_LEVEL: str = "INFO"

    # Fronts autorisés (CORS)
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:8100",
        "http://127.0.0.1:8100",
    ]

    # Paramétrage pydantic-settings :
    # - lit le fichier .env (UTF-8) si présent
    # - ignore les clés supplémentaires pour éviter les erreurs
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


# Instance unique importable partout : `settings`
settings = Settings()
