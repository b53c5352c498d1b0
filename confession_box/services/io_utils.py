"""
Utilitaires IO JSON (rapides) basés sur orjson.
- read_json(Path)  → Any | None (None si fichier manquant)
- write_json(Path, data) → écrit en binaire via un fichier temporaire puis remplacement
- delete_json(Path) → supprime le fichier s'il existe

Attention:
- orjson renvoie/attend des bytes; on lit/écrit en mode binaire.
- read_json laisse remonter `orjson.JSONDecodeError` : à l'appelant de décider.
"""
import os
import orjson as json
from pathlib import Path
from typing import Any


def read_json(path: Path) -> Any:
    """Lit un fichier JSON (ou None s'il n'existe pas)."""
    if not path.exists():
        return None
    with path.open("rb") as f:
        return json.loads(f.read())


def write_json(path: Path, data: Any) -> None:
    """Écrit un fichier JSON sans jamais laisser de fichier à moitié écrit."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        with tmp.open("wb") as f:
            f.write(json.dumps(data))
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def delete_json(path: Path) -> None:
    """Supprime le fichier JSON (silencieux s'il est absent)."""
    path.unlink(missing_ok=True)
