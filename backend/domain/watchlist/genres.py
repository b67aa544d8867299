from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

_DEFAULT_GENRES_PATH = Path(__file__).resolve().parent / "genres.yaml"
_TAXONOMY_CACHE: "GenreTaxonomy | None" = None
GENRE_TAXONOMY_PATH_ENV = "GENRE_TAXONOMY_PATH"


@dataclass(frozen=True)
class GenreTaxonomy:
    """Static genre id -> name map (owned by the metadata provider, not by us)."""

    names: Dict[int, str] = field(default_factory=dict)

    def name(self, genre_id: int) -> Optional[str]:
        return self.names.get(int(genre_id))

    def __contains__(self, genre_id: object) -> bool:
        try:
            return int(genre_id) in self.names  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False


def _load_raw(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return data if isinstance(data, dict) else {}


def _normalize(data: Dict[str, Any]) -> Dict[int, str]:
    names: Dict[int, str] = {}
    # Movie names win when both sections define the same id.
    for section in ("series", "movie"):
        raw = data.get(section, {})
        if not isinstance(raw, dict):
            continue
        for key, value in raw.items():
            try:
                genre_id = int(key)
            except (TypeError, ValueError):
                continue
            if isinstance(value, str) and value.strip():
                names[genre_id] = value.strip()
    return names


def _resolve_path(path: Path | None) -> Path:
    if path is not None:
        return path
    env_path = os.getenv(GENRE_TAXONOMY_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return _DEFAULT_GENRES_PATH


def load_genre_taxonomy(path: Path | None = None) -> GenreTaxonomy:
    return GenreTaxonomy(names=_normalize(_load_raw(_resolve_path(path))))


def get_genre_taxonomy(reload: bool = False, path: Path | None = None) -> GenreTaxonomy:
    global _TAXONOMY_CACHE
    if _TAXONOMY_CACHE is None or reload:
        _TAXONOMY_CACHE = load_genre_taxonomy(path)
    return _TAXONOMY_CACHE


__all__ = [
    "GenreTaxonomy",
    "load_genre_taxonomy",
    "get_genre_taxonomy",
    "GENRE_TAXONOMY_PATH_ENV",
]
