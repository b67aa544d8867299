import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# The repo-root .env is the primary dev config source and must win over stale
# shell exports ("I changed .env but nothing happened").
load_dotenv(override=True)


def _get_env_int(key: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be an integer, got {raw}") from exc


def _get_env_float(key: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be a float, got {raw}") from exc


def _get_env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    return raw.lower() in {"1", "true", "yes", "y", "on"}


# ===== Paths =====
#
# NOTE:
# - All backend code lives under `<repo>/backend/`.
# - Runtime artifacts (local storage file) live under `<repo>/files/`.

_BACKEND_DIR = Path(__file__).resolve().parents[2]  # backend/

if _BACKEND_DIR.name == "backend":
    PROJECT_ROOT = _BACKEND_DIR.parent
else:
    PROJECT_ROOT = Path.cwd()

RUNTIME_ROOT = Path(os.getenv("RUNTIME_ROOT", PROJECT_ROOT / "files")).expanduser()


# ===== Local storage (watchlist persistence) =====

# file | memory
WATCHLIST_STORAGE_PROVIDER = os.getenv("WATCHLIST_STORAGE_PROVIDER", "file").strip().lower()
LOCAL_STORAGE_PATH = Path(
    os.getenv("LOCAL_STORAGE_PATH", RUNTIME_ROOT / "local_storage.json")
).expanduser()
# Persisted layout key; changing it orphans existing watchlists.
WATCHLIST_STORAGE_KEY = os.getenv("WATCHLIST_STORAGE_KEY", "optix-watchlist").strip() or "optix-watchlist"


# ===== Firebase (identity + remote profile documents) =====

# firebase | memory
IDENTITY_PROVIDER = os.getenv("IDENTITY_PROVIDER", "firebase").strip().lower()
# firestore | memory
PROFILE_STORE_PROVIDER = os.getenv("PROFILE_STORE_PROVIDER", "firestore").strip().lower()

FIREBASE_API_KEY = os.getenv("FIREBASE_API_KEY", "").strip()
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "").strip()
FIREBASE_AUTH_BASE_URL = (
    os.getenv("FIREBASE_AUTH_BASE_URL", "https://identitytoolkit.googleapis.com/v1").strip()
    or "https://identitytoolkit.googleapis.com/v1"
)
FIREBASE_TOKEN_BASE_URL = (
    os.getenv("FIREBASE_TOKEN_BASE_URL", "https://securetoken.googleapis.com/v1").strip()
    or "https://securetoken.googleapis.com/v1"
)
FIRESTORE_BASE_URL = (
    os.getenv("FIRESTORE_BASE_URL", "https://firestore.googleapis.com/v1").strip()
    or "https://firestore.googleapis.com/v1"
)
FIRESTORE_DATABASE = os.getenv("FIRESTORE_DATABASE", "(default)").strip() or "(default)"
FIRESTORE_USERS_COLLECTION = os.getenv("FIRESTORE_USERS_COLLECTION", "users").strip() or "users"
FIREBASE_TIMEOUT_S = _get_env_float("FIREBASE_TIMEOUT_S", 10.0) or 10.0


# ===== TMDB (media catalog) =====

TMDB_BASE_URL = os.getenv("TMDB_BASE_URL", "https://api.themoviedb.org/3").strip()
TMDB_IMAGE_BASE_URL = os.getenv("TMDB_IMAGE_BASE_URL", "https://image.tmdb.org/t/p").strip()
TMDB_API_TOKEN = os.getenv("TMDB_API_TOKEN", "").strip()
TMDB_API_KEY = os.getenv("TMDB_API_KEY", "").strip()
TMDB_LANGUAGE = os.getenv("TMDB_LANGUAGE", "en-US").strip() or "en-US"
TMDB_TIMEOUT_S = _get_env_float("TMDB_TIMEOUT_S", 5.0) or 5.0
