import os

from dotenv import load_dotenv

# Service-side settings: feature switches for the application layer.
# Infrastructure env/path settings live under `backend/infrastructure/config/`.
load_dotenv(override=True)


def _get_env_bool(key: str, default: bool) -> bool:
    """Read a boolean env var; accepts true/false/1/0/yes/no/on/off."""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    return raw.lower() in {"1", "true", "y", "yes", "on"}


def _get_env_float(key: str, default: float) -> float:
    """Read a float env var, falling back to the default when unset."""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be a float, got {raw}") from exc


# ===== Logging =====

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

# ===== Watchlist sync =====
#
# Off by default: nothing wires remote pull/push to sign-in unless asked.
# When on: sign-in pulls and overwrites the local watchlist, and each local
# change while signed in pushes the whole list (last writer wins).
WATCHLIST_AUTO_SYNC = _get_env_bool("WATCHLIST_AUTO_SYNC", False)

# ===== Accounts =====

# Upper bound for writing the profile document during sign-up. The account
# itself is kept even when this times out.
PROFILE_CREATE_TIMEOUT_S = _get_env_float("PROFILE_CREATE_TIMEOUT_S", 5.0) or 5.0
