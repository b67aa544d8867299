from __future__ import annotations

import logging
from functools import lru_cache

from application.app_context import AppContext
from config.settings import LOG_LEVEL, PROFILE_CREATE_TIMEOUT_S, WATCHLIST_AUTO_SYNC


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or LOG_LEVEL or "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@lru_cache(maxsize=1)
def get_app_context() -> AppContext:
    """Process-wide app context built from settings (not started)."""
    from infrastructure.bootstrap import build_app_context

    return build_app_context(
        auto_sync=WATCHLIST_AUTO_SYNC,
        profile_create_timeout_s=PROFILE_CREATE_TIMEOUT_S,
    )
