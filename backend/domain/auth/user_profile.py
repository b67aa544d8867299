from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from domain.watchlist import WatchlistItem


@dataclass(frozen=True)
class UserProfile:
    """Per-user remote document: account fields plus the synced watchlist."""

    email: Optional[str] = None
    display_name: Optional[str] = None
    created_at: Optional[str] = None
    watchlist: tuple[WatchlistItem, ...] = ()
