from __future__ import annotations

from typing import Optional, Protocol, Sequence

from domain.auth import UserProfile
from domain.watchlist import WatchlistItem


class RemoteStoreError(RuntimeError):
    """Remote profile store request failed (network, auth or server side)."""


class RemoteProfileStorePort(Protocol):
    async def get_profile(self, *, user_id: str) -> Optional[UserProfile]:
        """Return the user's document, or None when it does not exist."""
        ...

    async def create_profile(self, *, user_id: str, profile: UserProfile) -> None:
        """Write the whole document, replacing any existing one."""
        ...

    async def set_watchlist(self, *, user_id: str, items: Sequence[WatchlistItem]) -> None:
        """Overwrite only the `watchlist` field; other document fields stay as they are."""
        ...

    async def close(self) -> None:
        ...
