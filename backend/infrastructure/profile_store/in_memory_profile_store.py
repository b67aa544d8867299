from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from application.ports.remote_profile_store_port import RemoteProfileStorePort
from domain.auth import UserProfile
from domain.watchlist import WatchlistItem


class InMemoryProfileStore(RemoteProfileStorePort):
    """Profile documents kept in a dict, for dev/tests when Firestore is not configured."""

    def __init__(self) -> None:
        self._by_user: dict[str, UserProfile] = {}

    async def get_profile(self, *, user_id: str) -> Optional[UserProfile]:
        return self._by_user.get(str(user_id))

    async def create_profile(self, *, user_id: str, profile: UserProfile) -> None:
        self._by_user[str(user_id)] = replace(profile, watchlist=tuple(profile.watchlist))

    async def set_watchlist(self, *, user_id: str, items: Sequence[WatchlistItem]) -> None:
        # Field-level merge: a missing document is created with only `watchlist`.
        current = self._by_user.get(str(user_id)) or UserProfile()
        self._by_user[str(user_id)] = replace(current, watchlist=tuple(items))

    async def close(self) -> None:
        return None
