from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Coroutine, Optional, Sequence

from application.auth.auth_state import AuthStateMirror
from application.ports.remote_profile_store_port import RemoteProfileStorePort
from application.watchlist.watchlist_store import WatchlistStore
from domain.auth import AuthState
from domain.watchlist import WatchlistItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteWatchlistResult:
    items: tuple[WatchlistItem, ...] = ()
    error: Optional[str] = None
    # False when the user has no remote document yet.
    found: bool = True


@dataclass(frozen=True)
class RemoteWriteResult:
    error: Optional[str] = None


class WatchlistSyncService:
    """Whole-array reconciliation between the local store and the user's remote document.

    Policy is last writer wins: a pull replaces the local collection, a push
    replaces the remote `watchlist` field. Nothing is merged and conflicts
    are not detected.

    With `auto_sync` on, `start()` wires it up:
    - signing in (or switching users) pulls and overwrites the local store;
    - every local mutation while signed in pushes the full collection
      (fire-and-forget, pushes applied in mutation order);
    - signing out leaves the local store as it is.
    """

    def __init__(
        self,
        *,
        store: WatchlistStore,
        profile_store: RemoteProfileStorePort,
        auth: Optional[AuthStateMirror] = None,
        auto_sync: bool = False,
    ) -> None:
        self._store = store
        self._profile_store = profile_store
        self._auth = auth
        self._auto_sync = bool(auto_sync)
        self._unsubscribers: list[Callable[[], None]] = []
        self._tasks: set[asyncio.Task] = set()
        self._push_lock = asyncio.Lock()
        self._applying_remote = False

    # ----- primitives -----

    async def pull_remote(self, user_id: str) -> RemoteWatchlistResult:
        try:
            profile = await self._profile_store.get_profile(user_id=str(user_id))
        except Exception as exc:
            logger.error("Get watchlist error user_id=%s: %s", user_id, exc)
            return RemoteWatchlistResult(items=(), error=str(exc) or exc.__class__.__name__)
        if profile is None:
            return RemoteWatchlistResult(items=(), found=False)
        return RemoteWatchlistResult(items=tuple(profile.watchlist))

    async def push_remote(self, user_id: str, items: Sequence[WatchlistItem]) -> RemoteWriteResult:
        try:
            await self._profile_store.set_watchlist(user_id=str(user_id), items=tuple(items))
        except Exception as exc:
            logger.error("Sync watchlist error user_id=%s: %s", user_id, exc)
            return RemoteWriteResult(error=str(exc) or exc.__class__.__name__)
        return RemoteWriteResult()

    # ----- store-level operations -----

    async def pull_into_store(self, user_id: str) -> RemoteWatchlistResult:
        """Pull and overwrite the local store.

        A failed pull, or a user with no remote document yet (fresh sign-up),
        leaves the local store untouched. So does a pull that finishes after
        the signed-in user has changed.
        """
        result = await self.pull_remote(user_id)
        if result.error is not None or not result.found:
            return result
        if self._auth is not None:
            current = self._auth.current_user
            if current is None or current.user_id != user_id:
                logger.info("stale watchlist pull dropped user_id=%s", user_id)
                return result
        self._applying_remote = True
        try:
            self._store.replace_all(result.items)
        finally:
            self._applying_remote = False
        logger.info("watchlist pulled user_id=%s items=%d", user_id, len(result.items))
        return result

    async def push_store(self, user_id: str) -> RemoteWriteResult:
        return await self._push_in_order(user_id, self._store.items)

    async def _push_in_order(self, user_id: str, items: Sequence[WatchlistItem]) -> RemoteWriteResult:
        async with self._push_lock:
            return await self.push_remote(user_id, items)

    # ----- optional wiring -----

    @property
    def auto_sync(self) -> bool:
        return self._auto_sync

    def start(self) -> None:
        if not self._auto_sync or self._auth is None or self._unsubscribers:
            return
        self._unsubscribers.append(self._auth.subscribe(self._on_auth_change))
        self._unsubscribers.append(self._store.subscribe(self._on_store_change))
        # The mirror may already be authenticated when we start listening.
        user = self._auth.current_user
        if user is not None:
            self._spawn(self.pull_into_store(user.user_id))

    def stop(self) -> None:
        while self._unsubscribers:
            self._unsubscribers.pop()()

    async def aclose(self) -> None:
        self.stop()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_auth_change(self, previous: AuthState, current: AuthState) -> None:
        user = current.user
        if user is None:
            return
        if previous.user is not None and previous.user.user_id == user.user_id:
            return
        self._spawn(self.pull_into_store(user.user_id))

    def _on_store_change(self, items: tuple[WatchlistItem, ...]) -> None:
        if self._applying_remote or self._auth is None:
            return
        user = self._auth.current_user
        if user is None:
            return
        self._spawn(self._push_in_order(user.user_id, items))

    def _spawn(self, coro: Coroutine) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("watchlist sync skipped: no running event loop")
            coro.close()
            return
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
