from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from application.ports.watchlist_persistence_port import WatchlistPersistencePort
from domain.watchlist import (
    MediaType,
    WatchlistDraft,
    WatchlistItem,
    WatchlistKey,
    watchlist_key,
)

logger = logging.getLogger(__name__)

WatchlistListener = Callable[[tuple[WatchlistItem, ...]], None]


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class WatchlistStore:
    """The user's saved movies/series, kept durable through a persistence port.

    - Items are unique by (id, media_type); adding a present key is a no-op
      and never touches `added_at`.
    - Insertion order is kept for display.
    - Every mutation writes the full collection back before returning.
      Write failures are logged, not raised: a broken disk must not break
      the click that triggered it.
    """

    def __init__(
        self,
        *,
        persistence: WatchlistPersistencePort,
        clock: Optional[Callable[[], str]] = None,
    ) -> None:
        self._persistence = persistence
        self._clock = clock or _utc_now_iso
        self._items: list[WatchlistItem] = []
        self._index: dict[WatchlistKey, WatchlistItem] = {}
        self._listeners: list[WatchlistListener] = []
        self._hydrate()

    def _hydrate(self) -> None:
        try:
            loaded = self._persistence.load()
        except Exception:
            logger.warning("watchlist rehydrate failed; starting empty", exc_info=True)
            loaded = []
        self._set_items(loaded)
        logger.debug("watchlist rehydrated items=%d", len(self._items))

    def _set_items(self, items: Iterable[WatchlistItem]) -> None:
        ordered: list[WatchlistItem] = []
        index: dict[WatchlistKey, WatchlistItem] = {}
        for item in items:
            if item.key in index:
                continue
            index[item.key] = item
            ordered.append(item)
        self._items = ordered
        self._index = index

    # ----- queries -----

    @property
    def items(self) -> tuple[WatchlistItem, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(tuple(self._items))

    def contains(self, item_id: int, media_type: MediaType | str = MediaType.MOVIE) -> bool:
        return watchlist_key(item_id, media_type) in self._index

    def get(self, item_id: int, media_type: MediaType | str = MediaType.MOVIE) -> Optional[WatchlistItem]:
        return self._index.get(watchlist_key(item_id, media_type))

    # ----- mutations -----

    def add(self, draft: WatchlistDraft) -> None:
        key = draft.key
        if key in self._index:
            return
        item = WatchlistItem.from_draft(draft, added_at=self._clock())
        self._items.append(item)
        self._index[key] = item
        self._commit("add", key)

    def remove(self, item_id: int, media_type: MediaType | str = MediaType.MOVIE) -> None:
        key = watchlist_key(item_id, media_type)
        if key not in self._index:
            return
        del self._index[key]
        self._items = [i for i in self._items if i.key != key]
        self._commit("remove", key)

    def toggle(self, draft: WatchlistDraft) -> bool:
        """Media-card button: remove when saved, add otherwise. Returns new membership."""
        key = draft.key
        if key in self._index:
            self.remove(*key)
            return False
        self.add(draft)
        return True

    def clear(self) -> None:
        # Callers confirm with the user first; there is no undo.
        self._items = []
        self._index = {}
        self._commit("clear", None)

    def replace_all(self, items: Iterable[WatchlistItem]) -> None:
        """Overwrite the whole collection (remote pull). First occurrence of a key wins."""
        self._set_items(items)
        self._commit("replace_all", None)

    # ----- change notification -----

    def subscribe(self, listener: WatchlistListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _commit(self, op: str, key: Optional[WatchlistKey]) -> None:
        snapshot = tuple(self._items)
        try:
            self._persistence.save(snapshot)
        except Exception:
            logger.exception("watchlist persist failed op=%s key=%s", op, key)
        logger.debug("watchlist %s key=%s size=%d", op, key, len(snapshot))
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("watchlist listener failed op=%s", op)
