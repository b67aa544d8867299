from __future__ import annotations

import json
import logging
from typing import Any, Sequence

from application.ports.key_value_storage_port import KeyValueStoragePort
from application.ports.watchlist_persistence_port import WatchlistPersistencePort
from domain.watchlist import WatchlistItem
from infrastructure.persistence.schemas import items_from_storage, items_to_storage

logger = logging.getLogger(__name__)

DEFAULT_WATCHLIST_STORAGE_KEY = "optix-watchlist"


def _extract_items(payload: Any) -> Any:
    """Pull the item list out of a stored value.

    Current layout is {"items": [...]}; older builds wrote the state-manager
    envelope {"state": {"items": [...]}, "version": 0}.
    """
    if not isinstance(payload, dict):
        return None
    if "items" in payload:
        return payload["items"]
    state = payload.get("state")
    if isinstance(state, dict):
        return state.get("items")
    return None


class LocalWatchlistPersistence(WatchlistPersistencePort):
    """Watchlist state as one JSON value under a fixed storage key."""

    def __init__(
        self,
        *,
        storage: KeyValueStoragePort,
        key: str = DEFAULT_WATCHLIST_STORAGE_KEY,
    ) -> None:
        self._storage = storage
        self._key = key or DEFAULT_WATCHLIST_STORAGE_KEY

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[WatchlistItem]:
        try:
            raw = self._storage.get(self._key)
        except Exception:
            logger.warning("Local watchlist read failed key=%s", self._key, exc_info=True)
            return []
        if not raw:
            return []
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            logger.warning("Local watchlist is not valid JSON key=%s: %s", self._key, exc)
            return []
        raw_items = _extract_items(payload)
        if not isinstance(raw_items, list):
            logger.warning("Local watchlist has no item list key=%s", self._key)
            return []
        return items_from_storage(raw_items)

    def save(self, items: Sequence[WatchlistItem]) -> None:
        value = json.dumps({"items": items_to_storage(tuple(items))}, ensure_ascii=False)
        self._storage.set(self._key, value)
