from __future__ import annotations

from typing import Protocol, Sequence

from domain.watchlist import WatchlistItem


class WatchlistPersistencePort(Protocol):
    def load(self) -> list[WatchlistItem]:
        """Return previously saved items, or [] when nothing usable is stored."""
        ...

    def save(self, items: Sequence[WatchlistItem]) -> None:
        """Overwrite the stored state with the full collection."""
        ...
