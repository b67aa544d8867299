from application.watchlist.watchlist_store import WatchlistStore
from application.watchlist.watchlist_sync_service import (
    RemoteWatchlistResult,
    RemoteWriteResult,
    WatchlistSyncService,
)

__all__ = [
    "RemoteWatchlistResult",
    "RemoteWriteResult",
    "WatchlistStore",
    "WatchlistSyncService",
]
