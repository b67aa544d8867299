from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from application.auth.auth_service import AuthService
from application.auth.auth_state import AuthStateMirror
from application.ports.identity_provider_port import IdentityProviderPort
from application.ports.media_catalog_port import MediaCatalogPort
from application.ports.remote_profile_store_port import RemoteProfileStorePort
from application.ui.ui_state import UIState
from application.watchlist.watchlist_store import WatchlistStore
from application.watchlist.watchlist_sync_service import WatchlistSyncService

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything the UI layer shares, built once at startup and closed at shutdown."""

    watchlist: WatchlistStore
    auth: AuthStateMirror
    auth_service: AuthService
    sync: WatchlistSyncService
    identity_provider: IdentityProviderPort
    profile_store: RemoteProfileStorePort
    catalog: Optional[MediaCatalogPort] = None
    ui: UIState = field(default_factory=UIState)
    _started: bool = field(default=False, init=False, repr=False)

    def start(self) -> None:
        if self._started:
            return
        # Sync listens to the mirror, so it has to be wired before the
        # provider delivers its first notification.
        self.sync.start()
        self.auth.start()
        self._started = True
        logger.info(
            "app context started watchlist_items=%d auto_sync=%s",
            len(self.watchlist),
            self.sync.auto_sync,
        )

    async def close(self) -> None:
        self.auth.stop()
        await self.sync.aclose()
        if self.catalog is not None:
            await self.catalog.close()
        await self.profile_store.close()
        await self.identity_provider.close()
        self._started = False
