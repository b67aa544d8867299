from __future__ import annotations

import logging
from typing import Callable, Optional

from application.app_context import AppContext
from application.auth.auth_service import AuthService
from application.auth.auth_state import AuthStateMirror
from application.ports.identity_provider_port import IdentityProviderPort
from application.ports.key_value_storage_port import KeyValueStoragePort
from application.ports.media_catalog_port import MediaCatalogPort
from application.ports.remote_profile_store_port import RemoteProfileStorePort
from application.watchlist.watchlist_store import WatchlistStore
from application.watchlist.watchlist_sync_service import WatchlistSyncService
from infrastructure.config.settings import WATCHLIST_STORAGE_KEY

logger = logging.getLogger(__name__)


def build_app_context(
    *,
    auto_sync: bool = False,
    profile_create_timeout_s: float = 5.0,
    storage: Optional[KeyValueStoragePort] = None,
    identity_provider: Optional[IdentityProviderPort] = None,
    profile_store: Optional[RemoteProfileStorePort] = None,
    catalog: Optional[MediaCatalogPort] = None,
    clock: Optional[Callable[[], str]] = None,
) -> AppContext:
    """Wire infrastructure adapters into the application services.

    Any collaborator left as None is created by its provider factory from
    `infrastructure.config.settings`. The context is returned unstarted.
    """
    from infrastructure.catalog.tmdb_client import TMDBClient
    from infrastructure.identity.factory import create_identity_provider
    from infrastructure.persistence.local.factory import create_key_value_storage
    from infrastructure.persistence.local.watchlist_persistence import LocalWatchlistPersistence
    from infrastructure.profile_store.factory import create_profile_store

    if storage is None:
        storage = create_key_value_storage()
    if identity_provider is None:
        identity_provider = create_identity_provider()
    if profile_store is None:
        # Remote calls are authorized as whoever is signed in right now.
        token_provider = getattr(identity_provider, "get_id_token", None)
        profile_store = create_profile_store(token_provider=token_provider)
    if catalog is None:
        catalog = TMDBClient()

    persistence = LocalWatchlistPersistence(storage=storage, key=WATCHLIST_STORAGE_KEY)
    watchlist = WatchlistStore(persistence=persistence, clock=clock)
    auth = AuthStateMirror(provider=identity_provider)
    auth_service = AuthService(
        provider=identity_provider,
        profile_store=profile_store,
        profile_create_timeout_s=profile_create_timeout_s,
    )
    sync = WatchlistSyncService(
        store=watchlist,
        profile_store=profile_store,
        auth=auth,
        auto_sync=auto_sync,
    )

    logger.info(
        "app context built identity=%s profile_store=%s auto_sync=%s",
        type(identity_provider).__name__,
        type(profile_store).__name__,
        auto_sync,
    )
    return AppContext(
        watchlist=watchlist,
        auth=auth,
        auth_service=auth_service,
        sync=sync,
        identity_provider=identity_provider,
        profile_store=profile_store,
        catalog=catalog,
    )
