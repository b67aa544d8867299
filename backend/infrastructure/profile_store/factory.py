"""Remote profile store factory (provider chosen by PROFILE_STORE_PROVIDER)."""

from __future__ import annotations

import logging
from typing import Literal, Optional

from application.ports.remote_profile_store_port import RemoteProfileStorePort
from infrastructure.config.settings import FIREBASE_PROJECT_ID, PROFILE_STORE_PROVIDER
from infrastructure.profile_store.firestore_profile_store import TokenProvider

logger = logging.getLogger(__name__)

ProviderType = Literal["firestore", "memory", ""]


def create_profile_store(
    provider: ProviderType | None = None,
    *,
    token_provider: Optional[TokenProvider] = None,
) -> RemoteProfileStorePort:
    if provider is None:
        provider = PROFILE_STORE_PROVIDER  # type: ignore[assignment]

    provider = (provider or "").strip().lower()

    match provider:
        case "firestore":
            if not FIREBASE_PROJECT_ID:
                logger.warning(
                    "PROFILE_STORE_PROVIDER=firestore but FIREBASE_PROJECT_ID is not set; "
                    "falling back to InMemoryProfileStore"
                )
                from infrastructure.profile_store.in_memory_profile_store import InMemoryProfileStore

                return InMemoryProfileStore()

            from infrastructure.profile_store.firestore_profile_store import FirestoreProfileStore

            return FirestoreProfileStore(token_provider=token_provider)

        case "memory" | "":
            from infrastructure.profile_store.in_memory_profile_store import InMemoryProfileStore

            return InMemoryProfileStore()

        case _:
            raise ValueError(
                f"Unsupported PROFILE_STORE_PROVIDER: {provider!r}. "
                f"Supported values: 'firestore', 'memory'"
            )
