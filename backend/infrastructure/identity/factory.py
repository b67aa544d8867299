"""Identity provider factory (provider chosen by IDENTITY_PROVIDER)."""

from __future__ import annotations

import logging
from typing import Literal

from application.ports.identity_provider_port import IdentityProviderPort
from infrastructure.config.settings import FIREBASE_API_KEY, IDENTITY_PROVIDER

logger = logging.getLogger(__name__)

ProviderType = Literal["firebase", "memory", ""]


def create_identity_provider(provider: ProviderType | None = None) -> IdentityProviderPort:
    if provider is None:
        provider = IDENTITY_PROVIDER  # type: ignore[assignment]

    provider = (provider or "").strip().lower()

    match provider:
        case "firebase":
            if not FIREBASE_API_KEY:
                logger.warning(
                    "IDENTITY_PROVIDER=firebase but FIREBASE_API_KEY is not set; "
                    "falling back to InMemoryIdentityProvider"
                )
                from infrastructure.identity.in_memory_identity_provider import InMemoryIdentityProvider

                return InMemoryIdentityProvider()

            from infrastructure.identity.firebase_identity_provider import FirebaseIdentityProvider

            return FirebaseIdentityProvider()

        case "memory" | "":
            from infrastructure.identity.in_memory_identity_provider import InMemoryIdentityProvider

            return InMemoryIdentityProvider()

        case _:
            raise ValueError(
                f"Unsupported IDENTITY_PROVIDER: {provider!r}. "
                f"Supported values: 'firebase', 'memory'"
            )
