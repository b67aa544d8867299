"""Local key/value storage factory (provider chosen by WATCHLIST_STORAGE_PROVIDER)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal, Optional

from application.ports.key_value_storage_port import KeyValueStoragePort
from infrastructure.config.settings import LOCAL_STORAGE_PATH, WATCHLIST_STORAGE_PROVIDER

logger = logging.getLogger(__name__)

ProviderType = Literal["file", "memory", ""]


def create_key_value_storage(
    provider: ProviderType | None = None,
    *,
    path: Optional[Path] = None,
) -> KeyValueStoragePort:
    if provider is None:
        provider = WATCHLIST_STORAGE_PROVIDER  # type: ignore[assignment]

    provider = (provider or "").strip().lower()

    match provider:
        case "file" | "":
            from infrastructure.persistence.local.key_value_storage import JsonFileKeyValueStorage

            target = Path(path or LOCAL_STORAGE_PATH)
            logger.info("Local storage file=%s", target)
            return JsonFileKeyValueStorage(target)

        case "memory":
            from infrastructure.persistence.local.key_value_storage import InMemoryKeyValueStorage

            return InMemoryKeyValueStorage()

        case _:
            raise ValueError(
                f"Unsupported WATCHLIST_STORAGE_PROVIDER: {provider!r}. "
                f"Supported values: 'file', 'memory'"
            )
