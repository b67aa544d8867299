from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Sequence
from urllib.parse import quote

import aiohttp
from pydantic import ValidationError

from application.ports.remote_profile_store_port import RemoteProfileStorePort, RemoteStoreError
from domain.auth import UserProfile
from domain.watchlist import WatchlistItem
from infrastructure.config.settings import (
    FIREBASE_API_KEY,
    FIREBASE_PROJECT_ID,
    FIREBASE_TIMEOUT_S,
    FIRESTORE_BASE_URL,
    FIRESTORE_DATABASE,
    FIRESTORE_USERS_COLLECTION,
)
from infrastructure.persistence.schemas import ProfileDocument, items_to_storage
from infrastructure.profile_store.firestore_codec import decode_fields, encode_fields, encode_value

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Awaitable[Optional[str]]]


class FirestoreProfileStore(RemoteProfileStorePort):
    """Per-user profile documents (`users/{uid}`) over the Firestore REST API.

    Requests are authorized with the signed-in user's ID token, fetched from
    `token_provider` for every call; security rules decide what that user
    may read or write.
    """

    def __init__(
        self,
        *,
        project_id: str = FIREBASE_PROJECT_ID,
        api_key: str = FIREBASE_API_KEY,
        base_url: str = FIRESTORE_BASE_URL,
        database: str = FIRESTORE_DATABASE,
        collection: str = FIRESTORE_USERS_COLLECTION,
        timeout_s: float = FIREBASE_TIMEOUT_S,
        token_provider: Optional[TokenProvider] = None,
    ) -> None:
        self._project_id = (project_id or "").strip()
        self._api_key = (api_key or "").strip()
        self._base_url = (base_url or "").rstrip("/")
        self._database = (database or "(default)").strip()
        self._collection = (collection or "users").strip().strip("/")
        self._timeout_s = float(timeout_s or 10.0)
        self._token_provider = token_provider
        self._session: aiohttp.ClientSession | None = None
        self._lock = asyncio.Lock()

    def _document_url(self, user_id: str) -> str:
        return (
            f"{self._base_url}/projects/{self._project_id}/databases/{self._database}"
            f"/documents/{self._collection}/{quote(str(user_id), safe='')}"
        )

    def _params(self) -> list[tuple[str, str]]:
        return [("key", self._api_key)] if self._api_key else []

    async def _headers(self) -> dict[str, str]:
        headers = {"content-type": "application/json"}
        if self._token_provider is not None:
            token = await self._token_provider()
            if token:
                headers["authorization"] = f"Bearer {token}"
        return headers

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None and not self._session.closed:
            return self._session

        async with self._lock:
            if self._session is not None and not self._session.closed:
                return self._session

            timeout = aiohttp.ClientTimeout(total=self._timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
            return self._session

    def _require_configured(self) -> None:
        if not self._base_url or not self._project_id:
            raise RemoteStoreError("Firestore is not configured (missing FIREBASE_PROJECT_ID)")

    async def get_profile(self, *, user_id: str) -> Optional[UserProfile]:
        self._require_configured()
        url = self._document_url(user_id)
        try:
            session = await self._get_session()
            async with session.get(url, params=self._params(), headers=await self._headers()) as resp:
                if resp.status == 404:
                    return None
                if resp.status >= 400:
                    text = await resp.text()
                    raise RemoteStoreError(f"Firestore get failed ({resp.status}): {text[:200]}")
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise RemoteStoreError(f"Firestore get failed: {exc!r}") from exc

        fields = decode_fields((data or {}).get("fields") or {})
        try:
            return ProfileDocument.model_validate(fields).to_domain()
        except ValidationError as exc:
            raise RemoteStoreError(f"Firestore profile document is malformed: {exc}") from exc

    async def _patch(self, *, user_id: str, fields: dict[str, Any], mask: Optional[Sequence[str]]) -> None:
        self._require_configured()
        url = self._document_url(user_id)
        params = self._params()
        if mask is not None:
            # Only the listed fields are written; the rest of the document stays.
            params.extend(("updateMask.fieldPaths", path) for path in mask)
        try:
            session = await self._get_session()
            async with session.patch(
                url,
                params=params,
                json={"fields": fields},
                headers=await self._headers(),
            ) as resp:
                if resp.status >= 400:
                    text = await resp.text()
                    raise RemoteStoreError(f"Firestore write failed ({resp.status}): {text[:200]}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise RemoteStoreError(f"Firestore write failed: {exc!r}") from exc

    async def create_profile(self, *, user_id: str, profile: UserProfile) -> None:
        document = ProfileDocument.from_domain(profile).to_storage()
        await self._patch(user_id=user_id, fields=encode_fields(document), mask=None)
        logger.info("Firestore profile written user_id=%s", user_id)

    async def set_watchlist(self, *, user_id: str, items: Sequence[WatchlistItem]) -> None:
        fields = {"watchlist": encode_value(items_to_storage(tuple(items)))}
        await self._patch(user_id=user_id, fields=fields, mask=["watchlist"])
        logger.debug("Firestore watchlist written user_id=%s items=%d", user_id, len(items))

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
