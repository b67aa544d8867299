"""
TMDB API HTTP client for catalog browsing.

Every call returns TMDB's JSON payload untouched (or None on failure); callers
pick the fields they need. Watchlist entries are built from these payloads
with `domain.watchlist.draft_from_media`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from application.ports.media_catalog_port import MediaCatalogPort
from infrastructure.config.settings import (
    TMDB_API_KEY,
    TMDB_API_TOKEN,
    TMDB_BASE_URL,
    TMDB_LANGUAGE,
    TMDB_TIMEOUT_S,
)

logger = logging.getLogger(__name__)

_KINDS = {"movie", "tv"}
_SEARCH_KINDS = {"movie", "tv", "multi"}


def _check_kind(kind: str, allowed: set[str] = _KINDS) -> str:
    value = (kind or "").strip().lower()
    if value not in allowed:
        raise ValueError(f"unsupported catalog kind: {kind!r} (expected one of {sorted(allowed)})")
    return value


class TMDBClient(MediaCatalogPort):
    """Async HTTP client for TMDB API.

    Attributes:
        _base_url: TMDB API base URL
        _api_token: TMDB v4 bearer token
        _api_key: TMDB v3 api key (used only when no bearer token is set)
        _language: default `language` query param
        _session: aiohttp ClientSession (lazily initialized)
        _lock: guards lazy session creation
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        api_token: str | None = None,
        api_key: str | None = None,
        language: str | None = None,
        timeout_s: float | None = None,
    ) -> None:
        self._base_url = (base_url or TMDB_BASE_URL or "").rstrip("/")
        self._api_token = (api_token or TMDB_API_TOKEN or "").strip()
        self._api_key = (api_key or TMDB_API_KEY or "").strip()
        self._language = (language or TMDB_LANGUAGE or "en-US").strip()
        self._timeout_s = float(timeout_s or TMDB_TIMEOUT_S or 10.0)
        self._session: aiohttp.ClientSession | None = None
        self._lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return bool(self._base_url and (self._api_token or self._api_key))

    def _headers(self) -> dict[str, str]:
        headers = {"accept": "application/json"}
        # Prefer v4 bearer token auth when available.
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    def _auth_params(self) -> dict[str, str]:
        """v3 auth via api_key query param (used when bearer token is absent)."""
        if self._api_token:
            return {}
        if self._api_key:
            return {"api_key": self._api_key}
        return {}

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None and not self._session.closed:
            return self._session

        async with self._lock:
            # Double-check after acquiring lock
            if self._session is not None and not self._session.closed:
                return self._session

            timeout = aiohttp.ClientTimeout(total=self._timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
            return self._session

    async def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> Optional[dict[str, Any]]:
        """GET `{base_url}{path}`; any failure is logged and reported as None."""
        if not self.configured:
            logger.warning("TMDB client not configured (missing base_url or auth)")
            return None

        query: dict[str, Any] = {"language": self._language}
        for key, value in (params or {}).items():
            # None drops the param, including the default language.
            if value is None:
                query.pop(key, None)
            else:
                query[key] = value
        query.update(self._auth_params())
        url = f"{self._base_url}{path}"

        try:
            session = await self._get_session()
            logger.debug("TMDB GET url=%s params=%s", url, {k: v for k, v in query.items() if k != "api_key"})
            async with session.get(url, params=query, headers=self._headers()) as resp:
                if resp.status >= 400:
                    error_text = await resp.text()
                    logger.error("TMDB GET %s failed (%s): %s", path, resp.status, error_text[:200])
                    return None
                data = await resp.json(content_type=None)
            return data if isinstance(data, dict) else None
        except asyncio.TimeoutError:
            logger.error("TMDB GET %s timeout after %ss", path, self._timeout_s)
            return None
        except (aiohttp.ClientError, ValueError) as e:
            logger.error("TMDB GET %s failed: %r", path, e)
            return None

    # ===== Lists =====

    async def trending(self, *, kind: str = "movie", time_window: str = "week") -> Optional[dict[str, Any]]:
        window = time_window if time_window in {"day", "week"} else "week"
        return await self._get(f"/trending/{_check_kind(kind)}/{window}")

    async def popular(self, *, kind: str = "movie", page: int = 1) -> Optional[dict[str, Any]]:
        return await self._get(f"/{_check_kind(kind)}/popular", {"page": page})

    async def top_rated(self, *, kind: str = "movie", page: int = 1) -> Optional[dict[str, Any]]:
        return await self._get(f"/{_check_kind(kind)}/top_rated", {"page": page})

    async def now_playing(self, *, page: int = 1) -> Optional[dict[str, Any]]:
        return await self._get("/movie/now_playing", {"page": page})

    async def upcoming(self, *, page: int = 1) -> Optional[dict[str, Any]]:
        return await self._get("/movie/upcoming", {"page": page})

    async def airing_today(self, *, page: int = 1) -> Optional[dict[str, Any]]:
        return await self._get("/tv/airing_today", {"page": page})

    async def on_the_air(self, *, page: int = 1) -> Optional[dict[str, Any]]:
        return await self._get("/tv/on_the_air", {"page": page})

    async def discover_by_genre(self, *, kind: str = "movie", genre_id: int, page: int = 1) -> Optional[dict[str, Any]]:
        return await self._get(
            f"/discover/{_check_kind(kind)}",
            {"with_genres": int(genre_id), "page": page, "sort_by": "popularity.desc"},
        )

    # ===== Search =====

    async def search(self, *, query: str, kind: str = "movie", page: int = 1) -> Optional[dict[str, Any]]:
        q = (query or "").strip()
        if not q:
            return {"page": 1, "results": [], "total_pages": 0, "total_results": 0}
        return await self._get(
            f"/search/{_check_kind(kind, _SEARCH_KINDS)}",
            {"query": q, "page": page, "include_adult": "false"},
        )

    # ===== Single title =====

    async def details(self, *, kind: str, media_id: int) -> Optional[dict[str, Any]]:
        return await self._get(f"/{_check_kind(kind)}/{int(media_id)}")

    async def credits(self, *, kind: str, media_id: int) -> Optional[dict[str, Any]]:
        return await self._get(f"/{_check_kind(kind)}/{int(media_id)}/credits")

    async def videos(self, *, kind: str, media_id: int) -> Optional[dict[str, Any]]:
        return await self._get(f"/{_check_kind(kind)}/{int(media_id)}/videos")

    async def images(self, *, kind: str, media_id: int) -> Optional[dict[str, Any]]:
        # Without this TMDB filters images to `language` and drops textless ones.
        return await self._get(
            f"/{_check_kind(kind)}/{int(media_id)}/images",
            {"language": None, "include_image_language": "en,null"},
        )

    async def similar(self, *, kind: str, media_id: int, page: int = 1) -> Optional[dict[str, Any]]:
        return await self._get(f"/{_check_kind(kind)}/{int(media_id)}/similar", {"page": page})

    async def recommendations(self, *, kind: str, media_id: int, page: int = 1) -> Optional[dict[str, Any]]:
        return await self._get(f"/{_check_kind(kind)}/{int(media_id)}/recommendations", {"page": page})

    async def season_details(self, *, tv_id: int, season_number: int) -> Optional[dict[str, Any]]:
        return await self._get(f"/tv/{int(tv_id)}/season/{int(season_number)}")

    async def genres(self, *, kind: str = "movie") -> Optional[dict[str, Any]]:
        return await self._get(f"/genre/{_check_kind(kind)}/list")

    # ===== People =====

    async def person_details(self, *, person_id: int) -> Optional[dict[str, Any]]:
        return await self._get(f"/person/{int(person_id)}")

    async def person_movie_credits(self, *, person_id: int) -> Optional[dict[str, Any]]:
        return await self._get(f"/person/{int(person_id)}/movie_credits")

    async def close(self) -> None:
        """Close the HTTP session and release resources."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
