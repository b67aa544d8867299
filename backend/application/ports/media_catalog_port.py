from __future__ import annotations

from typing import Any, Optional, Protocol


class MediaCatalogPort(Protocol):
    """Read-only metadata lookups; payloads are passed through untouched.

    `kind` is the catalog's own path segment: "movie" or "tv".
    """

    async def trending(self, *, kind: str = "movie", time_window: str = "week") -> Optional[dict[str, Any]]:
        ...

    async def popular(self, *, kind: str = "movie", page: int = 1) -> Optional[dict[str, Any]]:
        ...

    async def search(self, *, query: str, kind: str = "movie", page: int = 1) -> Optional[dict[str, Any]]:
        ...

    async def details(self, *, kind: str, media_id: int) -> Optional[dict[str, Any]]:
        ...

    async def credits(self, *, kind: str, media_id: int) -> Optional[dict[str, Any]]:
        ...

    async def videos(self, *, kind: str, media_id: int) -> Optional[dict[str, Any]]:
        ...

    async def images(self, *, kind: str, media_id: int) -> Optional[dict[str, Any]]:
        ...

    async def genres(self, *, kind: str = "movie") -> Optional[dict[str, Any]]:
        ...

    async def close(self) -> None:
        ...
