"""Stored shapes for watchlist items and profile documents.

One record layout is shared by local storage and the remote profile
document, so an item written by either side reads back the same way:

    {"id", "mediaType", "title", "posterPath", "voteAverage",
     "dateValue", "genreIds", "addedAt", ...unknown fields}

Readers also accept the older catalog-style keys (`media_type`, `name`,
`poster_path`, `vote_average`, `release_date`, `first_air_date`,
`genre_ids`) and `"tv"` as a media type. Such a key is only read when its
canonical key is missing from the record; otherwise it is kept as an
unknown field and written back untouched.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from domain.auth import UserProfile
from domain.watchlist import MediaType, WatchlistItem

logger = logging.getLogger(__name__)

_CANONICAL_KEYS = {
    "id",
    "mediaType",
    "title",
    "posterPath",
    "voteAverage",
    "dateValue",
    "genreIds",
    "addedAt",
}

# Legacy key -> canonical key. A legacy key is folded only when its canonical
# key is absent; otherwise it is kept as an unknown field.
_LEGACY_KEYS = {
    "media_type": "mediaType",
    "name": "title",
    "poster_path": "posterPath",
    "vote_average": "voteAverage",
    "release_date": "dateValue",
    "first_air_date": "dateValue",
    "genre_ids": "genreIds",
    "added_at": "addedAt",
}


class WatchlistItemRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    media_type: str = Field(default=MediaType.MOVIE.value, alias="mediaType")
    title: str = ""
    poster_path: Optional[str] = Field(default=None, alias="posterPath")
    vote_average: float = Field(default=0.0, alias="voteAverage")
    date_value: Optional[str] = Field(default=None, alias="dateValue")
    genre_ids: list[int] = Field(default_factory=list, alias="genreIds")
    added_at: str = Field(..., min_length=1, alias="addedAt")
    extra: dict[str, Any] = Field(default_factory=dict, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _fold_legacy_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        folded: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in data.items():
            if key in _CANONICAL_KEYS:
                folded[key] = value
        for key, value in data.items():
            if key in _CANONICAL_KEYS:
                continue
            target = _LEGACY_KEYS.get(key)
            if target is None or target in folded:
                extra[key] = value
            else:
                folded[target] = value
        folded["extra"] = extra
        return folded

    @field_validator("media_type", mode="before")
    @classmethod
    def _resolve_media_type(cls, value: Any) -> str:
        return MediaType.parse(value).value

    @field_validator("vote_average", mode="before")
    @classmethod
    def _none_rating_is_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("title", mode="before")
    @classmethod
    def _none_title_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("genre_ids", mode="before")
    @classmethod
    def _none_genres_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @classmethod
    def from_domain(cls, item: WatchlistItem) -> "WatchlistItemRecord":
        data: dict[str, Any] = dict(item.extra)
        data.update(
            {
                "id": item.id,
                "mediaType": item.media_type.value,
                "title": item.title,
                "posterPath": item.poster_path,
                "voteAverage": item.vote_average,
                "dateValue": item.date_value,
                "genreIds": list(item.genre_ids),
                "addedAt": item.added_at,
            }
        )
        return cls.model_validate(data)

    def to_domain(self) -> WatchlistItem:
        return WatchlistItem(
            id=self.id,
            media_type=MediaType.parse(self.media_type),
            title=self.title,
            added_at=self.added_at,
            poster_path=self.poster_path,
            vote_average=self.vote_average,
            date_value=self.date_value or None,
            genre_ids=tuple(self.genre_ids),
            extra=dict(self.extra),
        )

    def to_storage(self) -> dict[str, Any]:
        out = dict(self.extra)
        out.update(self.model_dump(by_alias=True, exclude={"extra"}))
        return out


def items_to_storage(items: list[WatchlistItem] | tuple[WatchlistItem, ...]) -> list[dict[str, Any]]:
    return [WatchlistItemRecord.from_domain(item).to_storage() for item in items]


class ProfileDocument(BaseModel):
    """Remote per-user document: `{email, displayName, createdAt, watchlist}`."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    email: Optional[str] = None
    display_name: Optional[str] = Field(default=None, alias="displayName")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    watchlist: list[Any] = Field(default_factory=list)

    @field_validator("watchlist", mode="before")
    @classmethod
    def _none_watchlist_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "ProfileDocument":
        return cls(
            email=profile.email,
            displayName=profile.display_name,
            createdAt=profile.created_at,
            watchlist=items_to_storage(profile.watchlist),
        )

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    def to_domain(self) -> UserProfile:
        return UserProfile(
            email=self.email,
            display_name=self.display_name,
            created_at=self.created_at,
            watchlist=tuple(items_from_storage(self.watchlist)),
        )


def items_from_storage(raw_items: Any) -> list[WatchlistItem]:
    """Parse stored item dicts; records that fail validation are dropped."""
    if not isinstance(raw_items, list):
        return []
    items: list[WatchlistItem] = []
    for idx, raw in enumerate(raw_items):
        try:
            items.append(WatchlistItemRecord.model_validate(raw).to_domain())
        except (ValidationError, ValueError) as exc:
            logger.warning("Dropping unreadable watchlist record index=%d: %s", idx, exc)
    return items
