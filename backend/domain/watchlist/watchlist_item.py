from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class MediaType(str, Enum):
    MOVIE = "movie"
    SERIES = "series"

    @classmethod
    def parse(cls, value: Any) -> "MediaType":
        """Resolve a stored/catalog media type, defaulting to movie.

        Older records carry no media type at all, and catalog payloads use
        `tv` for series.
        """
        if isinstance(value, MediaType):
            return value
        raw = str(value or "").strip().lower()
        if not raw or raw == "movie":
            return cls.MOVIE
        if raw in ("series", "tv"):
            return cls.SERIES
        raise ValueError(f"unknown media type: {value!r}")


WatchlistKey = tuple[int, MediaType]


def watchlist_key(item_id: int, media_type: Any = None) -> WatchlistKey:
    return (int(item_id), MediaType.parse(media_type))


@dataclass(frozen=True)
class WatchlistDraft:
    """What a media card hands to the store: an item without `added_at`."""

    id: int
    title: str
    media_type: Optional[MediaType] = None
    poster_path: Optional[str] = None
    vote_average: float = 0.0
    date_value: Optional[str] = None
    genre_ids: tuple[int, ...] = ()
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> WatchlistKey:
        return watchlist_key(self.id, self.media_type)


@dataclass(frozen=True)
class WatchlistItem:
    """A saved movie or series reference, identified by (id, media_type)."""

    id: int
    media_type: MediaType
    title: str
    added_at: str
    poster_path: Optional[str] = None
    vote_average: float = 0.0
    # release_date for movies, first_air_date for series
    date_value: Optional[str] = None
    genre_ids: tuple[int, ...] = ()
    # Unknown persisted fields, written back untouched.
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> WatchlistKey:
        return (self.id, self.media_type)

    @property
    def year(self) -> Optional[int]:
        raw = (self.date_value or "").split("-")[0]
        if len(raw) != 4 or not raw.isdigit():
            return None
        return int(raw)

    @classmethod
    def from_draft(cls, draft: WatchlistDraft, *, added_at: str) -> "WatchlistItem":
        return cls(
            id=int(draft.id),
            media_type=MediaType.parse(draft.media_type),
            title=draft.title,
            added_at=added_at,
            poster_path=draft.poster_path,
            vote_average=float(draft.vote_average or 0.0),
            date_value=draft.date_value or None,
            genre_ids=tuple(int(g) for g in draft.genre_ids or ()),
            extra=dict(draft.extra or {}),
        )
