from __future__ import annotations

from typing import Any, Mapping, Optional

from domain.watchlist.watchlist_item import MediaType, WatchlistDraft

TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
PLACEHOLDER_POSTER = "/images/placeholder-movie.svg"


def _genre_ids(payload: Mapping[str, Any]) -> tuple[int, ...]:
    raw = payload.get("genre_ids")
    if raw is None:
        # Detail payloads carry [{"id": .., "name": ..}] instead of ids.
        raw = [g.get("id") for g in payload.get("genres") or [] if isinstance(g, Mapping)]
    out: list[int] = []
    for value in raw or []:
        try:
            out.append(int(value))
        except (TypeError, ValueError):
            continue
    return tuple(out)


def draft_from_media(
    payload: Mapping[str, Any],
    *,
    media_type: Optional[MediaType | str] = None,
) -> WatchlistDraft:
    """Build a watchlist draft from a TMDB movie or TV payload.

    Movies use `title`/`release_date`, TV shows use `name`/`first_air_date`;
    either shape is accepted. An explicit `media_type` wins over the
    payload's own `media_type` (present on trending/multi-search results).
    """
    if "id" not in payload:
        raise ValueError("catalog payload has no id")
    resolved = MediaType.parse(media_type if media_type is not None else payload.get("media_type"))
    title = payload.get("title") or payload.get("name") or ""
    date_value = payload.get("release_date") or payload.get("first_air_date") or None
    try:
        vote_average = float(payload.get("vote_average") or 0.0)
    except (TypeError, ValueError):
        vote_average = 0.0
    return WatchlistDraft(
        id=int(payload["id"]),
        title=str(title),
        media_type=resolved,
        poster_path=payload.get("poster_path") or None,
        vote_average=vote_average,
        date_value=str(date_value) if date_value else None,
        genre_ids=_genre_ids(payload),
    )


def poster_url(path: Optional[str], size: str = "w500", *, base_url: str = TMDB_IMAGE_BASE_URL) -> str:
    if not path:
        return PLACEHOLDER_POSTER
    return f"{base_url.rstrip('/')}/{size}{path}"


def youtube_url(key: str) -> str:
    return f"https://www.youtube.com/watch?v={key}"
