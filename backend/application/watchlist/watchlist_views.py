from __future__ import annotations

from typing import Iterable, Literal, Optional, Sequence

from domain.watchlist import GenreTaxonomy, WatchlistItem

SortOrder = Literal["added", "release", "rating", "title"]


def available_genres(items: Iterable[WatchlistItem], taxonomy: GenreTaxonomy) -> list[int]:
    """Known genre ids present in the watchlist, ordered by display name."""
    present: set[int] = set()
    for item in items:
        for genre_id in item.genre_ids:
            if genre_id in taxonomy:
                present.add(genre_id)
    return sorted(present, key=lambda gid: ((taxonomy.name(gid) or "").lower(), gid))


def genre_counts(items: Iterable[WatchlistItem], taxonomy: GenreTaxonomy) -> dict[int, int]:
    counts: dict[int, int] = {}
    for item in items:
        # An item lists each genre once, but be safe against duplicated ids.
        for genre_id in set(item.genre_ids):
            if genre_id in taxonomy:
                counts[genre_id] = counts.get(genre_id, 0) + 1
    return counts


def filter_by_genre(items: Sequence[WatchlistItem], genre_id: Optional[int]) -> list[WatchlistItem]:
    if genre_id is None:
        return list(items)
    return [item for item in items if int(genre_id) in item.genre_ids]


def sort_items(items: Sequence[WatchlistItem], order: SortOrder = "added") -> list[WatchlistItem]:
    """Return a sorted copy; the store itself always keeps insertion order.

    - added: insertion order (oldest first)
    - release: newest release/first-air date first, undated last
    - rating: highest vote average first
    - title: case-insensitive A-Z
    """
    if order == "added":
        return list(items)
    if order == "release":
        dated = [i for i in items if i.date_value]
        undated = [i for i in items if not i.date_value]
        return sorted(dated, key=lambda i: i.date_value or "", reverse=True) + undated
    if order == "rating":
        return sorted(items, key=lambda i: float(i.vote_average or 0.0), reverse=True)
    if order == "title":
        return sorted(items, key=lambda i: (i.title or "").casefold())
    raise ValueError(f"unsupported sort order: {order!r}")
