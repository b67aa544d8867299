from domain.watchlist.catalog import draft_from_media, poster_url, youtube_url
from domain.watchlist.genres import GenreTaxonomy, get_genre_taxonomy, load_genre_taxonomy
from domain.watchlist.watchlist_item import (
    MediaType,
    WatchlistDraft,
    WatchlistItem,
    WatchlistKey,
    watchlist_key,
)

__all__ = [
    "GenreTaxonomy",
    "MediaType",
    "WatchlistDraft",
    "WatchlistItem",
    "WatchlistKey",
    "draft_from_media",
    "get_genre_taxonomy",
    "load_genre_taxonomy",
    "poster_url",
    "watchlist_key",
    "youtube_url",
]
