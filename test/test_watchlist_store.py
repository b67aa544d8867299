import itertools
import json
import random
import sys
import unittest
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from application.watchlist.watchlist_store import WatchlistStore
from domain.watchlist import MediaType, WatchlistDraft, WatchlistItem
from infrastructure.persistence.local.key_value_storage import InMemoryKeyValueStorage
from infrastructure.persistence.local.watchlist_persistence import LocalWatchlistPersistence

_KEY = "optix-watchlist"


def _clock():
    ticks = iter(f"2024-01-01T00:00:{n:02d}.000Z" for n in range(60))
    return lambda: next(ticks)


def _fight_club() -> WatchlistDraft:
    return WatchlistDraft(
        id=550,
        title="Fight Club",
        media_type=MediaType.MOVIE,
        poster_path="/pB8BM7pdSp6B6Ih7QZ4DrQ3PmJK.jpg",
        vote_average=8.4,
        date_value="1999-10-15",
        genre_ids=(18, 53),
    )


def _game_of_thrones() -> WatchlistDraft:
    return WatchlistDraft(
        id=1399,
        title="Game of Thrones",
        media_type=MediaType.SERIES,
        poster_path="/1XS1oqL89opfnbLl8WnZY1O1uJx.jpg",
        vote_average=8.4,
        date_value="2011-04-17",
        genre_ids=(10765, 18),
    )


class _FailingPersistence:
    def __init__(self, items=None) -> None:
        self.items = list(items or [])

    def load(self):
        return list(self.items)

    def save(self, items) -> None:
        raise OSError("disk full")


class _ExplodingLoad:
    def load(self):
        raise RuntimeError("storage unavailable")

    def save(self, items) -> None:
        return None


class TestWatchlistStore(unittest.TestCase):
    def setUp(self) -> None:
        self.storage = InMemoryKeyValueStorage()
        self.persistence = LocalWatchlistPersistence(storage=self.storage, key=_KEY)

    def _store(self, clock=None) -> WatchlistStore:
        return WatchlistStore(persistence=self.persistence, clock=clock or _clock())

    def test_add_is_idempotent_and_keeps_added_at(self) -> None:
        store = self._store()
        store.add(_fight_club())
        first = store.get(550, MediaType.MOVIE)
        store.add(_fight_club())

        self.assertEqual(len(store), 1)
        self.assertEqual(store.get(550, MediaType.MOVIE).added_at, first.added_at)

    def test_same_id_different_media_type_are_distinct(self) -> None:
        store = self._store()
        store.add(WatchlistDraft(id=1399, title="A movie", media_type=MediaType.MOVIE))
        store.add(WatchlistDraft(id=1399, title="A series", media_type=MediaType.SERIES))

        self.assertEqual(len(store), 2)
        self.assertTrue(store.contains(1399, MediaType.MOVIE))
        self.assertTrue(store.contains(1399, MediaType.SERIES))

        store.remove(1399, MediaType.SERIES)
        self.assertTrue(store.contains(1399, MediaType.MOVIE))
        self.assertFalse(store.contains(1399, MediaType.SERIES))

    def test_remove_absent_key_is_a_noop(self) -> None:
        store = self._store()
        store.add(_fight_club())
        before = self.storage.get(_KEY)

        store.remove(42, MediaType.MOVIE)
        store.remove(550, MediaType.SERIES)

        self.assertEqual(len(store), 1)
        self.assertEqual(self.storage.get(_KEY), before)

    def test_media_type_defaults_to_movie(self) -> None:
        store = self._store()
        store.add(WatchlistDraft(id=13, title="Forrest Gump"))

        self.assertTrue(store.contains(13))
        self.assertTrue(store.contains(13, "movie"))
        self.assertEqual(store.get(13).media_type, MediaType.MOVIE)

    def test_items_survive_restart(self) -> None:
        store = self._store()
        store.add(_fight_club())
        store.add(_game_of_thrones())

        reloaded = self._store()
        self.assertEqual(reloaded.items, store.items)

    def test_corrupt_state_starts_empty_and_is_replaced(self) -> None:
        self.storage.set(_KEY, "{not json")
        store = self._store()
        self.assertEqual(len(store), 0)

        store.add(_fight_club())
        payload = json.loads(self.storage.get(_KEY))
        self.assertEqual([it["id"] for it in payload["items"]], [550])

    def test_load_failure_starts_empty(self) -> None:
        with self.assertLogs("application.watchlist.watchlist_store", level="WARNING"):
            store = WatchlistStore(persistence=_ExplodingLoad())
        self.assertEqual(store.items, ())

    def test_clear_empties_store_and_storage(self) -> None:
        store = self._store()
        store.add(_fight_club())
        store.add(_game_of_thrones())

        store.clear()

        self.assertEqual(len(store), 0)
        self.assertEqual(json.loads(self.storage.get(_KEY)), {"items": []})
        self.assertEqual(len(self._store()), 0)

    def test_fight_club_and_game_of_thrones_scenario(self) -> None:
        store = self._store()
        store.add(_fight_club())
        store.add(_game_of_thrones())

        self.assertTrue(store.contains(550, MediaType.MOVIE))
        self.assertTrue(store.contains(1399, MediaType.SERIES))
        self.assertFalse(store.contains(1399, MediaType.MOVIE))
        self.assertEqual([i.id for i in store.items], [550, 1399])

        store.remove(550, MediaType.MOVIE)
        self.assertEqual([i.key for i in store.items], [(1399, MediaType.SERIES)])

        payload = json.loads(self.storage.get(_KEY))
        self.assertEqual(len(payload["items"]), 1)
        stored = payload["items"][0]
        self.assertEqual(stored["id"], 1399)
        self.assertEqual(stored["mediaType"], "series")
        self.assertEqual(stored["title"], "Game of Thrones")
        self.assertEqual(stored["dateValue"], "2011-04-17")
        self.assertEqual(stored["genreIds"], [10765, 18])
        self.assertEqual(stored["addedAt"], "2024-01-01T00:00:01.000Z")

    def test_insertion_order_is_kept(self) -> None:
        store = self._store()
        for item_id in (3, 1, 2):
            store.add(WatchlistDraft(id=item_id, title=str(item_id)))
        self.assertEqual([i.id for i in store], [3, 1, 2])

    def test_toggle_flips_membership(self) -> None:
        store = self._store()
        self.assertTrue(store.toggle(_fight_club()))
        self.assertTrue(store.contains(550))
        self.assertFalse(store.toggle(_fight_club()))
        self.assertFalse(store.contains(550))

    def test_replace_all_keeps_first_occurrence_of_a_key(self) -> None:
        store = self._store()
        store.add(_fight_club())
        incoming = [
            WatchlistItem(id=1, media_type=MediaType.MOVIE, title="first", added_at="a"),
            WatchlistItem(id=1, media_type=MediaType.MOVIE, title="dupe", added_at="b"),
            WatchlistItem(id=1, media_type=MediaType.SERIES, title="series", added_at="c"),
        ]

        store.replace_all(incoming)

        self.assertEqual([(i.id, i.title) for i in store.items], [(1, "first"), (1, "series")])
        self.assertFalse(store.contains(550))
        self.assertEqual(len(json.loads(self.storage.get(_KEY))["items"]), 2)

    def test_extra_fields_named_like_legacy_keys_survive_restart(self) -> None:
        store = self._store()
        store.add(WatchlistDraft(id=7, title="T", extra={"name": "Original Name", "note": "n"}))

        reloaded = self._store()
        self.assertEqual(reloaded.items, store.items)
        self.assertEqual(reloaded.get(7).extra, {"name": "Original Name", "note": "n"})

    def test_random_operation_sequences_keep_keys_unique(self) -> None:
        ids = (1, 2, 3, 550)
        media_types = (None, MediaType.MOVIE, MediaType.SERIES)
        ticks = itertools.count()

        def clock() -> str:
            return f"t{next(ticks)}"

        for seed in range(5):
            rng = random.Random(seed)
            self.storage = InMemoryKeyValueStorage()
            self.persistence = LocalWatchlistPersistence(storage=self.storage, key=_KEY)
            store = self._store(clock=clock)
            expected: list[tuple] = []

            for _ in range(200):
                item_id = rng.choice(ids)
                media_type = rng.choice(media_types)
                key = (item_id, media_type or MediaType.MOVIE)
                op = rng.choice(("add", "remove", "toggle", "replace_all"))
                if op == "add":
                    store.add(WatchlistDraft(id=item_id, title=str(item_id), media_type=media_type))
                    if key not in expected:
                        expected.append(key)
                elif op == "remove":
                    store.remove(item_id, key[1])
                    if key in expected:
                        expected.remove(key)
                elif op == "toggle":
                    added = store.toggle(WatchlistDraft(id=item_id, title=str(item_id), media_type=media_type))
                    self.assertEqual(added, key not in expected)
                    if added:
                        expected.append(key)
                    else:
                        expected.remove(key)
                else:
                    incoming = [
                        WatchlistItem(id=rng.choice(ids), media_type=rng.choice(media_types[1:]), title="r", added_at="r")
                        for _ in range(rng.randint(0, 6))
                    ]
                    store.replace_all(incoming)
                    expected = []
                    for item in incoming:
                        if item.key not in expected:
                            expected.append(item.key)

                keys = [i.key for i in store.items]
                self.assertEqual(len(set(keys)), len(keys))
                self.assertEqual(keys, expected)
                self.assertEqual(store.contains(item_id, key[1]), key in expected)

            self.assertEqual(self._store().items, store.items)

    def test_duplicates_in_storage_are_collapsed_on_load(self) -> None:
        record = {"id": 550, "mediaType": "movie", "title": "Fight Club", "addedAt": "x"}
        self.storage.set(_KEY, json.dumps({"items": [record, dict(record, title="again")]}))

        store = self._store()
        self.assertEqual(len(store), 1)
        self.assertEqual(store.get(550).title, "Fight Club")

    def test_persist_failure_is_logged_not_raised(self) -> None:
        store = WatchlistStore(persistence=_FailingPersistence(), clock=_clock())
        with self.assertLogs("application.watchlist.watchlist_store", level="ERROR"):
            store.add(_fight_club())
        self.assertTrue(store.contains(550))

    def test_listeners_receive_snapshots_until_unsubscribed(self) -> None:
        store = self._store()
        seen: list[tuple] = []
        unsubscribe = store.subscribe(seen.append)

        store.add(_fight_club())
        store.add(_fight_club())
        store.remove(550)
        unsubscribe()
        store.add(_game_of_thrones())

        self.assertEqual(len(seen), 2)
        self.assertEqual([i.id for i in seen[0]], [550])
        self.assertEqual(seen[1], ())

    def test_failing_listener_does_not_break_mutation(self) -> None:
        store = self._store()

        def _boom(_items):
            raise RuntimeError("listener bug")

        store.subscribe(_boom)
        with self.assertLogs("application.watchlist.watchlist_store", level="ERROR"):
            store.add(_fight_club())
        self.assertTrue(store.contains(550))

    def test_default_clock_is_utc_iso(self) -> None:
        store = WatchlistStore(persistence=self.persistence)
        store.add(_fight_club())
        added_at = store.get(550).added_at
        self.assertTrue(added_at.endswith("Z"))
        self.assertRegex(added_at, r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


if __name__ == "__main__":
    unittest.main()
