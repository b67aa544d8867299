import sys
import unittest
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from application.auth.auth_state import AuthStateMirror
from domain.auth import AuthState, AuthUser


class _ManualProvider:
    """Identity provider double: notifications are pushed by the test."""

    def __init__(self) -> None:
        self.listeners: list = []
        self.subscribe_calls = 0

    def subscribe(self, listener):
        self.subscribe_calls += 1
        self.listeners.append(listener)

        def _unsubscribe() -> None:
            self.listeners.remove(listener)

        return _unsubscribe

    def emit(self, user) -> None:
        for listener in list(self.listeners):
            listener(user)


class TestAuthStateMirror(unittest.TestCase):
    def test_initial_state_is_loading(self) -> None:
        mirror = AuthStateMirror(provider=_ManualProvider())
        self.assertTrue(mirror.state.is_loading)
        self.assertIsNone(mirror.current_user)
        self.assertEqual(mirror.state.status, "loading")

    def test_first_notification_settles_loading(self) -> None:
        provider = _ManualProvider()
        mirror = AuthStateMirror(provider=provider)
        mirror.start()

        provider.emit(None)
        self.assertEqual(mirror.state, AuthState(user=None, is_loading=False))
        self.assertEqual(mirror.state.status, "anonymous")

        user = AuthUser(user_id="u1", email="a@b.c", display_name="Ann")
        provider.emit(user)
        self.assertEqual(mirror.current_user, user)
        self.assertTrue(mirror.state.is_authenticated)

        provider.emit(None)
        self.assertEqual(mirror.state.status, "anonymous")
        self.assertFalse(mirror.state.is_loading)

    def test_start_is_idempotent_and_stop_detaches(self) -> None:
        provider = _ManualProvider()
        mirror = AuthStateMirror(provider=provider)
        mirror.start()
        mirror.start()
        self.assertEqual(provider.subscribe_calls, 1)

        mirror.stop()
        self.assertEqual(provider.listeners, [])
        provider.emit(AuthUser(user_id="u1"))
        self.assertTrue(mirror.state.is_loading)

    def test_listeners_get_previous_and_current(self) -> None:
        provider = _ManualProvider()
        mirror = AuthStateMirror(provider=provider)
        transitions: list[tuple[str, str]] = []
        unsubscribe = mirror.subscribe(lambda prev, cur: transitions.append((prev.status, cur.status)))
        mirror.start()

        provider.emit(None)
        provider.emit(AuthUser(user_id="u1"))
        unsubscribe()
        provider.emit(None)

        self.assertEqual(transitions, [("loading", "anonymous"), ("anonymous", "authenticated")])

    def test_failing_listener_is_logged(self) -> None:
        provider = _ManualProvider()
        mirror = AuthStateMirror(provider=provider)

        def _boom(prev, cur):
            raise RuntimeError("bug")

        mirror.subscribe(_boom)
        mirror.start()
        with self.assertLogs("application.auth.auth_state", level="ERROR"):
            provider.emit(AuthUser(user_id="u1"))
        self.assertEqual(mirror.current_user.user_id, "u1")


if __name__ == "__main__":
    unittest.main()
