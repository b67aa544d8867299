from __future__ import annotations

import logging
from typing import Callable, Optional

from application.ports.identity_provider_port import IdentityProviderPort, Unsubscribe
from domain.auth import AuthState, AuthUser

logger = logging.getLogger(__name__)

AuthStateListener = Callable[[AuthState, AuthState], None]


class AuthStateMirror:
    """Mirror of the identity provider's current user.

    State machine: loading -> authenticated(user) | anonymous. Only provider
    notifications move it; sign-in/out calls are observed back through the
    same channel, never applied optimistically.
    """

    def __init__(self, *, provider: IdentityProviderPort) -> None:
        self._provider = provider
        self._state = AuthState()
        self._provider_unsubscribe: Optional[Unsubscribe] = None
        self._listeners: list[AuthStateListener] = []

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def current_user(self) -> Optional[AuthUser]:
        return self._state.user

    def start(self) -> None:
        if self._provider_unsubscribe is not None:
            return
        self._provider_unsubscribe = self._provider.subscribe(self._on_provider_change)

    def stop(self) -> None:
        if self._provider_unsubscribe is None:
            return
        unsubscribe, self._provider_unsubscribe = self._provider_unsubscribe, None
        unsubscribe()

    def subscribe(self, listener: AuthStateListener) -> Callable[[], None]:
        """Listen for transitions; the listener gets (previous, current)."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _on_provider_change(self, user: Optional[AuthUser]) -> None:
        previous = self._state
        self._state = AuthState(user=user, is_loading=False)
        logger.info(
            "auth state %s -> %s user_id=%s",
            previous.status,
            self._state.status,
            user.user_id if user else None,
        )
        for listener in list(self._listeners):
            try:
                listener(previous, self._state)
            except Exception:
                logger.exception("auth state listener failed")
