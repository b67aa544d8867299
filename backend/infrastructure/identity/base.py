from __future__ import annotations

import logging
from typing import Optional

from application.ports.identity_provider_port import AuthListener, Unsubscribe
from domain.auth import AuthUser

logger = logging.getLogger(__name__)


class AuthStateNotifier:
    """Listener bookkeeping shared by identity providers.

    New listeners get the current user immediately, then every change.
    """

    def __init__(self) -> None:
        self._current_user: Optional[AuthUser] = None
        self._listeners: list[AuthListener] = []

    @property
    def current_user(self) -> Optional[AuthUser]:
        return self._current_user

    def subscribe(self, listener: AuthListener) -> Unsubscribe:
        self._listeners.append(listener)
        self._call(listener, self._current_user)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _set_user(self, user: Optional[AuthUser]) -> None:
        self._current_user = user
        for listener in list(self._listeners):
            self._call(listener, user)

    @staticmethod
    def _call(listener: AuthListener, user: Optional[AuthUser]) -> None:
        try:
            listener(user)
        except Exception:
            logger.exception("auth listener failed")
