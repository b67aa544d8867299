from __future__ import annotations

from typing import Callable, Optional, Protocol

from domain.auth import AuthUser

AuthListener = Callable[[Optional[AuthUser]], None]
Unsubscribe = Callable[[], None]


class IdentityProviderPort(Protocol):
    """Account sign-in/out plus an auth-state notification stream.

    Failures raise `domain.auth.IdentityProviderError`.
    """

    def subscribe(self, listener: AuthListener) -> Unsubscribe:
        """Register for auth-state changes.

        The listener receives the current user (or None) right away and then
        once per change.
        """
        ...

    async def sign_in_with_email(self, *, email: str, password: str) -> AuthUser:
        ...

    async def sign_up_with_email(self, *, email: str, password: str) -> AuthUser:
        ...

    async def update_profile(self, *, display_name: Optional[str] = None) -> AuthUser:
        ...

    async def sign_out(self) -> None:
        ...

    async def close(self) -> None:
        ...
