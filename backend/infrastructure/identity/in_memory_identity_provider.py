from __future__ import annotations

from dataclasses import replace
from typing import Optional
from uuid import uuid4

from application.ports.identity_provider_port import IdentityProviderPort
from domain.auth import AuthUser, IdentityProviderError
from infrastructure.identity.base import AuthStateNotifier

_MIN_PASSWORD_LENGTH = 6


class InMemoryIdentityProvider(AuthStateNotifier, IdentityProviderPort):
    """Local accounts for dev/tests; mirrors the hosted provider's error codes."""

    def __init__(self) -> None:
        super().__init__()
        # email -> (password, user)
        self._accounts: dict[str, tuple[str, AuthUser]] = {}

    @staticmethod
    def _normalize_email(email: str) -> str:
        value = (email or "").strip().lower()
        if "@" not in value or value.startswith("@") or value.endswith("@"):
            raise IdentityProviderError("auth/invalid-email")
        return value

    async def sign_in_with_email(self, *, email: str, password: str) -> AuthUser:
        key = self._normalize_email(email)
        account = self._accounts.get(key)
        if account is None or account[0] != password:
            raise IdentityProviderError("auth/invalid-credential")
        self._set_user(account[1])
        return account[1]

    async def sign_up_with_email(self, *, email: str, password: str) -> AuthUser:
        key = self._normalize_email(email)
        if key in self._accounts:
            raise IdentityProviderError("auth/email-already-in-use")
        if len(password or "") < _MIN_PASSWORD_LENGTH:
            raise IdentityProviderError("auth/weak-password")
        user = AuthUser(user_id=uuid4().hex, email=key)
        self._accounts[key] = (password, user)
        self._set_user(user)
        return user

    async def update_profile(self, *, display_name: Optional[str] = None) -> AuthUser:
        user = self.current_user
        if user is None or user.email is None:
            raise IdentityProviderError("auth/user-not-found")
        updated = replace(user, display_name=display_name) if display_name is not None else user
        password, _ = self._accounts[user.email]
        self._accounts[user.email] = (password, updated)
        self._set_user(updated)
        return updated

    async def sign_out(self) -> None:
        self._set_user(None)

    async def close(self) -> None:
        return None
