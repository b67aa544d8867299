from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from application.ports.identity_provider_port import IdentityProviderPort
from application.ports.remote_profile_store_port import RemoteProfileStorePort
from domain.auth import AuthUser, IdentityProviderError, UserProfile, auth_error_message

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_CREATE_TIMEOUT_S = 5.0


@dataclass(frozen=True)
class AuthResult:
    user: Optional[AuthUser] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _error_text(exc: Exception) -> str:
    if isinstance(exc, IdentityProviderError):
        return auth_error_message(exc.code)
    return str(exc) or exc.__class__.__name__


class AuthService:
    """Sign-in/up/out through the identity provider.

    Results carry a user-facing error instead of raising. The resulting
    auth state is not applied here; it comes back through the provider's
    notification stream (see AuthStateMirror).
    """

    def __init__(
        self,
        *,
        provider: IdentityProviderPort,
        profile_store: RemoteProfileStorePort,
        profile_create_timeout_s: float = DEFAULT_PROFILE_CREATE_TIMEOUT_S,
    ) -> None:
        self._provider = provider
        self._profile_store = profile_store
        self._profile_create_timeout_s = float(profile_create_timeout_s)

    async def sign_in_with_email(self, email: str, password: str) -> AuthResult:
        try:
            user = await self._provider.sign_in_with_email(email=email, password=password)
        except Exception as exc:
            logger.error("Email sign-in error: %s", exc)
            return AuthResult(error=_error_text(exc))
        return AuthResult(user=user)

    async def sign_up_with_email(self, email: str, password: str, display_name: str) -> AuthResult:
        try:
            user = await self._provider.sign_up_with_email(email=email, password=password)
            user = await self._provider.update_profile(display_name=display_name)
        except Exception as exc:
            logger.error("Email sign-up error: %s", exc)
            return AuthResult(error=_error_text(exc))

        # The account exists at this point; a missing profile document must
        # not turn the sign-up into a failure.
        profile = UserProfile(
            email=email,
            display_name=display_name,
            created_at=datetime.now(timezone.utc).isoformat(),
            watchlist=(),
        )
        try:
            await asyncio.wait_for(
                self._profile_store.create_profile(user_id=user.user_id, profile=profile),
                timeout=self._profile_create_timeout_s,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Profile creation timed out after %.1fs user_id=%s",
                self._profile_create_timeout_s,
                user.user_id,
            )
        except Exception as exc:
            logger.warning("Profile creation failed user_id=%s: %s", user.user_id, exc)

        return AuthResult(user=user)

    async def sign_out(self) -> AuthResult:
        try:
            await self._provider.sign_out()
        except Exception as exc:
            logger.error("Sign-out error: %s", exc)
            return AuthResult(error=str(exc) or exc.__class__.__name__)
        return AuthResult()
