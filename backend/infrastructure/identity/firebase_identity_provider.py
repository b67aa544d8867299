from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import aiohttp

from application.ports.identity_provider_port import IdentityProviderPort
from domain.auth import AuthUser, IdentityProviderError
from infrastructure.config.settings import (
    FIREBASE_API_KEY,
    FIREBASE_AUTH_BASE_URL,
    FIREBASE_TIMEOUT_S,
    FIREBASE_TOKEN_BASE_URL,
)
from infrastructure.identity.base import AuthStateNotifier

logger = logging.getLogger(__name__)

# Identity Toolkit error message -> provider-neutral auth code.
_REST_ERROR_CODES = {
    "EMAIL_EXISTS": "auth/email-already-in-use",
    "INVALID_EMAIL": "auth/invalid-email",
    "MISSING_EMAIL": "auth/invalid-email",
    "OPERATION_NOT_ALLOWED": "auth/operation-not-allowed",
    "PASSWORD_LOGIN_DISABLED": "auth/operation-not-allowed",
    "WEAK_PASSWORD": "auth/weak-password",
    "USER_DISABLED": "auth/user-disabled",
    "EMAIL_NOT_FOUND": "auth/user-not-found",
    "USER_NOT_FOUND": "auth/user-not-found",
    "INVALID_PASSWORD": "auth/wrong-password",
    "INVALID_LOGIN_CREDENTIALS": "auth/invalid-credential",
    "INVALID_ID_TOKEN": "auth/invalid-credential",
    "TOKEN_EXPIRED": "auth/invalid-credential",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "auth/too-many-requests",
}

# Refresh this many seconds before the ID token actually expires.
_TOKEN_REFRESH_MARGIN_S = 60.0


def _error_code_from_payload(payload: Any) -> str:
    """Map `{"error": {"message": "WEAK_PASSWORD : ..."}}` to an auth code."""
    message = ""
    if isinstance(payload, dict):
        err = payload.get("error")
        if isinstance(err, dict):
            message = str(err.get("message") or "")
    head = message.split(":", 1)[0].strip().upper()
    return _REST_ERROR_CODES.get(head, "auth/internal-error")


@dataclass
class _Session:
    user_id: str
    id_token: str
    refresh_token: str
    expires_at: float


class FirebaseIdentityProvider(AuthStateNotifier, IdentityProviderPort):
    """Email/password accounts over the Firebase Identity Toolkit REST API.

    Keeps the signed-in session (ID + refresh token) in memory and notifies
    subscribers on sign-in, profile update and sign-out.
    """

    def __init__(
        self,
        *,
        api_key: str = FIREBASE_API_KEY,
        auth_base_url: str = FIREBASE_AUTH_BASE_URL,
        token_base_url: str = FIREBASE_TOKEN_BASE_URL,
        timeout_s: float = FIREBASE_TIMEOUT_S,
    ) -> None:
        super().__init__()
        self._api_key = (api_key or "").strip()
        self._auth_base_url = (auth_base_url or "").rstrip("/")
        self._token_base_url = (token_base_url or "").rstrip("/")
        self._timeout_s = float(timeout_s or 10.0)
        self._session_state: Optional[_Session] = None
        self._http: aiohttp.ClientSession | None = None
        self._lock = asyncio.Lock()

    async def _get_http(self) -> aiohttp.ClientSession:
        if self._http is not None and not self._http.closed:
            return self._http

        async with self._lock:
            if self._http is not None and not self._http.closed:
                return self._http

            timeout = aiohttp.ClientTimeout(total=self._timeout_s)
            self._http = aiohttp.ClientSession(timeout=timeout)
            return self._http

    async def _post(self, url: str, *, json_body: Optional[dict] = None, form: Optional[dict] = None) -> dict[str, Any]:
        if not self._api_key:
            raise IdentityProviderError("auth/operation-not-allowed", "FIREBASE_API_KEY is not set")
        try:
            http = await self._get_http()
            async with http.post(url, params={"key": self._api_key}, json=json_body, data=form) as resp:
                data = await resp.json(content_type=None)
                if resp.status >= 400:
                    code = _error_code_from_payload(data)
                    raise IdentityProviderError(code, f"identity request failed ({resp.status}): {code}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise IdentityProviderError("auth/network-request-failed", f"identity request failed: {exc!r}") from exc
        except ValueError as exc:
            raise IdentityProviderError("auth/internal-error", f"identity response unreadable: {exc}") from exc
        return data if isinstance(data, dict) else {}

    def _accounts_url(self, action: str) -> str:
        return f"{self._auth_base_url}/accounts:{action}"

    def _start_session(self, data: dict[str, Any]) -> _Session:
        session = _Session(
            user_id=str(data.get("localId") or ""),
            id_token=str(data.get("idToken") or ""),
            refresh_token=str(data.get("refreshToken") or ""),
            expires_at=time.monotonic() + float(data.get("expiresIn") or 3600),
        )
        self._session_state = session
        return session

    async def _lookup(self, id_token: str) -> AuthUser:
        data = await self._post(self._accounts_url("lookup"), json_body={"idToken": id_token})
        users = data.get("users") or []
        raw = users[0] if users and isinstance(users[0], dict) else {}
        return AuthUser(
            user_id=str(raw.get("localId") or ""),
            email=raw.get("email"),
            display_name=raw.get("displayName"),
            avatar_url=raw.get("photoUrl"),
            email_verified=bool(raw.get("emailVerified", False)),
        )

    async def get_id_token(self) -> Optional[str]:
        """Current ID token, refreshed when close to expiry; None when signed out."""
        session = self._session_state
        if session is None:
            return None
        if time.monotonic() < session.expires_at - _TOKEN_REFRESH_MARGIN_S:
            return session.id_token
        data = await self._post(
            f"{self._token_base_url}/token",
            form={"grant_type": "refresh_token", "refresh_token": session.refresh_token},
        )
        session.id_token = str(data.get("id_token") or session.id_token)
        session.refresh_token = str(data.get("refresh_token") or session.refresh_token)
        session.expires_at = time.monotonic() + float(data.get("expires_in") or 3600)
        return session.id_token

    async def sign_in_with_email(self, *, email: str, password: str) -> AuthUser:
        data = await self._post(
            self._accounts_url("signInWithPassword"),
            json_body={"email": email, "password": password, "returnSecureToken": True},
        )
        session = self._start_session(data)
        user = await self._lookup(session.id_token)
        self._set_user(user)
        logger.info("Firebase sign-in user_id=%s", user.user_id)
        return user

    async def sign_up_with_email(self, *, email: str, password: str) -> AuthUser:
        data = await self._post(
            self._accounts_url("signUp"),
            json_body={"email": email, "password": password, "returnSecureToken": True},
        )
        session = self._start_session(data)
        user = await self._lookup(session.id_token)
        self._set_user(user)
        logger.info("Firebase sign-up user_id=%s", user.user_id)
        return user

    async def update_profile(self, *, display_name: Optional[str] = None) -> AuthUser:
        id_token = await self.get_id_token()
        if not id_token:
            raise IdentityProviderError("auth/user-not-found", "no signed-in user")
        body: dict[str, Any] = {"idToken": id_token, "returnSecureToken": False}
        if display_name is not None:
            body["displayName"] = display_name
        await self._post(self._accounts_url("update"), json_body=body)
        user = await self._lookup(id_token)
        self._set_user(user)
        return user

    async def sign_out(self) -> None:
        # Tokens are bearer credentials; dropping them is the sign-out.
        self._session_state = None
        self._set_user(None)

    async def close(self) -> None:
        if self._http is not None and not self._http.closed:
            await self._http.close()
        self._http = None
