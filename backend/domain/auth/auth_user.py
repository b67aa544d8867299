from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthUser:
    """Identity projection mirrored from the identity provider."""

    user_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    email_verified: bool = False


@dataclass(frozen=True)
class AuthState:
    user: Optional[AuthUser] = None
    # True until the first provider notification arrives.
    is_loading: bool = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def status(self) -> str:
        if self.is_loading:
            return "loading"
        return "authenticated" if self.user is not None else "anonymous"
