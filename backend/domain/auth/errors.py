from __future__ import annotations

from typing import Optional

DEFAULT_AUTH_ERROR_MESSAGE = "An error occurred. Please try again."

_AUTH_ERROR_MESSAGES: dict[str, str] = {
    "auth/email-already-in-use": "This email is already registered. Try signing in instead.",
    "auth/invalid-email": "Please enter a valid email address.",
    "auth/operation-not-allowed": "This sign-in method is not enabled.",
    "auth/weak-password": "Password should be at least 6 characters.",
    "auth/user-disabled": "This account has been disabled.",
    "auth/user-not-found": "No account found with this email.",
    "auth/wrong-password": "Incorrect password. Please try again.",
    "auth/invalid-credential": "Invalid email or password. Please try again.",
    "auth/too-many-requests": "Too many failed attempts. Please try again later.",
    "auth/popup-closed-by-user": "Sign-in was cancelled.",
}


class IdentityProviderError(RuntimeError):
    """Identity provider failure carrying a provider-neutral `auth/...` code."""

    def __init__(self, code: str, message: Optional[str] = None) -> None:
        self.code = (code or "").strip() or "auth/unknown"
        super().__init__(message or self.code)


def auth_error_message(code: Optional[str]) -> str:
    """User-facing message for an `auth/...` error code."""
    return _AUTH_ERROR_MESSAGES.get((code or "").strip(), DEFAULT_AUTH_ERROR_MESSAGE)
