from domain.auth.auth_user import AuthState, AuthUser
from domain.auth.errors import DEFAULT_AUTH_ERROR_MESSAGE, IdentityProviderError, auth_error_message
from domain.auth.user_profile import UserProfile

__all__ = [
    "AuthState",
    "AuthUser",
    "DEFAULT_AUTH_ERROR_MESSAGE",
    "IdentityProviderError",
    "UserProfile",
    "auth_error_message",
]
