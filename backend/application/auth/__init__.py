from application.auth.auth_service import AuthResult, AuthService
from application.auth.auth_state import AuthStateMirror

__all__ = ["AuthResult", "AuthService", "AuthStateMirror"]
