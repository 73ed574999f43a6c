from shared.auth.config import AuthSettings
from shared.auth.tokens import (
    TokenClaims,
    TokenFailure,
    TokenVerification,
    create_access_token,
    verify_access_token,
)

__all__ = [
    "AuthSettings",
    "TokenClaims",
    "TokenFailure",
    "TokenVerification",
    "create_access_token",
    "verify_access_token",
]
