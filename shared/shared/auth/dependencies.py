import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shared.auth.config import AuthSettings
from shared.auth.tokens import TokenClaims, verify_access_token
from shared.models.user import CurrentUser

logger = logging.getLogger(__name__)

http_bearer = HTTPBearer(auto_error=False)


def get_auth_settings() -> AuthSettings:
    return AuthSettings()


def _claims_to_user(claims: TokenClaims) -> CurrentUser:
    return CurrentUser(id=claims.id, email=claims.email, role=claims.role)


async def get_current_user_optional(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    settings: AuthSettings = Depends(get_auth_settings),
) -> CurrentUser | None:
    if not credentials or not credentials.credentials:
        return None
    verification = verify_access_token(credentials.credentials, settings)
    if not verification.ok:
        logger.debug("Rejected bearer token: %s", verification.failure.value)
        return None
    return _claims_to_user(verification.claims)


async def get_current_user_required(
    user: CurrentUser | None = Depends(get_current_user_optional),
) -> CurrentUser:
    # Expired, forged and malformed tokens all collapse into the same 401.
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
