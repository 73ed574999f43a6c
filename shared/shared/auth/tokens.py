"""
Access token issuance and verification.

Tokens are stateless HS256 JWTs carrying the user's id, email and role.
The role is a snapshot taken at issuance: a later role change by an admin
only shows up once the client obtains a new token.
"""
from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from shared.auth.config import AuthSettings
from shared.constants import Role

DEFAULT_EXPIRE_SECONDS: int = 604_800  # 7 days


class TokenFailure(str, enum.Enum):
    EXPIRED = "EXPIRED"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    MALFORMED = "MALFORMED"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    id: uuid.UUID
    email: str
    role: Role


@dataclass(frozen=True, slots=True)
class TokenVerification:
    claims: TokenClaims | None = None
    failure: TokenFailure | None = None

    @property
    def ok(self) -> bool:
        return self.claims is not None


def create_access_token(
    *,
    user_id: uuid.UUID,
    email: str,
    role: Role | str,
    secret: str,
    algorithm: str,
    issuer: str,
    audience: str,
    expire_seconds: int = DEFAULT_EXPIRE_SECONDS,
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": Role(role).value,
        "iat": now,
        "exp": now + timedelta(seconds=expire_seconds),
        "iss": issuer,
        "aud": audience,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def _claims_from_payload(payload: dict) -> TokenClaims:
    return TokenClaims(
        id=uuid.UUID(payload["sub"]),
        email=payload.get("email") or "",
        role=Role(payload["role"]),
    )


def verify_access_token(token: str, settings: AuthSettings) -> TokenVerification:
    # Structural check first so a garbled token is not reported as a bad signature.
    try:
        jwt.get_unverified_claims(token)
    except JWTError:
        return TokenVerification(failure=TokenFailure.MALFORMED)

    try:
        payload = jwt.decode(
            token,
            settings.secret,
            algorithms=[settings.algorithm],
            issuer=settings.issuer,
            audience=settings.audience,
        )
    except ExpiredSignatureError:
        return TokenVerification(failure=TokenFailure.EXPIRED)
    except JWTError:
        return TokenVerification(failure=TokenFailure.INVALID_SIGNATURE)

    try:
        claims = _claims_from_payload(payload)
    except (KeyError, TypeError, ValueError):
        return TokenVerification(failure=TokenFailure.MALFORMED)
    return TokenVerification(claims=claims)
