"""
Marketplace — Google Sign-In ID token verification.

The frontend obtains an ID token from Google Identity Services and POSTs it
to /auth/google.  This module checks the token signature, audience and expiry
with google-auth and returns a normalized GoogleIdentity.

Verification fetches Google's public certificates over HTTP on every call, so
it runs in the thread pool rather than on the event loop.  One transport is
shared so the underlying requests.Session keeps its connection pool.
"""
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from starlette.concurrency import run_in_threadpool

from app.auth.utils import split_display_name

logger = logging.getLogger(__name__)

_transport = google_requests.Request()


@dataclass(frozen=True, slots=True)
class GoogleIdentity:
    google_id: str          # "sub" claim, stable per Google account
    email: str
    first_name: str
    last_name: str
    email_verified: bool


# Signature of the verifier injected into the auth controller. Returns None
# when the token is not acceptable.
GoogleVerifier = Callable[[str], Awaitable["GoogleIdentity | None"]]


def identity_from_claims(claims: dict) -> GoogleIdentity | None:
    sub = claims.get("sub")
    email = claims.get("email")
    if not sub or not email:
        return None

    first_name = claims.get("given_name")
    last_name = claims.get("family_name") or ""
    if not first_name:
        first_name, last_name = split_display_name(
            claims.get("name"), fallback=email.split("@")[0]
        )
    return GoogleIdentity(
        google_id=sub,
        email=email,
        first_name=first_name,
        last_name=last_name,
        email_verified=bool(claims.get("email_verified", False)),
    )


async def verify_google_id_token(token: str, *, client_id: str) -> GoogleIdentity | None:
    """
    Verify a Google ID token and return the identity it asserts.

    Returns None for any token Google would not vouch for (bad signature,
    wrong audience, expired, unverified email).  Transport failures reaching
    Google propagate: they are infrastructure errors, not bad credentials.
    """
    if not client_id:
        logger.error("GOOGLE_CLIENT_ID is not configured; rejecting Google sign-in")
        return None

    try:
        claims = await run_in_threadpool(
            id_token.verify_oauth2_token,
            token,
            _transport,
            client_id,
        )
    except google_exceptions.TransportError:
        raise
    except (ValueError, google_exceptions.GoogleAuthError) as exc:
        logger.info("Google ID token rejected: %s", exc)
        return None

    identity = identity_from_claims(claims)
    if identity is None or not identity.email_verified:
        return None
    return identity
