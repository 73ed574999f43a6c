import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.database import init_db
from app.rate_limit import limiter
from app.admin.router import router as admin_router
from app.auth.router import router as auth_router
from app.cart.router import router as cart_router
from app.catalog.router import router as catalog_router
from app.users.router import router as users_router
from shared.middleware.error_handler import (
    error_envelope_middleware,
    http_exception_handler,
    rate_limit_exceeded_handler,
    validation_exception_handler,
)
from shared.middleware.request_id import request_id_middleware

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## iSafari Marketplace API

Backend for the iSafari travel and booking marketplace:

* **Authentication** — email/password registration and login, Google Sign-In with a
  one-time role choice for new identities, stateless JWT access tokens (7 days).
* **Accounts** — travelers, service providers and admins. A role is chosen once at
  sign-up; afterwards only an admin can change it.
* **Account linking** — a password account that signs in with Google (or a Google
  account that sets a password) accepts both methods from then on.
* **Catalog** — service listings published by providers.
* **Cart** — a per-user cart persisted server-side.

### Authentication
Protected endpoints require:
```
Authorization: Bearer <access_token>
```
Admin endpoints additionally require the `admin` role in the token.

### Error shape
All errors return a consistent JSON envelope:
```json
{ "error": { "code": "MACHINE_CODE", "message": "Human-readable message" }, "request_id": "..." }
```
Validation errors return `400` with `code: VALIDATION_ERROR` and the Pydantic error list
under `error.details`.

### Rate limits
`429 Too Many Requests` with `code: RATE_LIMITED` is returned when a sign-in rate limit
is exceeded.
"""

_TAGS_METADATA = [
    {
        "name": "auth",
        "description": "Registration, password login and Google Sign-In.",
    },
    {
        "name": "users",
        "description": (
            "Own profile, password management and other users' public profiles. "
            "Role fields sent by non-admins are stripped on `/users/me` and rejected "
            "with 403 on `/users/{user_id}`."
        ),
    },
    {
        "name": "catalog",
        "description": "Browse service listings; providers publish new ones.",
    },
    {
        "name": "cart",
        "description": (
            "The caller's cart. Adding a service already in the cart increments its "
            "quantity; setting a quantity of 0 removes the line item."
        ),
    },
    {
        "name": "admin-users",
        "description": "**Admin only.** List and filter users, change roles, deactivate accounts.",
    },
]


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── App factory ───────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.database_url)
    logger.info("Marketplace service started (env=%s)", settings.env_name)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="iSafari Marketplace Service",
        version="1.0.0",
        description=_DESCRIPTION,
        openapi_tags=_TAGS_METADATA,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Attach rate limiter state before middleware
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Middleware is applied in reverse-registration order (last added = outermost).
    # CORS must be outermost so ALL responses (including 429s) carry CORS headers.
    app.add_middleware(SlowAPIMiddleware)
    app.middleware("http")(error_envelope_middleware)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(users_router, prefix="/api/v1")
    app.include_router(catalog_router, prefix="/api/v1")
    app.include_router(cart_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")

    @app.get("/health", response_model=HealthResponse, tags=["health"], include_in_schema=True)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="marketplace")

    return app


app = create_app()
