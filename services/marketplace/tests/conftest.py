import os

# Must be set before app modules read their settings.
os.environ["JWT_SECRET"] = "test-secret-key-with-enough-entropy"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["GOOGLE_CLIENT_ID"] = "test-client.apps.googleusercontent.com"

from collections.abc import AsyncGenerator, Awaitable, Callable
from decimal import Decimal

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.auth.constants import AuthProvider
from app.auth.dependencies import get_google_verifier
from app.auth.google import GoogleIdentity
from app.auth.models import User
from app.auth.utils import hash_password
from app.catalog.models import Service
from app.config import get_settings
from app.database import get_db
from app.main import create_app
from shared.auth.tokens import create_access_token
from shared.constants import Role
from shared.database.postgres import Base

DEFAULT_PASSWORD = "correct-horse-battery"


class FakeGoogleVerifier:
    """Maps ID token strings to the identity Google would vouch for."""

    def __init__(self) -> None:
        self.identities: dict[str, GoogleIdentity] = {}

    def register(self, token: str, *, google_id: str, email: str, name: str = "Test User") -> GoogleIdentity:
        first, _, last = name.partition(" ")
        identity = GoogleIdentity(
            google_id=google_id,
            email=email,
            first_name=first,
            last_name=last,
            email_verified=True,
        )
        self.identities[token] = identity
        return identity

    async def __call__(self, token: str) -> GoogleIdentity | None:
        return self.identities.get(token)


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    # File-backed so every session gets its own connection, as in production.
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'marketplace.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def google() -> FakeGoogleVerifier:
    return FakeGoogleVerifier()


@pytest.fixture
def app(session_factory, google: FakeGoogleVerifier) -> FastAPI:
    application = create_app()

    async def _get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db] = _get_db
    application.dependency_overrides[get_google_verifier] = lambda: google
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ── Data helpers ──────────────────────────────────────────────────────────────

@pytest.fixture
def make_user(session_factory) -> Callable[..., Awaitable[User]]:
    """Insert and commit a user; returns the detached record."""

    async def _make(
        email: str,
        *,
        role: Role = Role.TRAVELER,
        password: str | None = DEFAULT_PASSWORD,
        google_id: str | None = None,
        is_active: bool = True,
        first_name: str = "Test",
        last_name: str = "User",
    ) -> User:
        if password is not None and google_id is not None:
            provider = AuthProvider.BOTH
        elif google_id is not None:
            provider = AuthProvider.GOOGLE
        else:
            provider = AuthProvider.EMAIL
        user = User(
            email=email,
            password_hash=hash_password(password) if password is not None else None,
            google_id=google_id,
            first_name=first_name,
            last_name=last_name,
            role=role,
            auth_provider=provider,
            is_active=is_active,
        )
        async with session_factory() as session:
            session.add(user)
            await session.commit()
        return user

    return _make


@pytest.fixture
def make_service(session_factory) -> Callable[..., Awaitable[Service]]:
    async def _make(
        provider: User,
        *,
        title: str = "Serengeti game drive",
        price: str = "120.00",
        category: str = "safari",
        is_active: bool = True,
    ) -> Service:
        service = Service(
            provider_id=provider.id,
            title=title,
            category=category,
            location="Arusha",
            price=Decimal(price),
            is_active=is_active,
        )
        async with session_factory() as session:
            session.add(service)
            await session.commit()
        return service

    return _make


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    settings = get_settings()

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(
            user_id=user.id,
            email=user.email,
            role=user.role,
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
