import pytest

from app.config import get_settings
from app.rate_limit import limiter
from shared.auth.tokens import verify_access_token
from shared.auth.dependencies import get_auth_settings


def _role_in(token: str) -> str:
    result = verify_access_token(token, get_auth_settings())
    assert result.ok, result.failure
    return result.claims.role.value


async def _register(client, email: str = "a@test.com", role: str = "traveler", password: str = "password123"):
    return await client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": password, "firstName": "Asha", "lastName": "Mollel", "role": role},
    )


# ── Email + Password ──────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_register_and_login(client) -> None:
    reg = await _register(client)
    assert reg.status_code == 201
    data = reg.json()
    assert data["tokenType"] == "bearer"
    assert data["expiresIn"] == get_settings().jwt_expire_seconds
    assert data["needsRoleSelection"] is False
    assert data["user"]["email"] == "a@test.com"
    assert data["user"]["role"] == "traveler"
    assert data["user"]["authProvider"] == "email"
    assert "passwordHash" not in data["user"]
    assert _role_in(data["token"]) == "traveler"

    login = await client.post(
        "/api/v1/auth/login", json={"email": "A@Test.com", "password": "password123"}
    )
    assert login.status_code == 200
    assert _role_in(login.json()["token"]) == "traveler"


@pytest.mark.asyncio
async def test_login_wrong_password(client) -> None:
    await _register(client)
    response = await client.post(
        "/api/v1/auth/login", json={"email": "a@test.com", "password": "wrong-password"}
    )
    assert response.status_code == 401
    body = response.json()
    assert body["error"]["code"] == "INVALID_CREDENTIALS"
    assert "token" not in body
    assert body["request_id"]


@pytest.mark.asyncio
async def test_register_snake_case_input_accepted(client) -> None:
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": "snake@test.com", "password": "password123", "first_name": "Sam", "role": "service_provider"},
    )
    assert response.status_code == 201
    assert response.json()["user"]["role"] == "service_provider"


@pytest.mark.asyncio
async def test_register_duplicate_email(client) -> None:
    await _register(client)
    response = await _register(client, email="A@test.com")
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_EMAIL"


@pytest.mark.asyncio
async def test_register_admin_role_rejected(client) -> None:
    response = await _register(client, email="admin@test.com", role="admin")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_register_validation_error_envelope(client) -> None:
    response = await client.post("/api/v1/auth/register", json={"email": "not-an-email", "password": "x"})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert isinstance(error["details"], list) and error["details"]


@pytest.mark.asyncio
async def test_login_inactive_account(client, make_user) -> None:
    await make_user("inactive@test.com", is_active=False)
    response = await client.post(
        "/api/v1/auth/login", json={"email": "inactive@test.com", "password": "correct-horse-battery"}
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "ACCOUNT_INACTIVE"


# ── Google Sign-In ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_google_new_user_selects_role(client, google) -> None:
    google.register("tok-new", google_id="g-new", email="new@test.com", name="Neema Kileo")

    first = await client.post("/api/v1/auth/google", json={"idToken": "tok-new"})
    assert first.status_code == 200
    assert first.json() == {
        "user": None,
        "token": None,
        "tokenType": "bearer",
        "expiresIn": None,
        "needsRoleSelection": True,
    }

    second = await client.post(
        "/api/v1/auth/google", json={"idToken": "tok-new", "role": "service_provider"}
    )
    assert second.status_code == 200
    data = second.json()
    assert data["needsRoleSelection"] is False
    assert data["user"]["role"] == "service_provider"
    assert data["user"]["authProvider"] == "google"
    assert data["user"]["firstName"] == "Neema"
    assert _role_in(data["token"]) == "service_provider"


@pytest.mark.asyncio
async def test_google_returning_user_ignores_role(client, google) -> None:
    google.register("tok", google_id="g-1", email="back@test.com")
    await client.post("/api/v1/auth/google", json={"idToken": "tok", "role": "traveler"})

    again = await client.post(
        "/api/v1/auth/google", json={"idToken": "tok", "role": "service_provider"}
    )
    assert again.status_code == 200
    assert again.json()["needsRoleSelection"] is False
    assert again.json()["user"]["role"] == "traveler"


@pytest.mark.asyncio
async def test_google_links_password_account(client, google) -> None:
    await _register(client, email="link@test.com", role="service_provider")
    google.register("tok-link", google_id="g-link", email="link@test.com")

    response = await client.post("/api/v1/auth/google", json={"idToken": "tok-link"})
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["authProvider"] == "both"
    assert user["role"] == "service_provider"

    # The password still works after linking.
    login = await client.post(
        "/api/v1/auth/login", json={"email": "link@test.com", "password": "password123"}
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_google_invalid_token(client) -> None:
    response = await client.post("/api/v1/auth/google", json={"idToken": "forged"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_google_account_conflict(client, google, make_user) -> None:
    await make_user("taken@test.com", password=None, google_id="g-original")
    google.register("tok-other", google_id="g-other", email="taken@test.com")
    response = await client.post("/api/v1/auth/google", json={"idToken": "tok-other"})
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "ACCOUNT_CONFLICT"


@pytest.mark.asyncio
async def test_google_admin_role_rejected(client, google) -> None:
    google.register("tok-admin", google_id="g-admin", email="wannabe@test.com")
    response = await client.post("/api/v1/auth/google", json={"idToken": "tok-admin", "role": "admin"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


# ── Rate limiting ─────────────────────────────────────────────────────────────

@pytest.fixture
def rate_limited():
    limiter.reset()
    limiter.enabled = True
    yield limiter
    limiter.enabled = False
    limiter.reset()


@pytest.mark.asyncio
async def test_login_rate_limit_uses_error_envelope(client, rate_limited) -> None:
    body = {"email": "nobody@test.com", "password": "wrong-password"}
    for _ in range(10):
        response = await client.post("/api/v1/auth/login", json=body)
        assert response.status_code == 401

    blocked = await client.post("/api/v1/auth/login", json=body, headers={"X-Request-ID": "rl-1"})
    assert blocked.status_code == 429
    payload = blocked.json()
    assert payload["error"]["code"] == "RATE_LIMITED"
    assert "10 per 1 minute" in payload["error"]["message"]
    assert payload["request_id"] == "rl-1"
