import uuid
from decimal import Decimal

import pytest

from shared.constants import Role

_LISTING = {
    "title": "Serengeti balloon safari",
    "description": "Sunrise flight over the plains.",
    "category": "safari",
    "location": "Seronera",
    "price": "550.00",
}


@pytest.mark.asyncio
async def test_provider_publishes_service(client, make_user, auth_headers) -> None:
    provider = await make_user("provider@test.com", role=Role.SERVICE_PROVIDER)
    response = await client.post("/api/v1/services", headers=auth_headers(provider), json=_LISTING)
    assert response.status_code == 201
    data = response.json()
    assert data["providerId"] == str(provider.id)
    assert Decimal(data["price"]) == Decimal("550.00")
    assert data["isActive"] is True

    fetched = await client.get(f"/api/v1/services/{data['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["title"] == "Serengeti balloon safari"


@pytest.mark.asyncio
async def test_traveler_cannot_publish(client, make_user, auth_headers) -> None:
    traveler = await make_user("traveler@test.com")
    response = await client.post("/api/v1/services", headers=auth_headers(traveler), json=_LISTING)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "PROVIDER_REQUIRED"


@pytest.mark.asyncio
async def test_negative_price_rejected(client, make_user, auth_headers) -> None:
    provider = await make_user("cheap@test.com", role=Role.SERVICE_PROVIDER)
    response = await client.post(
        "/api/v1/services", headers=auth_headers(provider), json={**_LISTING, "price": "-1"}
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_list_services_filters_and_hides_inactive(client, make_user, make_service) -> None:
    provider = await make_user("lister@test.com", role=Role.SERVICE_PROVIDER)
    await make_service(provider, title="Game drive", category="safari")
    await make_service(provider, title="Beach villa", category="lodging")
    await make_service(provider, title="Old tour", category="safari", is_active=False)

    everything = (await client.get("/api/v1/services")).json()
    assert everything["total"] == 2
    assert everything["page"] == 1
    assert everything["pageSize"] == 20
    assert everything["hasMore"] is False

    safari = (await client.get("/api/v1/services", params={"category": "safari"})).json()
    assert [s["title"] for s in safari["items"]] == ["Game drive"]

    by_provider = (await client.get("/api/v1/services", params={"providerId": str(provider.id)})).json()
    assert by_provider["total"] == 2


@pytest.mark.asyncio
async def test_unknown_service(client) -> None:
    response = await client.get(f"/api/v1/services/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SERVICE_NOT_FOUND"
