import pytest
import httpx
from httpx import AsyncClient

from guestbook.core.exceptions import DomainProviderError
from guestbook.services.domain_service import VercelDomainClient


@pytest.mark.asyncio
async def test_domain_lifecycle(client: AsyncClient, carol, carol_headers, mock_domain_provider):
    """
    Connect -> resolve -> disconnect -> resolve again
    """
    response = await client.post("/api/v1/domain", json={"custom_domain": "Book.Carol.dev"}, headers=carol_headers)
    assert response.status_code == 200
    mock_domain_provider.add_domain.assert_awaited_once_with("book.carol.dev")

    response = await client.get("/api/v1/domain", params={"domain": "book.carol.dev"})
    assert response.status_code == 200
    assert response.json() == {"username": "carol"}

    response = await client.delete("/api/v1/domain", headers=carol_headers)
    assert response.status_code == 200
    mock_domain_provider.remove_domain.assert_awaited_once_with("book.carol.dev")

    response = await client.get("/api/v1/domain", params={"domain": "book.carol.dev"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_domain_claimed_by_other_owner(client: AsyncClient, carol, alice, carol_headers, alice_headers, mock_domain_provider):
    await client.post("/api/v1/domain", json={"custom_domain": "shared.dev"}, headers=carol_headers)

    response = await client.post("/api/v1/domain", json={"custom_domain": "shared.dev"}, headers=alice_headers)
    assert response.status_code == 409
    assert mock_domain_provider.add_domain.await_count == 1


@pytest.mark.asyncio
async def test_provider_rejection_is_reported(client: AsyncClient, carol, carol_headers, mock_domain_provider):
    mock_domain_provider.add_domain.side_effect = DomainProviderError("Domain is invalid")

    response = await client.post("/api/v1/domain", json={"custom_domain": "bad..domain"}, headers=carol_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Domain is invalid"

    response = await client.get("/api/v1/domain", params={"domain": "bad..domain"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_disconnect_without_domain(client: AsyncClient, carol, carol_headers):
    response = await client.delete("/api/v1/domain", headers=carol_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_disconnect_tolerates_provider_failure(client: AsyncClient, carol, carol_headers, mock_domain_provider):
    await client.post("/api/v1/domain", json={"custom_domain": "gone.dev"}, headers=carol_headers)
    mock_domain_provider.remove_domain.return_value = False

    response = await client.delete("/api/v1/domain", headers=carol_headers)
    assert response.status_code == 200
    assert (await client.get("/api/v1/domain", params={"domain": "gone.dev"})).status_code == 404


@pytest.mark.asyncio
async def test_connect_requires_token(client: AsyncClient):
    response = await client.post("/api/v1/domain", json={"custom_domain": "x.dev"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_vercel_client_request_shape(monkeypatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(400, json={"error": {"message": "Domain already in use"}})

    transport = httpx.MockTransport(handler)
    real_client = httpx.AsyncClient

    def patched_client(*args, **kwargs):
        kwargs["transport"] = transport
        return real_client(*args, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", patched_client)

    client = VercelDomainClient("https://api.example/v9/projects", "prj_1", "tok", team_id="team_9")
    with pytest.raises(DomainProviderError) as exc_info:
        await client.add_domain("carol.dev")

    assert exc_info.value.message == "Domain already in use"
    assert seen["method"] == "POST"
    assert seen["url"] == "https://api.example/v9/projects/prj_1/domains?teamId=team_9"
    assert seen["auth"] == "Bearer tok"
