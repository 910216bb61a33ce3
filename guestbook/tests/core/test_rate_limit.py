import pytest
from starlette.requests import Request

from guestbook.core.rate_limit import client_identifier


def _request(headers=None, client=("203.0.113.7", 5000)):
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/v1/entries",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


@pytest.mark.asyncio
async def test_identifier_uses_client_address():
    assert await client_identifier(_request()) == "203.0.113.7:/api/v1/entries"


@pytest.mark.asyncio
async def test_identifier_prefers_first_forwarded_hop():
    request = _request(headers={"X-Forwarded-For": "198.51.100.2, 10.0.0.1"})
    assert await client_identifier(request) == "198.51.100.2:/api/v1/entries"


@pytest.mark.asyncio
async def test_identifier_without_client():
    assert await client_identifier(_request(client=None)) == "unknown:/api/v1/entries"
