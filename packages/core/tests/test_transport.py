import json
from typing import List

import httpx
import pytest

from goodhttp.core import HttpxTransport, TransportRequest, create_http_sink


def _request(body: str = "{}") -> TransportRequest:
    return TransportRequest(
        url="http://collector.local/events",
        body=body,
        headers={"content-type": "application/json", "x-api-key": "12345"},
        timeout_ms=1000,
    )


@pytest.mark.asyncio
async def test_posts_body_and_headers() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    result = await HttpxTransport(httpx.MockTransport(handler)).send(_request('{"a":1}'))

    assert result.ok
    assert result.error is None
    assert seen[0].method == "POST"
    assert seen[0].headers["content-type"] == "application/json"
    assert seen[0].headers["x-api-key"] == "12345"
    assert seen[0].content == b'{"a":1}'


@pytest.mark.asyncio
async def test_non_2xx_is_failure() -> None:
    transport = HttpxTransport(httpx.MockTransport(lambda request: httpx.Response(502)))

    result = await transport.send(_request())

    assert not result.ok
    assert result.error is not None
    assert result.error.status_code == 502


@pytest.mark.asyncio
async def test_network_error_is_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = await HttpxTransport(httpx.MockTransport(handler)).send(_request())

    assert not result.ok
    assert isinstance(result.error.cause, httpx.ConnectError)
    assert result.error.status_code is None


@pytest.mark.asyncio
async def test_sink_over_httpx(records) -> None:
    bodies: List[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["content-type"] == "application/json"
        assert request.headers["x-api-key"] == "12345"
        bodies.append(json.loads(request.content))
        return httpx.Response(204)

    sink = create_http_sink(
        "http://collector.local/events",
        transport=HttpxTransport(httpx.MockTransport(handler)),
        config={"threshold": 5, "groupEvents": True, "transport": {"headers": {"x-api-key": 12345}}},
    )

    for i in range(10):
        assert await sink.accept(records(i)) is None
    await sink.close()

    assert len(bodies) == 2
    assert [e["id"] for e in bodies[0]["events"]["log"]] == [0, 1, 2, 3, 4]
    assert [e["id"] for e in bodies[1]["events"]["log"]] == [5, 6, 7, 8, 9]
    assert all(b["schema"] == "good-http" for b in bodies)
