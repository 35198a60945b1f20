"""Tests for the shared outbound HTTP client pool."""

import httpx

from devevent.core import rest_api
from devevent.core.rest_api import ClientConfig, HttpxRestClientPool, PoolConfig, build_transport


def test_build_transport_applies_pool_and_tls_settings(monkeypatch) -> None:
    captured: dict = {}

    def fake_transport(**kwargs):
        captured.update(kwargs)
        return "transport"

    monkeypatch.setattr(rest_api.httpx, "AsyncHTTPTransport", fake_transport)
    config = ClientConfig(pool=PoolConfig(max_connections=3, max_keepalive=1, keepalive_expiry=5.0), verify_ssl=False)

    assert build_transport(config) == "transport"
    assert captured["verify"] is False
    assert captured["limits"] == httpx.Limits(max_connections=3, max_keepalive_connections=1, keepalive_expiry=5.0)
    assert captured["retries"] == config.retry.max_retries
    assert captured["http2"] is True


async def test_get_client_is_shared_until_disposed() -> None:
    first = await HttpxRestClientPool.get_client()
    second = await HttpxRestClientPool.get_client()

    assert first is second

    await HttpxRestClientPool.dispose()

    assert first.is_closed
    assert HttpxRestClientPool._client is None
