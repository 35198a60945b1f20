"""
Shared outbound HTTP client pool (httpx).

The image upload collaborator posts banners to the image host through this
pool, so every request reuses the same connections.

Key Features:
    - Connection pooling and keep-alive
    - HTTP/2 support
    - Configurable timeouts (connect, read, write, pool); writes get more
      room because uploads carry up to 5 MiB
    - Transport-level retries on connection failures
    - Lazy, lock-guarded creation; disposed from the app lifespan

Usage:
    client = await HttpxRestClientPool.get_client()
    response = await client.post(url, data=fields, files={"file": payload})

    # Cleanup at shutdown (in lifespan)
    await HttpxRestClientPool.dispose()
"""

import asyncio

import httpx
from pydantic import BaseModel, Field

__all__ = [
    "ClientConfig",
    "HttpxRestClientPool",
    "PoolConfig",
    "RetryConfig",
    "TimeoutConfig",
    "build_transport",
]


class TimeoutConfig(BaseModel):
    """HTTP client timeout settings."""

    connect: float = Field(default=5.0, description="Connection timeout (seconds)")
    read: float = Field(default=30.0, description="Read timeout (seconds)")
    write: float = Field(default=60.0, description="Write timeout (seconds)")
    pool: float = Field(default=10.0, description="Pool timeout (seconds)")

    def to_httpx_timeout(self) -> httpx.Timeout:
        """Convert to httpx.Timeout."""
        return httpx.Timeout(**self.model_dump())


class PoolConfig(BaseModel):
    """Connection pool settings."""

    max_connections: int = Field(default=20, description="Max total connections")
    max_keepalive: int = Field(default=10, description="Max idle connections")
    keepalive_expiry: float = Field(default=30.0, description="Idle connection TTL (seconds)")


class RetryConfig(BaseModel):
    """Retry settings for failed connection attempts."""

    max_retries: int = Field(default=2, description="Max retry attempts")


class ClientConfig(BaseModel):
    """HTTP client configuration."""

    timeout: TimeoutConfig = Field(default_factory=TimeoutConfig)
    pool: PoolConfig = Field(default_factory=PoolConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    http2: bool = Field(default=True, description="Enable HTTP/2")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(default=False, description="Follow redirects")


def build_transport(config: ClientConfig) -> httpx.AsyncHTTPTransport:
    """Pooled transport carrying the connection limits, TLS and retry settings."""
    limits = httpx.Limits(
        max_connections=config.pool.max_connections,
        max_keepalive_connections=config.pool.max_keepalive,
        keepalive_expiry=config.pool.keepalive_expiry,
    )
    return httpx.AsyncHTTPTransport(
        verify=config.verify_ssl,
        http2=config.http2,
        limits=limits,
        retries=config.retry.max_retries,
    )


class HttpxRestClientPool:
    """Singleton HTTP client pool with connection reuse."""

    _client: httpx.AsyncClient | None = None
    _config: ClientConfig = ClientConfig()
    _lock: asyncio.Lock | None = None

    @classmethod
    def _get_lock(cls) -> asyncio.Lock:
        """Get or create lock for current event loop."""
        if cls._lock is None:
            cls._lock = asyncio.Lock()
        return cls._lock

    @classmethod
    async def get_client(cls) -> httpx.AsyncClient:
        """Get shared HTTP client (async-safe)."""
        if cls._client is None:
            async with cls._get_lock():
                if cls._client is None:
                    cls._client = httpx.AsyncClient(
                        transport=build_transport(cls._config),
                        timeout=cls._config.timeout.to_httpx_timeout(),
                        follow_redirects=cls._config.follow_redirects,
                    )
        return cls._client

    @classmethod
    async def dispose(cls) -> None:
        """Close client and release resources."""
        if cls._client is not None:
            await cls._client.aclose()
            cls._client = None
            cls._lock = None
