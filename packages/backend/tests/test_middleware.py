"""Tests for middleware — security headers, request IDs, rate limiting.

Rate limiting is skipped when Redis is not initialized, so the limiter
tests swap in a tiny in-memory counter.
"""

import uuid

import pytest

from taskhub.middleware import rate_limit
from taskhub.middleware.request_id import pick_request_id


@pytest.mark.asyncio
async def test_security_headers_on_health(client):
    """Health endpoint returns security headers."""
    r = await client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert r.headers["Cache-Control"] == "no-store"


@pytest.mark.asyncio
async def test_security_headers_on_errors(client):
    r = await client.get("/api/v1/projects")
    assert r.status_code == 401
    assert r.headers["X-Frame-Options"] == "DENY"


@pytest.mark.asyncio
async def test_request_id_generated(client):
    """Each request gets a unique X-Request-ID header."""
    r1 = await client.get("/api/v1/health")
    r2 = await client.get("/api/v1/health")
    assert "X-Request-ID" in r1.headers
    assert "X-Request-ID" in r2.headers
    # Each request gets a unique ID
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    """Incoming X-Request-ID is propagated through the response."""
    custom_id = "test-trace-12345"
    r = await client.get(
        "/api/v1/health",
        headers={"X-Request-ID": custom_id},
    )
    assert r.headers["X-Request-ID"] == custom_id


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", ["has spaces", "x" * 200, "semi;colon"])
async def test_malformed_request_id_replaced(client, bad_id):
    r = await client.get("/api/v1/health", headers={"X-Request-ID": bad_id})
    returned = r.headers["X-Request-ID"]
    assert returned != bad_id
    assert uuid.UUID(returned)


def test_pick_request_id():
    assert pick_request_id("abc-123.trace:7") == "abc-123.trace:7"
    assert uuid.UUID(pick_request_id(None))
    assert uuid.UUID(pick_request_id(""))


@pytest.mark.asyncio
async def test_no_hsts_on_http(client):
    """HSTS header is NOT set on HTTP connections (only HTTPS)."""
    r = await client.get("/api/v1/health")
    assert "Strict-Transport-Security" not in r.headers


class FakeRedis:
    def __init__(self):
        self.counts = {}

    async def incr(self, key):
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key, seconds):
        return True


@pytest.mark.asyncio
async def test_auth_paths_rate_limited(client, monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(rate_limit, "get_redis", lambda: fake)

    statuses = [
        (await client.post("/api/v1/auth/login", json={})).status_code
        for _ in range(11)
    ]
    assert statuses[:10] == [422] * 10
    assert statuses[10] == 429

    # Other paths use their own, larger bucket.
    r = await client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.headers["X-RateLimit-Limit"] == "100"
    assert r.headers["X-RateLimit-Remaining"] == "99"
