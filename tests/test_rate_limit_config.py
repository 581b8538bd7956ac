"""Test rate limiting configuration.

Test cases:
- RATE_LIMIT constant is correctly set from settings
- Login requests beyond the limit get a 429 in the standard error envelope
"""
import pytest
from httpx import AsyncClient

from clientdesk.common.config import settings
from clientdesk.common.rate_limit import RATE_LIMIT, limiter


@pytest.mark.unit
class TestRateLimitConfiguration:

    def test_rate_limit_constant_matches_settings(self):
        assert RATE_LIMIT == f"{settings.rate_limit_per_minute}/minute"

    def test_rate_limit_format_is_valid(self):
        count, period = RATE_LIMIT.split("/")
        assert period == "minute"
        assert int(count) > 0


@pytest.mark.integration
class TestRateLimitEnforcement:

    async def test_login_is_rate_limited(self, client: AsyncClient):
        original_enabled = limiter.enabled
        limiter.enabled = True

        try:
            rate_limited = None
            for _ in range(settings.rate_limit_per_minute + 10):
                response = await client.post(
                    "/api/login",
                    json={"email": "nobody@example.com", "password": "wrong"}
                )
                if response.status_code == 429:
                    rate_limited = response
                    break
                assert response.status_code == 401

            assert rate_limited is not None, "Rate limit was never triggered"
            body = rate_limited.json()
            assert body["success"] is False
            assert body["error"] == "RateLimit"
            assert body["data"]["retry_after"] > 0
            assert int(rate_limited.headers["Retry-After"]) > 0

        finally:
            limiter.enabled = original_enabled
