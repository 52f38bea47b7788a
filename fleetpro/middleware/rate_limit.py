"""
Rate Limiting Middleware

Per-tenant token bucket kept in Redis. Each tenant refills at
rate_limit_per_minute and can burst up to rate_limit_burst; both fall
back to the global settings when the tenant leaves them NULL.

If Redis is unreachable the limiter fails open and lets traffic through.
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from typing import Tuple
import redis
import time
import logging
from fleetpro.config import get_settings
from fleetpro.core.exceptions import RateLimitExceeded
from fleetpro.utils.logging import log_security_event

logger = logging.getLogger(__name__)
settings = get_settings()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Token bucket rate limiter per tenant."""

    def __init__(self, app, redis_client=None, enabled: bool = None):
        super().__init__(app)

        self.enabled = settings.RATE_LIMIT_ENABLED if enabled is None else enabled
        self.redis_client = redis_client
        self.redis_available = False

        if self.enabled and self.redis_client is None:
            try:
                self.redis_client = redis.from_url(
                    settings.REDIS_URL,
                    decode_responses=True,
                    socket_connect_timeout=5
                )
                self.redis_client.ping()
                logger.info("Redis connection established for rate limiting")
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.error(f"Redis connection failed: {e}")
                self.redis_client = None

        self.redis_available = self.enabled and self.redis_client is not None

        self.excluded_paths = [
            "/docs",
            "/redoc",
            "/openapi.json",
            "/health",
        ]

    async def dispatch(self, request: Request, call_next):
        if any(request.url.path.startswith(path) for path in self.excluded_paths):
            return await call_next(request)

        if not self.redis_available:
            return await call_next(request)

        tenant = getattr(request.state, "tenant", None)
        if not tenant:
            return await call_next(request)

        allowed, retry_after = self._check_rate_limit(tenant)

        if not allowed:
            log_security_event(
                "rate_limit_exceeded",
                {"tenant_id": tenant.id, "path": request.url.path},
                logger
            )
            # App exception handlers run inside this middleware
            exc = RateLimitExceeded(retry_after)
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "detail": exc.detail,
                    "type": "rate_limit_exceeded",
                    "retry_after": retry_after
                },
                headers=exc.headers
            )

        return await call_next(request)

    def _check_rate_limit(self, tenant) -> Tuple[bool, int]:
        """
        Consume one token from the tenant's bucket.

        Returns: (allowed, retry_after_seconds)
        """
        rate_limit = tenant.rate_limit_per_minute or settings.RATE_LIMIT_PER_MINUTE
        burst = tenant.rate_limit_burst or settings.RATE_LIMIT_BURST

        key = f"rate_limit:{tenant.id}"
        key_timestamp = f"{key}:timestamp"

        try:
            current_tokens = self.redis_client.get(key)
            last_update = self.redis_client.get(key_timestamp)

            now = time.time()

            if current_tokens is None:
                self.redis_client.setex(key, 60, burst - 1)
                self.redis_client.setex(key_timestamp, 60, now)
                return True, 0

            current_tokens = float(current_tokens)
            last_update = float(last_update) if last_update else now

            refill_per_second = rate_limit / 60.0
            new_tokens = min(burst, current_tokens + (now - last_update) * refill_per_second)

            if new_tokens >= 1:
                self.redis_client.setex(key, 60, new_tokens - 1)
                self.redis_client.setex(key_timestamp, 60, now)
                return True, 0

            retry_after = int(((1 - new_tokens) / refill_per_second) + 1)
            return False, retry_after

        except redis.RedisError as e:
            logger.error(f"Redis error in rate limiting: {e}")
            return True, 0
