"""Redis-backed rate limiting middleware."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from agriplanum.auth.dependencies import extract_identity_hint
from agriplanum.config import get_settings


class RateLimitMiddleware(BaseHTTPMiddleware):
	"""Per-client fixed-window limiter backed by Redis atomic counters."""

	async def dispatch(self, request: Request, call_next):  # type: ignore[override]
		if not request.url.path.startswith("/api/"):
			return await call_next(request)

		redis_client = getattr(request.app.state, "redis", None)
		if redis_client is None:
			return await call_next(request)

		quota = get_settings().rate_limit_per_minute
		identity = extract_identity_hint(request)
		minute_bucket = datetime.now(UTC).strftime("%Y%m%d%H%M")
		key = f"ratelimit:{identity}:{minute_bucket}"

		current = await redis_client.incr(key)
		if current == 1:
			await redis_client.expire(key, 65)

		if current > quota:
			return JSONResponse(
				status_code=429,
				content={
					"detail": {
						"error": "rate_limited",
						"message": "Request quota exceeded",
						"quota": quota,
					}
				},
				headers={"Retry-After": "60"},
			)

		return await call_next(request)
