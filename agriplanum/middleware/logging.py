"""structlog setup and the per-request access log.

Every request gets an ``x-request-id`` and a client identity (the same hashed
token or IP bucket the rate limiter uses). Both are bound to the structlog
context so service-level events can be traced back to a caller.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from agriplanum.auth.dependencies import extract_identity_hint
from agriplanum.config import LogFormat, get_settings

SERVICE_NAME = "agriplanum"

# Logged at debug level.
_QUIET_PATHS = frozenset({"/health"})

_configured = False


def _add_service(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
	event_dict.setdefault("service", SERVICE_NAME)
	return event_dict


def configure_structured_logging() -> None:
	"""Configure stdlib + structlog once per process (API or seed script)."""
	global _configured
	if _configured:
		return

	settings = get_settings()
	log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
	json_output = settings.log_format == LogFormat.json
	if json_output:
		logging.basicConfig(level=log_level, format="%(message)s")
	else:
		logging.basicConfig(level=log_level)

	structlog.configure(
		processors=[
			structlog.contextvars.merge_contextvars,
			structlog.processors.add_log_level,
			_add_service,
			structlog.processors.TimeStamper(fmt="iso", utc=True),
			structlog.processors.format_exc_info,
			structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(),
		],
		wrapper_class=structlog.make_filtering_bound_logger(log_level),
		logger_factory=structlog.PrintLoggerFactory(),
		cache_logger_on_first_use=True,
	)
	_configured = True


def _route_fields(request: Request) -> dict[str, Any]:
	"""Matched path template and router tag, or ``None`` when no route ran.

	Requests rejected before routing (rate limited, unknown path) have no
	``route`` in their scope.
	"""
	route = request.scope.get("route")
	tags = list(getattr(route, "tags", None) or [])
	return {
		"route": getattr(route, "path", None),
		"tag": str(tags[0]) if tags else None,
	}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
	"""Bind request id and client identity, then emit one access event per request."""

	async def dispatch(self, request: Request, call_next):  # type: ignore[override]
		request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
		client = extract_identity_hint(request)
		request.state.request_id = request_id

		structlog.contextvars.clear_contextvars()
		structlog.contextvars.bind_contextvars(request_id=request_id, client=client)

		logger = structlog.get_logger("agriplanum.request")
		fields: dict[str, Any] = {"method": request.method, "path": request.url.path, "client": client}
		start = time.perf_counter()

		try:
			response = await call_next(request)
		except Exception as exc:
			logger.exception(
				"http_request_failed",
				**fields,
				**_route_fields(request),
				duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
				error=str(exc),
			)
			raise

		response.headers["x-request-id"] = request_id
		if response.status_code >= 500:
			emit = logger.error
		elif request.url.path in _QUIET_PATHS:
			emit = logger.debug
		else:
			emit = logger.info
		emit(
			"http_request",
			**fields,
			**_route_fields(request),
			status_code=response.status_code,
			duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
		)
		return response
