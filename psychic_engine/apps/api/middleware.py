"""ASGI middleware binding per-exchange log context."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Optional

from psychic_engine.core.logging import (
    bind_client_ip,
    bind_correlation_id,
    get_logger,
    reset_client_ip,
    reset_correlation_id,
)

logger = get_logger(__name__)

CORRELATION_HEADERS = ("X-Request-ID", "X-Correlation-ID")
# Probe endpoints, logged at DEBUG.
QUIET_PATHS = frozenset({"/alive"})


def _header_map(scope) -> dict[str, str]:  # type: ignore[no-untyped-def]
    return {k.decode("latin-1").lower(): v.decode("latin-1") for k, v in scope.get("headers", [])}


def resolve_correlation_id(headers: dict[str, str]) -> str:
    """Reuse the caller's request id when present, otherwise mint one."""
    for header in CORRELATION_HEADERS:
        value = headers.get(header.lower(), "").strip()
        if value:
            return value
    return uuid.uuid4().hex


def _with_correlation_headers(
    raw_headers: list[tuple[bytes, bytes]], correlation_id: str
) -> list[tuple[bytes, bytes]]:
    present = {key.decode("latin-1").lower() for key, _ in raw_headers}
    missing = [h for h in CORRELATION_HEADERS if h.lower() not in present]
    return raw_headers + [(h.encode("latin-1"), correlation_id.encode("latin-1")) for h in missing]


class CorrelationIdMiddleware:  # pylint: disable=too-few-public-methods
    """Bind a correlation id and client address for each HTTP exchange.

    The id is echoed back in ``X-Request-ID`` and ``X-Correlation-ID`` so the
    platform's request logs can be joined with ours.
    """

    def __init__(self, app) -> None:  # type: ignore[no-untyped-def]
        self.app = app

    async def __call__(self, scope, receive, send):  # type: ignore[no-untyped-def]
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        correlation_id = resolve_correlation_id(_header_map(scope))
        client = scope.get("client")
        cid_token = bind_correlation_id(correlation_id)
        ip_token = bind_client_ip(client[0] if client else None)
        started = time.perf_counter()
        status_code: Optional[int] = None

        async def send_with_headers(message):  # type: ignore[no-untyped-def]
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = message.get("status")
                message["headers"] = _with_correlation_headers(
                    list(message.get("headers", [])), correlation_id
                )
            await send(message)

        try:
            await self.app(scope, receive, send_with_headers)
        finally:
            path = scope.get("path", "")
            logger.log(
                logging.DEBUG if path in QUIET_PATHS else logging.INFO,
                "request completed",
                extra={
                    "event": "http_request",
                    "path": path,
                    "method": scope.get("method", ""),
                    "status_code": status_code or 500,
                    "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
                },
            )
            reset_client_ip(ip_token)
            reset_correlation_id(cid_token)


__all__ = ["CorrelationIdMiddleware", "resolve_correlation_id"]
