"""HTTP client exposed as the http_request tool."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from pydantic import BaseModel

from fileops.exceptions import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")
MAX_BODY_CHARS = 100_000


class HttpResult(BaseModel):
    """Response summary returned to the caller."""

    url: str
    method: str
    status_code: int
    reason_phrase: str = ""
    headers: dict[str, str]
    body: str
    duration_ms: int
    truncated: bool = False


class HttpClientService:
    """Single-shot HTTP requests with a timeout. Non-2xx statuses are results, not errors."""

    def __init__(
        self,
        timeout_seconds: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP client service.

        Args:
            timeout_seconds: Timeout for HTTP requests in seconds
            transport: Optional transport override (tests use httpx.MockTransport)
        """
        self.timeout = timeout_seconds
        self.transport = transport

    async def request(
        self,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: Any = None,
    ) -> HttpResult:
        """
        Send one HTTP request.

        A dict or list body is sent as JSON, anything else as text.

        Raises:
            ValidationError: Unsupported method or URL scheme
            httpx.HTTPError: Transport failure (connection refused, timeout)
        """
        method = method.upper()
        if method not in ALLOWED_METHODS:
            msg = f"Unsupported HTTP method: {method}"
            raise ValidationError(msg, context={"field": "method", "allowed_values": list(ALLOWED_METHODS)})

        if not url.startswith(("http://", "https://")):
            msg = "URL must start with http:// or https://"
            raise ValidationError(msg, context={"field": "url", "value": url})

        request_kwargs: dict[str, Any] = {"headers": headers or {}}
        if isinstance(body, (dict, list)):
            request_kwargs["json"] = body
        elif body is not None:
            request_kwargs["content"] = str(body)

        start_time = time.monotonic()
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.request(method, url, **request_kwargs)
        duration_ms = int((time.monotonic() - start_time) * 1000)

        text = response.text
        truncated = len(text) > MAX_BODY_CHARS

        logger.info(
            "HTTP request completed",
            extra={
                "method": method,
                "host": response.url.host,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        return HttpResult(
            url=str(response.url),
            method=method,
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            headers=dict(response.headers),
            body=text[:MAX_BODY_CHARS],
            duration_ms=duration_ms,
            truncated=truncated,
        )
