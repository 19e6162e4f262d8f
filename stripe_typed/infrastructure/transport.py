"""HTTP Transport — the only place that touches the network.

Invariants:
    - One send() == one HTTP round-trip; no retries, no redirects on POST
    - Every httpx.RequestError is mapped to TransportFailure; an undecodable
      Content-Encoding counts as a malformed body
    - Response bodies are returned raw; parsing belongs to the executor
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from stripe_typed.core.errors import ErrorContext, TransportFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)


class HttpxTransport:
    """Thin wrapper over httpx.AsyncClient."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout_seconds: float = 80.0,
        user_agent: str = "stripe-typed/0.4",
    ):
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            headers={"User-Agent": user_agent},
        )

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        content: str | None = None,
        params: Any = None,
        files: Any = None,
        data: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> RawResponse:
        context = ErrorContext(method=method, path=url)
        kwargs: dict[str, Any] = {"headers": dict(headers)}
        if content is not None:
            kwargs["content"] = content
        if params is not None:
            kwargs["params"] = params
        if files is not None:
            kwargs["files"] = files
        if data is not None:
            kwargs["data"] = data
        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportFailure(str(e) or "request timed out", "timeout", context=context)
        except httpx.DecodingError as e:
            raise TransportFailure(str(e) or "undecodable response body", "malformed_body", context=context)
        except httpx.RequestError as e:
            raise TransportFailure(str(e) or type(e).__name__, "connection_error", context=context)

        return RawResponse(
            status_code=response.status_code,
            body=response.content,
            headers=response.headers,
        )

    async def aclose(self) -> None:
        await self.client.aclose()
