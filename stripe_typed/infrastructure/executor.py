"""Request Executor — one physical call, mapped to a wire tree or a typed failure.

Invariants:
    - Exactly one transport.send() per execute(); no retry knowledge here
    - 2xx with a JSON body -> wire tree returned
    - Non-2xx with a JSON body -> ApiError carrying a parsed ErrorEnvelope
    - Body that is not JSON (any status) -> TransportFailure
    - Idempotency-Key header sent only when a key is supplied

Design Decisions:
    - Headers built here, not in the transport: the transport stays protocol-agnostic
    - File uploads use the upload endpoint and the per-chunk timeout from Settings
"""

import base64
import json
import logging
import math
from collections.abc import Mapping
from typing import Any

from stripe_typed.config import Settings
from stripe_typed.core.codec import FormParams, WireTree
from stripe_typed.core.domain_types import HttpMethod, IdempotencyKey
from stripe_typed.core.error_model import parse_error
from stripe_typed.core.errors import ApiError, ErrorContext, TransportFailure
from stripe_typed.infrastructure.transport import HttpxTransport, RawResponse

logger = logging.getLogger(__name__)

IDEMPOTENCY_KEY_HEADER = "Idempotency-Key"
STRIPE_ACCOUNT_HEADER = "Stripe-Account"
STRIPE_VERSION_HEADER = "Stripe-Version"


class RequestExecutor:
    """Issues a single API request and classifies the outcome."""

    def __init__(self, transport: HttpxTransport, settings: Settings):
        self.transport = transport
        self.settings = settings

    async def execute(
        self,
        method: HttpMethod,
        path: str,
        *,
        form: FormParams | None = None,
        json_body: WireTree = None,
        query: FormParams | None = None,
        files: Mapping[str, Any] | None = None,
        idempotency_key: IdempotencyKey | None = None,
        stripe_account: str | None = None,
        attempt: int | None = None,
    ) -> WireTree:
        context = ErrorContext(
            method=method.value, path=path,
            idempotency_key=idempotency_key, attempt=attempt,
        )
        headers = self._headers(idempotency_key, stripe_account)

        content = None
        data = None
        if files is not None:
            base_url = self.settings.file_upload_endpoint
            timeout = self.settings.file_upload_chunk_timeout_seconds
            data = dict(form) if form is not None else None
        else:
            base_url = self.settings.endpoint
            timeout = None
            if form is not None:
                headers["Content-Type"] = "application/x-www-form-urlencoded"
                content = str(form)
            elif json_body is not None:
                headers["Content-Type"] = "application/json"
                content = json.dumps(json_body)

        logger.debug(
            f"Sending {method.value} {path}",
            extra={"method": method.value, "path": path, "attempt": attempt,
                   "idempotency_key": idempotency_key},
        )
        raw = await self.transport.send(
            method.value,
            base_url + path,
            headers=headers,
            content=content,
            params=query,
            files=files,
            data=data,
            timeout=timeout,
        )
        logger.debug(
            f"Received HTTP {raw.status_code} for {method.value} {path}",
            extra={"status_code": raw.status_code, "path": path, "attempt": attempt},
        )
        return self._classify(raw, context)

    def _headers(
        self, idempotency_key: IdempotencyKey | None, stripe_account: str | None,
    ) -> dict[str, str]:
        headers = {
            "Authorization": _basic_auth(self.settings.api_key),
            "Accept": "application/json",
        }
        if idempotency_key is not None:
            headers[IDEMPOTENCY_KEY_HEADER] = idempotency_key
        if stripe_account is not None:
            headers[STRIPE_ACCOUNT_HEADER] = stripe_account
        if self.settings.api_version is not None:
            headers[STRIPE_VERSION_HEADER] = self.settings.api_version
        return headers

    def _classify(self, raw: RawResponse, context: ErrorContext) -> WireTree:
        try:
            tree = json.loads(raw.body)
        except (ValueError, UnicodeDecodeError) as e:
            raise TransportFailure(
                f"response body is not valid JSON: {e}",
                "malformed_body",
                http_status=raw.status_code,
                context=context,
            )

        if 200 <= raw.status_code < 300:
            return tree

        envelope = parse_error(raw.status_code, tree)
        raise ApiError(
            envelope,
            retry_after_ms=_retry_after_ms(raw.headers),
            context=context,
        )


def _basic_auth(api_key: str) -> str:
    token = base64.b64encode(f"{api_key}:".encode()).decode("ascii")
    return f"Basic {token}"


def _retry_after_ms(headers: Mapping[str, str]) -> int | None:
    """Retry-After header (seconds) in milliseconds."""
    value = headers.get("retry-after") or headers.get("Retry-After")
    if not value:
        return None
    try:
        millis = float(value) * 1000
    except ValueError:
        return None
    if not math.isfinite(millis) or millis < 0:
        return None
    return int(millis)
