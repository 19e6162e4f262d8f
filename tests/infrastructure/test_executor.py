"""Request Executor — headers, body encoding, and outcome classification.

Invariants:
    - One transport call per execute()
    - 2xx JSON -> tree; non-2xx JSON -> ApiError; non-JSON -> TransportFailure
    - Idempotency-Key / Stripe-Account / Stripe-Version only when set
"""

import base64
import json

import httpx
import pytest

from stripe_typed.config import Settings
from stripe_typed.core.codec import encode_form_params
from stripe_typed.core.domain_types import FailureCategory, HttpMethod, IdempotencyKey
from stripe_typed.core.errors import ApiError, TransportFailure
from stripe_typed.infrastructure.executor import RequestExecutor
from stripe_typed.infrastructure.transport import HttpxTransport

from tests.wire_samples import charge_tree, error_tree


class _Recorder:
    """MockTransport handler returning scripted responses and keeping requests."""

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)


def _executor(recorder: _Recorder, **settings) -> RequestExecutor:
    cfg = Settings(api_key="sk_test_123", endpoint="https://api.stripe.test/", **settings)
    client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return RequestExecutor(HttpxTransport(client), cfg)


async def test_success_returns_tree_and_sends_auth():
    recorder = _Recorder(httpx.Response(200, json=charge_tree()))
    tree = await _executor(recorder).execute(HttpMethod.GET, "/v1/charges/ch_1")

    assert tree["id"] == "ch_19Aq4E2eZvKYlo2C"
    (request,) = recorder.requests
    assert str(request.url) == "https://api.stripe.test/v1/charges/ch_1"
    expected = base64.b64encode(b"sk_test_123:").decode()
    assert request.headers["authorization"] == f"Basic {expected}"
    assert "idempotency-key" not in request.headers
    assert "stripe-account" not in request.headers
    assert "stripe-version" not in request.headers


async def test_form_body_and_optional_headers():
    recorder = _Recorder(httpx.Response(200, json=charge_tree()))
    executor = _executor(recorder, api_version="2016-07-06")
    form = encode_form_params({"amount": 2000, "legalEntity": {"address": {"city": "Zadar"}}})

    await executor.execute(
        HttpMethod.POST, "/v1/charges",
        form=form,
        idempotency_key=IdempotencyKey("key-1"),
        stripe_account="acct_42",
    )

    (request,) = recorder.requests
    assert request.method == "POST"
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    assert request.headers["idempotency-key"] == "key-1"
    assert request.headers["stripe-account"] == "acct_42"
    assert request.headers["stripe-version"] == "2016-07-06"
    assert httpx.QueryParams(request.content.decode()) == form


async def test_json_body():
    recorder = _Recorder(httpx.Response(200, json={"id": "x"}))
    await _executor(recorder).execute(HttpMethod.POST, "/v1/things", json_body={"a": [1, 2]})
    (request,) = recorder.requests
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"a": [1, 2]}


async def test_query_params_for_get():
    recorder = _Recorder(httpx.Response(200, json={"object": "list", "data": []}))
    await _executor(recorder).execute(
        HttpMethod.GET, "/v1/charges", query=encode_form_params({"created": {"gte": 10}, "limit": 3}),
    )
    (request,) = recorder.requests
    assert request.url.params["created[gte]"] == "10"
    assert request.url.params["limit"] == "3"


async def test_error_body_raises_api_error():
    recorder = _Recorder(httpx.Response(
        402, json=error_tree("card_error", "Your card was declined.", code="card_declined"),
    ))
    with pytest.raises(ApiError) as exc_info:
        await _executor(recorder).execute(HttpMethod.POST, "/v1/charges", idempotency_key=IdempotencyKey("k"))

    err = exc_info.value
    assert err.category is FailureCategory.CARD_DECLINED
    assert err.envelope.code == "card_declined"
    assert err.context.idempotency_key == "k"
    assert not err.is_retryable


@pytest.mark.parametrize(("header", "expected_ms"), [
    ("2", 2000),
    ("0.5", 500),
    ("inf", None),
    ("nan", None),
    ("-3", None),
    ("1e308", None),
    ("Wed, 21 Oct 2026 07:28:00 GMT", None),
])
async def test_rate_limit_carries_retry_after(header, expected_ms):
    recorder = _Recorder(httpx.Response(
        429, json=error_tree("rate_limit_error"), headers={"Retry-After": header},
    ))
    with pytest.raises(ApiError) as exc_info:
        await _executor(recorder).execute(HttpMethod.GET, "/v1/charges")
    assert exc_info.value.category is FailureCategory.RATE_LIMITED
    assert exc_info.value.context.retry_after_ms == expected_ms


@pytest.mark.parametrize("status", [200, 502])
async def test_non_json_body_is_transport_failure(status):
    recorder = _Recorder(httpx.Response(status, content=b"<html>Bad Gateway</html>"))
    with pytest.raises(TransportFailure) as exc_info:
        await _executor(recorder).execute(HttpMethod.GET, "/v1/charges")
    assert exc_info.value.reason == "malformed_body"
    assert exc_info.value.http_status == status
    assert exc_info.value.is_retryable


async def test_empty_body_is_transport_failure():
    recorder = _Recorder(httpx.Response(200, content=b""))
    with pytest.raises(TransportFailure):
        await _executor(recorder).execute(HttpMethod.GET, "/v1/charges")


async def test_upload_goes_to_upload_endpoint_as_multipart():
    recorder = _Recorder(httpx.Response(200, json={"id": "file_1"}))
    executor = _executor(recorder, file_upload_endpoint="https://uploads.stripe.test")

    await executor.execute(
        HttpMethod.POST, "/v1/files",
        files={"file": ("id.png", b"\x89PNG", "application/octet-stream")},
        form=encode_form_params({"purpose": "identity_document"}),
    )

    (request,) = recorder.requests
    assert str(request.url) == "https://uploads.stripe.test/v1/files"
    assert request.headers["content-type"].startswith("multipart/form-data")
    body = request.read()
    assert b'name="purpose"' in body
    assert b"identity_document" in body
    assert b'filename="id.png"' in body


async def test_corrupt_gzip_body_is_transport_failure():
    recorder = _Recorder(httpx.Response(
        200, headers={"Content-Encoding": "gzip"}, stream=httpx.ByteStream(b"not gzip at all"),
    ))
    with pytest.raises(TransportFailure) as exc_info:
        await _executor(recorder).execute(HttpMethod.GET, "/v1/charges/ch_1")
    assert exc_info.value.reason == "malformed_body"
