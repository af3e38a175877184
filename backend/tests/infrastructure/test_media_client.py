"""Media Client — Cloudinary uploads through httpx.MockTransport.

Tests cover:
    - signed multipart upload returns secure_url
    - transient 5xx and connection errors are retried, then mapped to MediaUploadError
    - 4xx fails immediately without retry
    - 429 honours Retry-After
    - missing credentials fail before any request
"""

import httpx
import pytest

from roster.core.errors import MediaUploadError
from roster.infrastructure.media_client import ResilientMediaClient, sign_upload


def _client(handler, **kwargs) -> ResilientMediaClient:
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="https://media.test",
    )
    options = dict(max_retries=2, base_delay_ms=0, max_delay_ms=0)
    options.update(kwargs)
    return ResilientMediaClient(
        "demo", "key123", "secret456", http_client=http_client, **options,
    )


async def _upload(client: ResilientMediaClient) -> str:
    return await client.upload("cv.pdf", b"%PDF-1.4", "application/pdf")


def test_sign_upload_is_sha1_of_sorted_params_plus_secret():
    import hashlib
    expected = hashlib.sha1(b"timestamp=1700000000secret").hexdigest()
    assert sign_upload({"timestamp": "1700000000"}, "secret") == expected


async def test_upload_returns_secure_url():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"secure_url": "https://res.test/cv.pdf"})

    url = await _upload(_client(handler))
    assert url == "https://res.test/cv.pdf"
    assert seen[0].url.path == "/v1_1/demo/auto/upload"
    body = seen[0].read()
    assert b'name="api_key"' in body
    assert b'name="signature"' in body
    assert b'filename="cv.pdf"' in body


async def test_transient_errors_are_retried():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json={"secure_url": "https://res.test/x"})

    assert await _upload(_client(handler)) == "https://res.test/x"
    assert len(calls) == 3


async def test_connection_errors_exhaust_retries():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(MediaUploadError) as exc_info:
        await _upload(_client(handler))
    assert exc_info.value.upload_error_type == "connection_error"
    assert len(calls) == 3


async def test_client_error_fails_without_retry():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(400, json={"error": {"message": "Invalid image file"}})

    with pytest.raises(MediaUploadError) as exc_info:
        await _upload(_client(handler))
    assert exc_info.value.upload_error_type == "client_error"
    assert "Invalid image file" in exc_info.value.message
    assert exc_info.value.http_status == 502
    assert len(calls) == 1


async def test_rate_limit_retries_then_succeeds():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(429, headers={"retry-after": "1"})
        return httpx.Response(200, json={"secure_url": "https://res.test/y"})

    assert await _upload(_client(handler)) == "https://res.test/y"
    assert len(calls) == 2


async def test_rate_limit_after_retries_raises():
    def handler(request):
        return httpx.Response(429)

    with pytest.raises(MediaUploadError) as exc_info:
        await _upload(_client(handler, max_retries=0))
    assert exc_info.value.upload_error_type == "rate_limit"


async def test_missing_secure_url_is_bad_response():
    def handler(request):
        return httpx.Response(200, json={"public_id": "abc"})

    with pytest.raises(MediaUploadError) as exc_info:
        await _upload(_client(handler))
    assert exc_info.value.upload_error_type == "bad_response"


async def test_unconfigured_client_never_sends():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"secure_url": "x"})

    client = ResilientMediaClient(
        None, None, None,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    assert client.configured is False
    with pytest.raises(MediaUploadError) as exc_info:
        await _upload(client)
    assert exc_info.value.upload_error_type == "not_configured"
    assert calls == []
