import asyncio
import json

import httpx
import pytest

from bulk_valuation.core.errors import ConfigurationError
from bulk_valuation.data.base import (
    AddressSelector, Matched, NoMatch, ParcelSelector, Timeout, TransportError, UpstreamError,
)
from bulk_valuation.data.valuation_client import HttpValuation, MockValuation

ADDRESS = AddressSelector("1 Main St", "Chicago", "IL", "60601")
PARCEL = ParcelSelector("123-45-678", "17031")


async def test_request_carries_selector_body_and_api_key(make_client, call_log):
    def handler(request: httpx.Request):
        call_log.append(request)
        return httpx.Response(200, json={"data": {}})

    await make_client(handler).lookup(ADDRESS, deadline=5)

    (request,) = call_log
    assert request.method == "POST"
    assert request.url.path == "/v1/report/simple-value"
    assert request.headers["x-api-key"] == "test-key"
    assert json.loads(request.content) == {
        "address": "1 Main St", "city": "Chicago", "state": "IL", "zip": "60601",
    }


async def test_success_body_becomes_matched(make_client):
    body = {"data": {"estimated_value": 450000}, "artifacts": {"pdf_url": "https://x/y.pdf"}}
    outcome = await make_client(lambda r: httpx.Response(200, json=body)).lookup(PARCEL, deadline=5)

    assert isinstance(outcome, Matched)
    assert outcome.data.estimated_value == 450000
    assert outcome.data.price_range_min is None
    assert outcome.pdf_url == "https://x/y.pdf"


async def test_unknown_response_keys_are_ignored(make_client):
    body = {"data": {"estimated_value": 1, "surprise": [1, 2]}, "meta": {"v": 2}}
    outcome = await make_client(lambda r: httpx.Response(200, json=body)).lookup(PARCEL, deadline=5)
    assert isinstance(outcome, Matched)
    assert outcome.pdf_url is None


async def test_404_is_no_match(make_client):
    outcome = await make_client(lambda r: httpx.Response(404, json={"detail": "nope"})).lookup(PARCEL, deadline=5)
    assert isinstance(outcome, NoMatch)
    assert outcome.match_status == "no_match"


@pytest.mark.parametrize("status", [400, 401, 429, 500, 503])
async def test_other_statuses_are_upstream_errors(make_client, status):
    outcome = await make_client(lambda r: httpx.Response(status, text="boom")).lookup(PARCEL, deadline=5)
    assert outcome == UpstreamError(status_code=status)
    assert outcome.match_status == f"error:{status}"


async def test_deadline_exceeded_is_timeout(make_client):
    async def slow(request):
        await asyncio.sleep(2)
        return httpx.Response(200, json={})

    outcome = await make_client(slow).lookup(ADDRESS, deadline=0.05)
    assert isinstance(outcome, Timeout)
    assert outcome.match_status == "error:timeout"


async def test_httpx_timeout_is_timeout(make_client):
    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    assert isinstance(await make_client(handler).lookup(ADDRESS, deadline=5), Timeout)


async def test_connection_failure_is_transport_error(make_client):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    outcome = await make_client(handler).lookup(ADDRESS, deadline=5)
    assert isinstance(outcome, TransportError)
    assert "ConnectError" in outcome.reason
    assert outcome.match_status == "error:unknown"


@pytest.mark.parametrize("content", [b"", b"<html>oops</html>", b"[1, 2]", b'{"data": "x"}'])
async def test_malformed_success_body_is_transport_error(make_client, content):
    outcome = await make_client(lambda r: httpx.Response(200, content=content)).lookup(PARCEL, deadline=5)
    assert outcome == TransportError(reason="malformed_body")


async def test_unexpected_exception_is_transport_error(make_client):
    def handler(request):
        raise RuntimeError("decoder blew up")

    outcome = await make_client(handler).lookup(PARCEL, deadline=5)
    assert isinstance(outcome, TransportError)
    assert "RuntimeError" in outcome.reason
    assert outcome.match_status == "error:unknown"


def test_missing_api_key_is_configuration_error():
    with pytest.raises(ConfigurationError) as exc:
        HttpValuation("https://valuation.test", None)
    assert exc.value.code == "missing_api_key"
    assert exc.value.status_code == 500


async def test_mock_provider_is_deterministic():
    mock = MockValuation()
    first = await mock.lookup(ADDRESS, deadline=1)
    second = await mock.lookup(ADDRESS, deadline=1)
    assert first == second
    if isinstance(first, Matched):
        assert first.data.price_range_min <= first.data.estimated_value <= first.data.price_range_max
        assert first.data.city == "Chicago"
