import json
from http import HTTPStatus
from ipaddress import ip_address

import httpx
import pytest

from public_ip_lookup.clients.ip_api_co_client import IpApiCo
from public_ip_lookup.errors import (
    ParseError,
    RequestStatusError,
    ReservedIpError,
    TooManyRequestsError,
    TransportError,
    UpstreamServiceError,
)
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import LookupProvider, Parameters, Provider
from public_ip_lookup.service import LookupService
from tests.common import FailingAsyncClient, MockResponse, make_fake_async_client

IPAPI_CO = LookupProvider(name=Provider.ipapi_co)


@pytest.mark.asyncio
async def test_lookup_target_success(monkeypatch: pytest.MonkeyPatch) -> None:
    """Happy path: successful lookup with string lat/lon coerced to float."""
    payload = {
        "ip": "8.8.8.8",
        "country": "US",
        "country_code": "US",
        "country_name": "United States",
        "region": "California",
        "region_code": "CA",
        "city": "Mountain View",
        "postal": "94043",
        "latitude": "37.386",
        "longitude": "-122.0838",
        "timezone": "America/Los_Angeles",
        "asn": "AS15169",
        "org": "Google LLC",
    }
    sent: list[httpx.Request] = []
    response = MockResponse(status_code=HTTPStatus.OK, payload=payload)

    monkeypatch.setattr(httpx, "AsyncClient", make_fake_async_client(response, sent))

    result = await LookupService(IPAPI_CO).lookup("8.8.8.8")

    assert isinstance(result, LookupResponse)
    assert str(result.ip) == "8.8.8.8"
    assert result.country == "United States"
    assert result.country_code == "US"
    assert result.region == "California"
    assert result.region_code == "CA"
    assert result.city == "Mountain View"
    assert result.postal_code == "94043"
    # Use pytest.approx to allow for minor floating-point representation differences.
    assert result.latitude == pytest.approx(37.386)
    assert result.longitude == pytest.approx(-122.0838)
    assert result.time_zone == "America/Los_Angeles"
    assert result.asn == "AS15169"
    assert result.asn_org == "Google LLC"
    assert result.provider == IPAPI_CO

    assert len(sent) == 1
    assert str(sent[0].url) == "https://ipapi.co/8.8.8.8/json/"
    assert sent[0].headers["User-Agent"] == "nil"


@pytest.mark.asyncio
async def test_lookup_own_address(monkeypatch: pytest.MonkeyPatch) -> None:
    """Own address lookup uses the /json/ endpoint and normalizes the payload."""
    payload = {
        "ip": "198.51.100.42",
        "country": "DE",
        "country_name": "Germany",
        "latitude": 52.52,
        "longitude": 13.405,
    }
    sent: list[httpx.Request] = []
    response = MockResponse(status_code=HTTPStatus.OK, payload=payload)

    monkeypatch.setattr(httpx, "AsyncClient", make_fake_async_client(response, sent))

    result = await LookupService(IPAPI_CO).lookup()

    assert str(result.ip) == "198.51.100.42"
    assert result.country == "Germany"
    assert result.country_code == "DE"
    assert result.latitude == pytest.approx(52.52)
    assert result.longitude == pytest.approx(13.405)
    assert str(sent[0].url) == "https://ipapi.co/json/"


def test_endpoint_carries_api_key() -> None:
    client = IpApiCo()

    assert client.endpoint(Parameters(api_key="secret"), ip_address("1.1.1.1")) == "https://ipapi.co/1.1.1.1/json/?key=secret"
    assert client.endpoint(Parameters(api_key="secret"), None) == "https://ipapi.co/json/?key=secret"


@pytest.mark.asyncio
async def test_lookup_reserved_ip_error(monkeypatch: pytest.MonkeyPatch) -> None:
    """ipapi.co indicates a reserved/private IP via an error flag in the JSON payload."""
    payload = {"error": True, "reason": "Reserved IP Address", "reserved": True}
    response = MockResponse(status_code=HTTPStatus.OK, payload=payload)

    monkeypatch.setattr(httpx, "AsyncClient", make_fake_async_client(response))

    with pytest.raises(ReservedIpError) as exc_info:
        await LookupService(IPAPI_CO).lookup("192.168.0.1")

    assert exc_info.value.provider == IPAPI_CO


@pytest.mark.asyncio
@pytest.mark.parametrize("reason", ["RateLimited", "Quota exceeded"])
async def test_lookup_rate_limit_in_payload(monkeypatch: pytest.MonkeyPatch, reason: str) -> None:
    """ipapi.co may report rate limiting inside a 200 reply."""
    payload = {"error": True, "reason": reason, "message": "Slow down"}
    response = MockResponse(status_code=HTTPStatus.OK, payload=payload)

    monkeypatch.setattr(httpx, "AsyncClient", make_fake_async_client(response))

    with pytest.raises(TooManyRequestsError):
        await LookupService(IPAPI_CO).lookup("8.8.8.8")


@pytest.mark.asyncio
async def test_lookup_other_payload_error(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = {"error": True, "reason": "Invalid IP Address"}
    response = MockResponse(status_code=HTTPStatus.OK, payload=payload)

    monkeypatch.setattr(httpx, "AsyncClient", make_fake_async_client(response))

    with pytest.raises(UpstreamServiceError) as exc_info:
        await LookupService(IPAPI_CO).lookup("8.8.8.8")

    assert not isinstance(exc_info.value, ReservedIpError)
    assert "Invalid IP Address" in str(exc_info.value)


@pytest.mark.asyncio
async def test_lookup_http_429(monkeypatch: pytest.MonkeyPatch) -> None:
    response = MockResponse(status_code=HTTPStatus.TOO_MANY_REQUESTS, text="Too Many Requests")

    monkeypatch.setattr(httpx, "AsyncClient", make_fake_async_client(response))

    with pytest.raises(TooManyRequestsError):
        await LookupService(IPAPI_CO).lookup("8.8.8.8")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status_code",
    [
        HTTPStatus.BAD_REQUEST,
        HTTPStatus.FORBIDDEN,
        HTTPStatus.NOT_FOUND,
        HTTPStatus.INTERNAL_SERVER_ERROR,
    ],
)
async def test_lookup_http_error_statuses(monkeypatch: pytest.MonkeyPatch, status_code: HTTPStatus) -> None:
    """Any non-200, non-429 status surfaces as RequestStatusError with the status attached."""
    response = MockResponse(status_code=status_code, text="Error")

    monkeypatch.setattr(httpx, "AsyncClient", make_fake_async_client(response))

    with pytest.raises(RequestStatusError) as exc_info:
        await LookupService(IPAPI_CO).lookup("8.8.8.8")

    assert exc_info.value.status_code == status_code


@pytest.mark.asyncio
async def test_lookup_network_error(monkeypatch: pytest.MonkeyPatch) -> None:
    """Network-level errors are wrapped into TransportError."""
    monkeypatch.setattr(httpx, "AsyncClient", FailingAsyncClient)

    with pytest.raises(TransportError) as exc_info:
        await LookupService(IPAPI_CO).lookup("8.8.8.8")

    assert isinstance(exc_info.value.__cause__, httpx.RequestError)


@pytest.mark.asyncio
async def test_lookup_invalid_json(monkeypatch: pytest.MonkeyPatch) -> None:
    response = MockResponse(status_code=HTTPStatus.OK, text="<html>not json</html>")

    monkeypatch.setattr(httpx, "AsyncClient", make_fake_async_client(response))

    with pytest.raises(ParseError):
        await LookupService(IPAPI_CO).lookup("8.8.8.8")


def test_parse_without_ip_is_parse_error() -> None:
    with pytest.raises(ParseError):
        IpApiCo().parse(json.dumps({"country_name": "Germany"}))


def test_parse_non_object_is_parse_error() -> None:
    with pytest.raises(ParseError):
        IpApiCo().parse(json.dumps(["8.8.8.8"]))


def test_parse_invalid_coordinates_become_none() -> None:
    result = IpApiCo().parse(json.dumps({"ip": "8.8.8.8", "latitude": "north", "longitude": None}))

    assert result.latitude is None
    assert result.longitude is None
