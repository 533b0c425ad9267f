from http import HTTPStatus

import httpx
import pytest

from public_ip_lookup import blocking
from public_ip_lookup.cache import CacheStorage, ResponseCache
from public_ip_lookup.errors import AllProvidersFailedError, TargetNotSupportedError
from public_ip_lookup.models.request_models import LookupProvider, Provider
from tests.common import ForbiddenAsyncClient, MockResponse, make_fake_client


@pytest.fixture(autouse=True)
def _no_async_client(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(httpx, "AsyncClient", ForbiddenAsyncClient)


def test_blocking_lookup_uses_sync_client(monkeypatch: pytest.MonkeyPatch) -> None:
    sent: list[httpx.Request] = []
    monkeypatch.setattr(httpx, "Client", make_fake_client(MockResponse(HTTPStatus.OK, {"ip": "203.0.113.7"}), sent))

    result = blocking.LookupService(LookupProvider(name=Provider.ipify)).lookup()

    assert str(result.ip) == "203.0.113.7"
    assert [str(request.url) for request in sent] == ["https://api64.ipify.org/?format=json"]


def test_blocking_lookup_target_not_supported(monkeypatch: pytest.MonkeyPatch) -> None:
    sent: list[httpx.Request] = []
    monkeypatch.setattr(httpx, "Client", make_fake_client(MockResponse(HTTPStatus.OK), sent))

    with pytest.raises(TargetNotSupportedError):
        blocking.LookupService(LookupProvider(name=Provider.ipify)).lookup("8.8.8.8")

    assert sent == []


def test_blocking_lookup_bulk_and_set_provider() -> None:
    service = blocking.LookupService(LookupProvider(name=Provider.ipify))
    service.set_provider(LookupProvider.mock("11.1.1.1"))

    results = service.lookup_bulk(["8.8.8.8", "9.9.9.9"])

    assert service.provider_type == LookupProvider.mock("11.1.1.1")
    assert [str(result.ip) for result in results] == ["11.1.1.1", "11.1.1.1"]


def test_blocking_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    responses = {
        "ipwho.is": MockResponse(HTTPStatus.SERVICE_UNAVAILABLE),
        "ifconfig.co": MockResponse(HTTPStatus.OK, {"ip": "203.0.113.7", "country_iso": "NL"}),
    }
    monkeypatch.setattr(httpx, "Client", make_fake_client(responses))
    providers = [(LookupProvider(name=Provider.ipwhois), None), (LookupProvider(name=Provider.ifconfig), None)]

    result = blocking.lookup_with_fallback(providers)

    assert result.provider == LookupProvider(name=Provider.ifconfig)
    assert result.country_code == "NL"


def test_blocking_fallback_all_failed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(httpx, "Client", make_fake_client(httpx.ConnectError("Network failure")))

    with pytest.raises(AllProvidersFailedError):
        blocking.perform_lookup([(LookupProvider(name=Provider.ipwhois), None)])


def test_blocking_cached_lookup(storage: CacheStorage) -> None:
    first = blocking.perform_cached_lookup([(LookupProvider.mock("11.1.1.1"), None)], ttl=None, storage=storage)
    second = blocking.perform_cached_lookup([(LookupProvider.mock("22.2.2.2"), None)], ttl=None, storage=storage)

    assert str(first.ip) == "11.1.1.1"
    assert str(second.ip) == "11.1.1.1"
    assert ResponseCache.load(storage).current_ip() == "11.1.1.1"
