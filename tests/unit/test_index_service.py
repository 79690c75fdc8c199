"""
Module 04 - Index Service Tests
Tests for picopak/index/service.py

Tests:
- candidate index URLs tried in order, first success wins
- aggregate failures carry the last message
- listing and search
"""
import pytest
import requests

from picopak.config.runtime import RuntimeConfig
from picopak.http import HttpClient
from picopak.index import fetch_index, list_index_packages, resolve_from_candidates, search_index
from picopak.index.service import IndexPackageSummary
from picopak.schemas.errors import NotFoundError, TransportError

from fixtures.common import FakeResponse, json_response, make_array_index, make_mock_session

PRIMARY = "https://primary.example.com/index.json"
MIRROR = "https://mirror.example.com/index.json"


def _client(routes) -> HttpClient:
    return HttpClient(session=make_mock_session(routes))


class TestFetchIndex:
    """Tests for fetch_index()."""

    def test_first_success_wins(self, fastled_index):
        client = _client({PRIMARY: json_response(fastled_index), MIRROR: json_response({})})

        url, document = fetch_index([PRIMARY, MIRROR], client)

        assert url == PRIMARY
        assert document == fastled_index
        assert client._session.get.call_count == 1

    def test_falls_back_on_failure(self, fastled_index):
        client = _client({
            PRIMARY: requests.ConnectionError("down"),
            MIRROR: json_response(fastled_index),
        })
        url, _ = fetch_index([PRIMARY, MIRROR], client)
        assert url == MIRROR

    def test_invalid_json_skipped(self, fastled_index):
        client = _client({PRIMARY: FakeResponse(200, b"{not json"), MIRROR: json_response(fastled_index)})
        url, _ = fetch_index([PRIMARY, MIRROR], client)
        assert url == MIRROR

    def test_all_fail(self):
        client = _client({PRIMARY: FakeResponse(500), MIRROR: FakeResponse(502)})

        with pytest.raises(TransportError) as exc_info:
            fetch_index([PRIMARY, MIRROR], client)

        message = exc_info.value.message
        assert message.startswith("Unable to fetch package index.")
        assert "HTTP 502" in message


class TestResolveFromCandidates:
    """Tests for resolve_from_candidates()."""

    def _config(self):
        return RuntimeConfig(index_urls=[PRIMARY, MIRROR])

    def test_package_only_in_mirror(self, fastled_index):
        client = _client({
            PRIMARY: json_response(make_array_index(name="NeoPixel")),
            MIRROR: json_response(fastled_index),
        })
        resolved = resolve_from_candidates("FastLED", self._config(), client, platform="rp2040")
        assert resolved.version == "3.10.2"

    def test_not_found_everywhere_reraised(self):
        index = make_array_index(name="NeoPixel")
        client = _client({PRIMARY: json_response(index), MIRROR: json_response(index)})

        with pytest.raises(NotFoundError):
            resolve_from_candidates("FastLED", self._config(), client, platform="rp2040")

    def test_transport_failure_wrapped(self):
        client = _client({PRIMARY: FakeResponse(500), MIRROR: requests.Timeout("slow")})

        with pytest.raises(TransportError) as exc_info:
            resolve_from_candidates("FastLED", self._config(), client, platform="rp2040")

        message = exc_info.value.message
        assert message.startswith('Unable to resolve package "FastLED".')
        assert "slow" in message
        assert exc_info.value.retryable


class TestCatalog:
    """Tests for list_index_packages() and search_index()."""

    def test_latest_by_precedence(self, fastled_index):
        assert list_index_packages(fastled_index) == [
            IndexPackageSummary(name="FastLED", description="Addressable LED driver", version="3.10.3-rc1"),
        ]

    def test_bad_entry_skipped(self, fastled_index):
        fastled_index["packages"].append({"name": "Broken", "releases": 42})
        names = [entry.name for entry in list_index_packages(fastled_index)]
        assert names == ["FastLED"]

    def test_search_name_and_description(self):
        entries = [
            IndexPackageSummary(name="FastLED", description="Addressable LED driver"),
            IndexPackageSummary(name="PicoW-HTTP", description="tiny web server"),
        ]
        assert [e.name for e in search_index(entries, "led")] == ["FastLED"]
        assert [e.name for e in search_index(entries, "WEB")] == ["PicoW-HTTP"]

    def test_search_limit(self):
        entries = [IndexPackageSummary(name=f"lib{i}") for i in range(30)]

        assert len(search_index(entries, "lib")) == 20
        assert len(search_index(entries, "lib", limit=None)) == 30
