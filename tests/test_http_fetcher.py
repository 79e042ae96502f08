"""Unit tests for fetchers.http_fetcher against a mocked transport."""

from __future__ import annotations

import httpx
import pytest

from config import get_settings
from fetchers import HttpContentFetcher
from utils.exceptions import ConfigurationError, FetchError

BASE_URL = "http://content.test/api"


def _fetcher(handler, max_retries: int = 3) -> HttpContentFetcher:
    return HttpContentFetcher(
        BASE_URL,
        max_retries=max_retries,
        retry_wait_multiplier=0,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_fetches_latest_topic() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={"id": "T1", "version": 3, "name": "Fractions"})

    async with _fetcher(handler) as fetcher:
        topic = await fetcher.fetch_latest_topic("T1")

    assert topic.version == 3
    assert seen == ["/api/topics/T1"]


@pytest.mark.asyncio
async def test_fetches_listed_versions_in_request_order() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        versions = [int(value) for value in request.url.params.get_list("v")]
        assert request.url.path == "/api/subtopic_pages/T1/2/versions"
        return httpx.Response(
            200,
            json=[{"topic_id": "T1", "subtopic_index": 2, "version": version} for version in versions],
        )

    async with _fetcher(handler) as fetcher:
        pages = await fetcher.fetch_subtopic_page_by_versions("T1", 2, [2, 3])

    assert [page.version for page in pages] == [2, 3]


@pytest.mark.asyncio
async def test_server_errors_are_retried() -> None:
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json={"id": "S1", "version": 1})

    async with _fetcher(handler) as fetcher:
        skill = await fetcher.fetch_latest_skill("S1")

    assert skill.id == "S1"
    assert len(attempts) == 3


@pytest.mark.asyncio
async def test_client_errors_fail_without_retry() -> None:
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(404, json={"error": "not found"})

    async with _fetcher(handler) as fetcher:
        with pytest.raises(FetchError) as excinfo:
            await fetcher.fetch_latest_story("missing")

    assert len(attempts) == 1
    assert excinfo.value.structure == "/stories/missing"


@pytest.mark.asyncio
async def test_malformed_payloads_become_fetch_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/versions"):
            return httpx.Response(200, json={"not": "a list"})
        return httpx.Response(200, json={"id": "E1"})

    async with _fetcher(handler) as fetcher:
        with pytest.raises(FetchError):
            await fetcher.fetch_latest_exploration("E1")
        with pytest.raises(FetchError):
            await fetcher.fetch_exploration_by_versions("E1", [1])


def test_base_url_is_required(monkeypatch) -> None:
    monkeypatch.delenv("TOPIC_PACK_FETCH_BASE_URL", raising=False)
    get_settings.cache_clear()
    try:
        with pytest.raises(ConfigurationError):
            HttpContentFetcher()
    finally:
        get_settings.cache_clear()
