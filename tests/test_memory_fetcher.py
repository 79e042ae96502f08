"""Unit tests for fetchers.memory_fetcher."""

from __future__ import annotations

import pytest

from fetchers import InMemoryContentFetcher, strategy_for
from core.compatibility import PermissiveCompatibilityChecker
from core.load_result import Success
from core.structures import StructureId
from utils.exceptions import FetchError


@pytest.mark.asyncio
async def test_serves_latest_and_listed_versions_from_dict() -> None:
    fetcher = InMemoryContentFetcher.from_dict(
        {"stories": [{"id": "s1", "version": 1}, {"id": "s1", "version": 3}, {"id": "s1", "version": 2}]}
    )

    latest = await fetcher.fetch_latest_story("s1")
    listed = await fetcher.fetch_story_by_versions("s1", [2, 1])

    assert latest.version == 3
    assert [story.version for story in listed] == [2, 1]
    assert fetcher.calls_to("fetch_story_by_versions") == [("s1", (2, 1))]


@pytest.mark.asyncio
async def test_unknown_structures_and_versions_raise() -> None:
    fetcher = InMemoryContentFetcher.from_dict({"skills": [{"id": "k", "version": 1}]})

    with pytest.raises(FetchError):
        await fetcher.fetch_latest_skill("missing")
    with pytest.raises(FetchError):
        await fetcher.fetch_skill_by_versions("k", [2])


@pytest.mark.asyncio
async def test_exploration_strategy_joins_translations() -> None:
    fetcher = InMemoryContentFetcher.from_dict(
        {
            "explorations": [{"id": "e1", "version": 1}],
            "translations": [
                {"exploration_id": "e1", "version": 1, "language_code": "sw", "translations": {"c": "Habari"}}
            ],
        }
    )
    strategy = strategy_for(StructureId.exploration("e1"), fetcher, PermissiveCompatibilityChecker())

    complete, result = await strategy.load_latest()

    assert isinstance(result, Success)
    assert complete.translations["sw"].translations == {"c": "Habari"}
    assert complete.translations["en"].translations == {}
