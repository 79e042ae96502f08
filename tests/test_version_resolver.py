"""Unit tests for orchestrator.version_resolver backward search."""

from __future__ import annotations

import pytest

from core.compatibility import Compatible, SchemaVersionCompatibilityChecker, StructureCompatibilityChecker, verdict
from core.load_result import Failure, Success
from core.structures import StructureId
from fetchers import InMemoryContentFetcher
from models import CompatibilityFailure, Story, Subtopic, SubtopicPage
from orchestrator.version_resolver import VersionResolver
from storage.version_cache import VersionCache

STORY = StructureId.story("s1")


class RejectingChecker(StructureCompatibilityChecker):
    """Rejects the listed story versions."""

    def __init__(self, rejected_versions):
        self.rejected_versions = set(rejected_versions)

    def check_story(self, story):
        if story.version not in self.rejected_versions:
            return Compatible
        return verdict(
            [CompatibilityFailure(kind="story", structure_id=story.id, version=story.version, reason="rejected")]
        )


def _fetcher(latest: int) -> InMemoryContentFetcher:
    return InMemoryContentFetcher().add(
        *(Story(id="s1", version=version, title=f"v{version}") for version in range(1, latest + 1))
    )


def _resolver(fetcher, checker, window: int = 1) -> VersionResolver:
    return VersionResolver(fetcher, checker, VersionCache(), version_fetch_window=window)


@pytest.mark.asyncio
async def test_latest_compatible_version_needs_no_version_fetch() -> None:
    fetcher = _fetcher(5)
    resolver = _resolver(fetcher, RejectingChecker([]))

    result = await resolver.resolve(STORY)

    assert isinstance(result, Success)
    assert result.value.version == 5
    assert fetcher.calls_to("fetch_latest_story") == [("s1", ())]
    assert fetcher.calls_to("fetch_story_by_versions") == []


@pytest.mark.asyncio
async def test_walks_back_to_newest_compatible_and_invalidates_above_it() -> None:
    fetcher = _fetcher(5)
    resolver = _resolver(fetcher, RejectingChecker([5, 4]))

    result = await resolver.resolve(STORY)

    assert isinstance(result, Success)
    assert result.value.version == 3
    assert resolver.cache.most_recent(STORY).version == 3
    assert fetcher.calls_to("fetch_story_by_versions") == [("s1", (4,)), ("s1", (3,))]


@pytest.mark.asyncio
async def test_exhaustion_returns_failure_of_version_one() -> None:
    fetcher = _fetcher(3)
    resolver = _resolver(fetcher, RejectingChecker([1, 2, 3]))

    result = await resolver.resolve(STORY)

    assert isinstance(result, Failure)
    assert [failure.version for failure in result.failures] == [1]
    assert resolver.cache.version_count(STORY) == 1


@pytest.mark.asyncio
async def test_fetch_window_batches_older_versions() -> None:
    fetcher = _fetcher(5)
    resolver = _resolver(fetcher, RejectingChecker([5]), window=3)

    result = await resolver.resolve(STORY)

    assert isinstance(result, Success)
    assert result.value.version == 4
    assert fetcher.calls_to("fetch_story_by_versions") == [("s1", (2, 3, 4))]


@pytest.mark.asyncio
async def test_second_resolve_is_served_from_cache() -> None:
    fetcher = _fetcher(2)
    resolver = _resolver(fetcher, RejectingChecker([2]))

    first = await resolver.resolve(STORY)
    second = await resolver.resolve(STORY)

    assert first == second
    assert len(fetcher.calls) == 2


@pytest.mark.asyncio
async def test_subtopic_pages_are_checked_against_their_subtopic() -> None:
    fetcher = InMemoryContentFetcher().add(SubtopicPage(topic_id="t1", subtopic_index=1, version=1))
    checker = SchemaVersionCompatibilityChecker()

    declared = await _resolver(fetcher, checker).resolve(StructureId.subtopic("t1", 1), Subtopic(id=1))
    undeclared = await _resolver(fetcher, checker).resolve(StructureId.subtopic("t1", 1))

    assert isinstance(declared, Success)
    assert isinstance(undeclared, Failure)
    assert undeclared.failures[0].reason == "Topic does not declare this subtopic."
