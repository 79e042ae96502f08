"""
Fetch Strategies
Per-kind fetch and compatibility dispatch
"""
import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Tuple
import logging

from core.compatibility import CompatibilityResult, StructureCompatibilityChecker
from core.load_result import Failure, LoadResult, Success
from core.structures import StructureId, StructureKind
from models import SUPPORTED_LANGUAGES, CompleteExploration, Exploration, Subtopic
from utils.exceptions import FetchError, LogicError

from .base import BaseContentFetcher


logger = logging.getLogger(__name__)


async def load_complete_exploration(fetcher: BaseContentFetcher, exploration: Exploration) -> CompleteExploration:
    """Join an exploration with its translations for every supported language."""
    translations = await asyncio.gather(
        *(
            fetcher.fetch_exploration_translation(exploration.id, exploration.version, language.content_code)
            for language in SUPPORTED_LANGUAGES
        )
    )
    return CompleteExploration(
        exploration=exploration,
        translations=dict(zip(SUPPORTED_LANGUAGES, translations)),
    )


@dataclass(frozen=True)
class FetchStrategy:
    """How to fetch and check one structure."""

    structure_id: StructureId
    fetch_latest: Callable[[], Awaitable[Any]]
    fetch_versions: Callable[[List[int]], Awaitable[List[Any]]]
    check: Callable[[Any], CompatibilityResult]

    def to_load_result(self, structure: Any) -> LoadResult:
        result = self.check(structure)
        if result.is_compatible:
            return Success(structure)
        logger.debug(f"{self.structure_id} v{structure.version} is incompatible: {list(result.failures)}")
        return Failure(result.failures)

    async def load_latest(self) -> Tuple[Any, LoadResult]:
        structure = await self.fetch_latest()
        return structure, self.to_load_result(structure)

    async def load_versions(self, versions: List[int]) -> List[Tuple[int, LoadResult]]:
        structures = await self.fetch_versions(versions)
        if len(structures) != len(versions):
            raise FetchError(
                f"Requested {len(versions)} version(s) but received {len(structures)}.",
                structure=str(self.structure_id),
            )
        return [(version, self.to_load_result(structure)) for version, structure in zip(versions, structures)]


def strategy_for(
    structure_id: StructureId,
    fetcher: BaseContentFetcher,
    checker: StructureCompatibilityChecker,
    subtopic: Optional[Subtopic] = None,
) -> FetchStrategy:
    """Select the fetch calls and compatibility check for a structure's kind."""
    kind = structure_id.kind
    if kind is StructureKind.TOPIC:
        return FetchStrategy(
            structure_id,
            fetch_latest=lambda: fetcher.fetch_latest_topic(structure_id.id),
            fetch_versions=lambda versions: fetcher.fetch_topic_by_versions(structure_id.id, versions),
            check=checker.check_topic,
        )
    if kind is StructureKind.SUBTOPIC:
        index = structure_id.subtopic_index
        return FetchStrategy(
            structure_id,
            fetch_latest=lambda: fetcher.fetch_latest_subtopic_page(structure_id.id, index),
            fetch_versions=lambda versions: fetcher.fetch_subtopic_page_by_versions(structure_id.id, index, versions),
            check=lambda page: checker.check_subtopic_page(page, subtopic),
        )
    if kind is StructureKind.STORY:
        return FetchStrategy(
            structure_id,
            fetch_latest=lambda: fetcher.fetch_latest_story(structure_id.id),
            fetch_versions=lambda versions: fetcher.fetch_story_by_versions(structure_id.id, versions),
            check=checker.check_story,
        )
    if kind is StructureKind.EXPLORATION:
        async def _latest() -> CompleteExploration:
            exploration = await fetcher.fetch_latest_exploration(structure_id.id)
            return await load_complete_exploration(fetcher, exploration)

        async def _versions(versions: List[int]) -> List[CompleteExploration]:
            explorations = await fetcher.fetch_exploration_by_versions(structure_id.id, versions)
            return list(
                await asyncio.gather(*(load_complete_exploration(fetcher, exp) for exp in explorations))
            )

        return FetchStrategy(
            structure_id,
            fetch_latest=_latest,
            fetch_versions=_versions,
            check=checker.check_exploration,
        )
    if kind is StructureKind.SKILL:
        return FetchStrategy(
            structure_id,
            fetch_latest=lambda: fetcher.fetch_latest_skill(structure_id.id),
            fetch_versions=lambda versions: fetcher.fetch_skill_by_versions(structure_id.id, versions),
            check=checker.check_skill,
        )
    raise LogicError(f"Unsupported structure kind: {kind!r}")
