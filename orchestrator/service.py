"""Topic pack assembly: the orchestration loop and public entry points."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

from aggregator.fan_out import FanOutExecutor
from aggregator.metrics import DataGroupType, MetricCallbacks
from config import ResolverSettings, get_resolver_settings
from core.compatibility import PermissiveCompatibilityChecker, StructureCompatibilityChecker
from core.load_result import Failure, LoadResult, Pending, Success, combine_all, reduce_all
from core.skill_refs import collect_skill_ids
from core.structures import StructureId
from fetchers.base import BaseContentFetcher
from models import CompleteTopicPack, LanguageType, Subtopic, Topic
from storage.version_cache import VersionCache
from utils.exceptions import IncompatibleTopicError, LogicError

from .fragments import TopicPackFragment
from .skill_closure import SkillClosureResolver
from .version_resolver import VersionResolver

logger = logging.getLogger(__name__)


class TopicPackRun:
    """
    One resolution of one topic, owning its version cache.

    Picks the newest topic version whose whole closure is compatible: each
    attempt assembles the closure for the newest remaining topic version,
    and a failed attempt drops that version and tries the next older one.
    """

    def __init__(
        self,
        topic_id: str,
        resolver: VersionResolver,
        skills: SkillClosureResolver,
        executor: FanOutExecutor,
        metrics: MetricCallbacks,
    ) -> None:
        self.topic_id = topic_id
        self.resolver = resolver
        self.skills = skills
        self.executor = executor
        self.metrics = metrics
        self.attempts = 0

    @property
    def cache(self) -> VersionCache:
        return self.resolver.cache

    async def resolve(self) -> LoadResult[CompleteTopicPack]:
        topic_key = StructureId.topic(self.topic_id)
        while True:
            self.attempts += 1
            result = await self.try_create_pack_for_latest_topic_version()
            if not isinstance(result, Failure):
                return result

            self.metrics.reset_all_group_counts()
            if self.cache.version_count(topic_key) <= 1:
                # No older topic version is left to try.
                return result
            rejected = self.cache.most_recent(topic_key)
            self.cache.invalidate(rejected)
            logger.info(
                f"Topic {self.topic_id} v{rejected.version} has no compatible closure; "
                f"retrying at v{rejected.version - 1}"
            )

    async def try_create_pack_for_latest_topic_version(self) -> LoadResult[CompleteTopicPack]:
        topic_result = await self.resolver.resolve(StructureId.topic(self.topic_id))

        async def _assemble(topic: Topic) -> LoadResult[TopicPackFragment]:
            logger.info(f"Assembling topic {topic.id} v{topic.version} (attempt {self.attempts})")
            fragments = await self._load_fragments(topic)
            return reduce_all(fragments, TopicPackFragment.combine_with)

        fragment_result = await topic_result.flat_map_async(_assemble)
        return fragment_result.map(TopicPackFragment.to_topic_pack)

    async def _load_fragments(self, topic: Topic) -> List[LoadResult[TopicPackFragment]]:
        subtopics_result, stories_result = await asyncio.gather(
            self._load_subtopics(topic),
            self._load_stories(topic.referenced_story_ids()),
        )

        async def _explorations_of(stories_fragment: TopicPackFragment) -> LoadResult[TopicPackFragment]:
            exploration_ids = [
                exp_id for story in stories_fragment.stories.values() for exp_id in story.referenced_exploration_ids()
            ]
            return await self._load_explorations(list(dict.fromkeys(exploration_ids)))

        explorations_result = await stories_result.flat_map_async(_explorations_of)
        skills_result = await self._load_skills(topic, subtopics_result, stories_result, explorations_result)
        return [
            Success(TopicPackFragment(topic=topic)),
            subtopics_result,
            stories_result,
            explorations_result,
            skills_result,
            Success(TopicPackFragment(default_language=LanguageType.from_content_code(topic.language_code))),
        ]

    async def _load_subtopics(self, topic: Topic) -> LoadResult[TopicPackFragment]:
        subtopics: Dict[int, Subtopic] = topic.subtopic_map()
        indexes = list(subtopics)
        self.metrics.report_group_count(DataGroupType.SUBTOPIC, len(indexes))
        results = await self.executor.run(
            indexes,
            lambda index: self.resolver.resolve(StructureId.subtopic(topic.id, index), subtopics[index]),
            DataGroupType.SUBTOPIC,
            self.metrics,
        )
        return combine_all(results, lambda pages: TopicPackFragment(subtopic_pages=dict(zip(indexes, pages))))

    async def _load_stories(self, story_ids: List[str]) -> LoadResult[TopicPackFragment]:
        self.metrics.report_group_count(DataGroupType.STORY, len(story_ids))
        results = await self.executor.run(
            story_ids,
            lambda story_id: self.resolver.resolve(StructureId.story(story_id)),
            DataGroupType.STORY,
            self.metrics,
        )
        return combine_all(results, lambda stories: TopicPackFragment(stories={story.id: story for story in stories}))

    async def _load_explorations(self, exploration_ids: List[str]) -> LoadResult[TopicPackFragment]:
        self.metrics.report_group_count(DataGroupType.EXPLORATION, len(exploration_ids))
        results = await self.executor.run(
            exploration_ids,
            lambda exp_id: self.resolver.resolve(StructureId.exploration(exp_id)),
            DataGroupType.EXPLORATION,
            self.metrics,
        )
        return combine_all(results, lambda explorations: TopicPackFragment(explorations={exp.id: exp for exp in explorations}))

    async def _load_skills(
        self,
        topic: Topic,
        subtopics_result: LoadResult[TopicPackFragment],
        stories_result: LoadResult[TopicPackFragment],
        explorations_result: LoadResult[TopicPackFragment],
    ) -> LoadResult[TopicPackFragment]:
        # The closure is seeded from everything else, so it waits for all of it.
        for dependency in (subtopics_result, stories_result, explorations_result):
            if not isinstance(dependency, Success):
                return dependency.map(lambda _: TopicPackFragment())

        structures = (
            [topic]
            + list(subtopics_result.value.subtopic_pages.values())
            + list(stories_result.value.stories.values())
            + list(explorations_result.value.explorations.values())
        )
        seed = [skill_id for structure in structures for skill_id in collect_skill_ids(structure)]
        skills_result = await self.skills.resolve(seed, self.metrics)
        return skills_result.map(
            lambda skills: TopicPackFragment(referenced_skills={skill.id: skill for skill in skills})
        )


class TopicPackRepository:
    """
    Builds complete, internally consistent topic packs.

    Every call gets its own version cache, so concurrent calls never share
    state. Fan-out within a call goes through one ``FanOutExecutor``.
    """

    def __init__(
        self,
        fetcher: BaseContentFetcher,
        checker: Optional[StructureCompatibilityChecker] = None,
        *,
        settings: Optional[ResolverSettings] = None,
        executor: Optional[FanOutExecutor] = None,
    ) -> None:
        self.fetcher = fetcher
        self.checker = checker or PermissiveCompatibilityChecker()
        self.settings = settings or get_resolver_settings()
        self._executor = executor

    def new_run(self, topic_id: str, metric_callbacks: Optional[MetricCallbacks] = None) -> TopicPackRun:
        executor = self._executor or FanOutExecutor(self.settings.max_concurrent_fetches)
        resolver = VersionResolver(
            self.fetcher,
            self.checker,
            VersionCache(),
            version_fetch_window=self.settings.version_fetch_window,
        )
        skills = SkillClosureResolver(resolver, executor, max_rounds=self.settings.max_skill_closure_rounds)
        return TopicPackRun(topic_id, resolver, skills, executor, metric_callbacks or MetricCallbacks())

    async def resolve_topic_pack(
        self, topic_id: str, metric_callbacks: Optional[MetricCallbacks] = None
    ) -> CompleteTopicPack:
        """
        Resolve the newest fully compatible pack for a topic.

        Raises:
            IncompatibleTopicError: no topic version has a compatible closure
        """
        run = self.new_run(topic_id, metric_callbacks)
        result = await run.resolve()
        if isinstance(result, Pending):
            raise LogicError(f"Pack result should not be pending for topic: {topic_id}.")
        if isinstance(result, Failure):
            failures = list(dict.fromkeys(result.failures))
            logger.warning(f"Topic {topic_id} is incompatible after {run.attempts} attempt(s)")
            raise IncompatibleTopicError(topic_id, failures)
        pack = result.value
        logger.info(
            f"Resolved topic {topic_id} v{pack.topic.version}: {len(pack.subtopic_pages)} subtopic page(s), "
            f"{len(pack.stories)} story(ies), {len(pack.explorations)} exploration(s), "
            f"{len(pack.referenced_skills)} skill(s)"
        )
        return pack


async def resolve_topic_pack(
    topic_id: str,
    metric_callbacks: Optional[MetricCallbacks] = None,
    *,
    fetcher: BaseContentFetcher,
    checker: Optional[StructureCompatibilityChecker] = None,
    settings: Optional[ResolverSettings] = None,
) -> CompleteTopicPack:
    """Top-level API: resolve one topic pack with a throwaway repository."""
    repository = TopicPackRepository(fetcher, checker, settings=settings)
    return await repository.resolve_topic_pack(topic_id, metric_callbacks)
