"""
Base Fetcher
Abstract base class for every remote content fetcher
"""
from abc import ABC, abstractmethod
from typing import List
import logging

from models import (
    Exploration,
    ExplorationTranslation,
    Skill,
    Story,
    SubtopicPage,
    Topic,
)


logger = logging.getLogger(__name__)


class BaseContentFetcher(ABC):
    """
    Remote content fetcher base class.

    Every structure kind has a "latest" fetch and a "by versions" fetch.
    Implementations must be idempotent: the resolver may request the same
    version more than once.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Fetcher name used in logs"""
        pass

    @abstractmethod
    async def fetch_latest_topic(self, topic_id: str) -> Topic:
        pass

    @abstractmethod
    async def fetch_topic_by_versions(self, topic_id: str, versions: List[int]) -> List[Topic]:
        pass

    @abstractmethod
    async def fetch_latest_subtopic_page(self, topic_id: str, subtopic_index: int) -> SubtopicPage:
        pass

    @abstractmethod
    async def fetch_subtopic_page_by_versions(
        self, topic_id: str, subtopic_index: int, versions: List[int]
    ) -> List[SubtopicPage]:
        pass

    @abstractmethod
    async def fetch_latest_story(self, story_id: str) -> Story:
        pass

    @abstractmethod
    async def fetch_story_by_versions(self, story_id: str, versions: List[int]) -> List[Story]:
        pass

    @abstractmethod
    async def fetch_latest_exploration(self, exploration_id: str) -> Exploration:
        pass

    @abstractmethod
    async def fetch_exploration_by_versions(self, exploration_id: str, versions: List[int]) -> List[Exploration]:
        pass

    @abstractmethod
    async def fetch_exploration_translation(
        self, exploration_id: str, version: int, language_code: str
    ) -> ExplorationTranslation:
        """
        Translations of one exploration version into one language.

        Args:
            exploration_id: exploration ID
            version: exploration version the translation belongs to
            language_code: content language code, e.g. "hi-en"
        """
        pass

    @abstractmethod
    async def fetch_latest_skill(self, skill_id: str) -> Skill:
        pass

    @abstractmethod
    async def fetch_skill_by_versions(self, skill_id: str, versions: List[int]) -> List[Skill]:
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Release transport resources"""
        pass

    def _log_fetch(self, what: str, count: int = 1):
        logger.debug(f"[{self.name}] Fetched {count} x {what}")

    def _log_error(self, message: str, error: Exception):
        logger.error(f"[{self.name}] {message}: {error}")
