"""
In-Memory Fetcher
Serves versioned structures held in memory, optionally loaded from a JSON fixture
"""
import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from models import (
    Exploration,
    ExplorationTranslation,
    Skill,
    Story,
    SubtopicPage,
    Topic,
)
from utils.exceptions import FetchError

from .base import BaseContentFetcher



Structure = Union[Topic, SubtopicPage, Story, Exploration, Skill]
StoreKey = Tuple[str, str]


class InMemoryContentFetcher(BaseContentFetcher):
    """
    Fetcher backed by dictionaries.

    Every call is appended to ``calls`` as ``(method, key, versions)`` so
    callers can assert on how the remote was used. Missing translations are
    served as empty translation sets.
    """

    def __init__(self, latency: float = 0.0):
        self.latency = latency
        self.calls: List[Tuple[str, str, Tuple[int, ...]]] = []
        self._store: Dict[StoreKey, Dict[int, Structure]] = {}
        self._translations: Dict[Tuple[str, int, str], ExplorationTranslation] = {}

    @property
    def name(self) -> str:
        return "memory"

    def add(self, *structures: Structure) -> "InMemoryContentFetcher":
        for structure in structures:
            key = self._key_of(structure)
            self._store.setdefault(key, {})[structure.version] = structure
        return self

    def add_translation(self, translation: ExplorationTranslation) -> "InMemoryContentFetcher":
        key = (translation.exploration_id, translation.version, translation.language_code)
        self._translations[key] = translation
        return self

    @classmethod
    def from_fixture(cls, path: Union[str, Path]) -> "InMemoryContentFetcher":
        """
        Build a fetcher from a JSON fixture.

        The fixture holds lists under "topics", "subtopic_pages", "stories",
        "explorations", "translations" and "skills", each entry being one
        version of one structure.
        """
        raw = json.loads(Path(path).expanduser().read_text(encoding="utf-8"))
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "InMemoryContentFetcher":
        fetcher = cls()
        models = {
            "topics": Topic,
            "subtopic_pages": SubtopicPage,
            "stories": Story,
            "explorations": Exploration,
            "skills": Skill,
        }
        for section, model in models.items():
            for item in raw.get(section) or []:
                fetcher.add(model.model_validate(item))
        for item in raw.get("translations") or []:
            fetcher.add_translation(ExplorationTranslation.model_validate(item))
        return fetcher

    async def fetch_latest_topic(self, topic_id: str) -> Topic:
        return await self._latest("fetch_latest_topic", ("topic", topic_id))

    async def fetch_topic_by_versions(self, topic_id: str, versions: List[int]) -> List[Topic]:
        return await self._by_versions("fetch_topic_by_versions", ("topic", topic_id), versions)

    async def fetch_latest_subtopic_page(self, topic_id: str, subtopic_index: int) -> SubtopicPage:
        return await self._latest("fetch_latest_subtopic_page", ("subtopic", f"{topic_id}/{subtopic_index}"))

    async def fetch_subtopic_page_by_versions(
        self, topic_id: str, subtopic_index: int, versions: List[int]
    ) -> List[SubtopicPage]:
        key = ("subtopic", f"{topic_id}/{subtopic_index}")
        return await self._by_versions("fetch_subtopic_page_by_versions", key, versions)

    async def fetch_latest_story(self, story_id: str) -> Story:
        return await self._latest("fetch_latest_story", ("story", story_id))

    async def fetch_story_by_versions(self, story_id: str, versions: List[int]) -> List[Story]:
        return await self._by_versions("fetch_story_by_versions", ("story", story_id), versions)

    async def fetch_latest_exploration(self, exploration_id: str) -> Exploration:
        return await self._latest("fetch_latest_exploration", ("exploration", exploration_id))

    async def fetch_exploration_by_versions(self, exploration_id: str, versions: List[int]) -> List[Exploration]:
        return await self._by_versions("fetch_exploration_by_versions", ("exploration", exploration_id), versions)

    async def fetch_exploration_translation(
        self, exploration_id: str, version: int, language_code: str
    ) -> ExplorationTranslation:
        self.calls.append(("fetch_exploration_translation", f"{exploration_id}/{language_code}", (version,)))
        await asyncio.sleep(self.latency)
        translation = self._translations.get((exploration_id, version, language_code))
        if translation is None:
            translation = ExplorationTranslation(
                exploration_id=exploration_id, version=version, language_code=language_code
            )
        return translation

    async def fetch_latest_skill(self, skill_id: str) -> Skill:
        return await self._latest("fetch_latest_skill", ("skill", skill_id))

    async def fetch_skill_by_versions(self, skill_id: str, versions: List[int]) -> List[Skill]:
        return await self._by_versions("fetch_skill_by_versions", ("skill", skill_id), versions)

    def calls_to(self, method: str) -> List[Tuple[str, Tuple[int, ...]]]:
        return [(key, versions) for name, key, versions in self.calls if name == method]

    async def _latest(self, method: str, key: StoreKey):
        self.calls.append((method, key[1], ()))
        await asyncio.sleep(self.latency)
        versions = self._store.get(key)
        if not versions:
            raise FetchError(f"Unknown {key[0]}: {key[1]}", structure=key[1])
        structure = versions[max(versions)]
        self._log_fetch(f"{key[0]} {key[1]} (latest v{structure.version})")
        return structure

    async def _by_versions(self, method: str, key: StoreKey, versions: List[int]) -> list:
        self.calls.append((method, key[1], tuple(versions)))
        await asyncio.sleep(self.latency)
        stored = self._store.get(key) or {}
        missing = [version for version in versions if version not in stored]
        if missing:
            raise FetchError(f"Unknown versions {missing} of {key[0]} {key[1]}", structure=key[1])
        self._log_fetch(f"{key[0]} {key[1]}", count=len(versions))
        return [stored[version] for version in versions]

    @staticmethod
    def _key_of(structure: Structure) -> StoreKey:
        if isinstance(structure, Topic):
            return "topic", structure.id
        if isinstance(structure, SubtopicPage):
            return "subtopic", f"{structure.topic_id}/{structure.subtopic_index}"
        if isinstance(structure, Story):
            return "story", structure.id
        if isinstance(structure, Exploration):
            return "exploration", structure.id
        if isinstance(structure, Skill):
            return "skill", structure.id
        raise TypeError(f"Unsupported structure: {type(structure).__name__}")
