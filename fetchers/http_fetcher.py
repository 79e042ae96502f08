"""
HTTP Fetcher
Fetches versioned structures from a remote content service over HTTP
"""
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from config import get_fetch_settings
from models import (
    Exploration,
    ExplorationTranslation,
    Skill,
    Story,
    SubtopicPage,
    Topic,
)
from utils.exceptions import ConfigurationError, FetchError

from .base import BaseContentFetcher



M = TypeVar("M", bound=BaseModel)


def _is_retryable(error: BaseException) -> bool:
    if isinstance(error, httpx.TransportError):
        return True
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code >= 500
    return False


class HttpContentFetcher(BaseContentFetcher):
    """
    Content service client.

    Layout:
        GET {base}/{collection}/{id}                      latest version
        GET {base}/{collection}/{id}/versions?v=1&v=2     listed versions, in request order
        GET {base}/explorations/{id}/versions/{version}/translations/{language_code}

    Subtopic pages are addressed as ``subtopic_pages/{topic_id}/{index}``.
    Transport errors and 5xx responses are retried.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_wait_multiplier: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        fetch_settings = get_fetch_settings()
        self.base_url = (base_url or fetch_settings.base_url or "").rstrip("/")
        if not self.base_url:
            raise ConfigurationError("A content service base URL is required (TOPIC_PACK_FETCH_BASE_URL).")
        self.timeout = timeout if timeout is not None else fetch_settings.request_timeout
        self.max_retries = max(1, int(max_retries if max_retries is not None else fetch_settings.max_retries))
        self.retry_wait_multiplier = retry_wait_multiplier
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            transport=transport,
        )

    @property
    def name(self) -> str:
        return "http"

    async def close(self):
        await self._client.aclose()

    async def fetch_latest_topic(self, topic_id: str) -> Topic:
        return await self._fetch_one(f"/topics/{topic_id}", Topic)

    async def fetch_topic_by_versions(self, topic_id: str, versions: List[int]) -> List[Topic]:
        return await self._fetch_many(f"/topics/{topic_id}/versions", versions, Topic)

    async def fetch_latest_subtopic_page(self, topic_id: str, subtopic_index: int) -> SubtopicPage:
        return await self._fetch_one(f"/subtopic_pages/{topic_id}/{subtopic_index}", SubtopicPage)

    async def fetch_subtopic_page_by_versions(
        self, topic_id: str, subtopic_index: int, versions: List[int]
    ) -> List[SubtopicPage]:
        return await self._fetch_many(f"/subtopic_pages/{topic_id}/{subtopic_index}/versions", versions, SubtopicPage)

    async def fetch_latest_story(self, story_id: str) -> Story:
        return await self._fetch_one(f"/stories/{story_id}", Story)

    async def fetch_story_by_versions(self, story_id: str, versions: List[int]) -> List[Story]:
        return await self._fetch_many(f"/stories/{story_id}/versions", versions, Story)

    async def fetch_latest_exploration(self, exploration_id: str) -> Exploration:
        return await self._fetch_one(f"/explorations/{exploration_id}", Exploration)

    async def fetch_exploration_by_versions(self, exploration_id: str, versions: List[int]) -> List[Exploration]:
        return await self._fetch_many(f"/explorations/{exploration_id}/versions", versions, Exploration)

    async def fetch_exploration_translation(
        self, exploration_id: str, version: int, language_code: str
    ) -> ExplorationTranslation:
        path = f"/explorations/{exploration_id}/versions/{version}/translations/{language_code}"
        return await self._fetch_one(path, ExplorationTranslation)

    async def fetch_latest_skill(self, skill_id: str) -> Skill:
        return await self._fetch_one(f"/skills/{skill_id}", Skill)

    async def fetch_skill_by_versions(self, skill_id: str, versions: List[int]) -> List[Skill]:
        return await self._fetch_many(f"/skills/{skill_id}/versions", versions, Skill)

    async def _fetch_one(self, path: str, model: Type[M]) -> M:
        payload = await self._get_json(path)
        return self._validate(path, model, payload)

    async def _fetch_many(self, path: str, versions: List[int], model: Type[M]) -> List[M]:
        if not versions:
            return []
        payload = await self._get_json(path, params={"v": [str(version) for version in versions]})
        if not isinstance(payload, list):
            raise FetchError(f"Expected a list of versions from {path}", structure=path)
        return [self._validate(path, model, item) for item in payload]

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries),
                wait=wait_exponential(multiplier=self.retry_wait_multiplier, min=0, max=10),
                retry=retry_if_exception(_is_retryable),
                reraise=True,
            ):
                with attempt:
                    response = await self._client.get(path, params=params)
                    response.raise_for_status()
        except httpx.HTTPError as e:
            self._log_error(f"GET {path} failed", e)
            raise FetchError(f"Request failed: GET {path}: {e}", structure=path) from e

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"Invalid JSON from GET {path}", structure=path) from e

    @staticmethod
    def _validate(path: str, model: Type[M], payload: Any) -> M:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise FetchError(f"Malformed {model.__name__} from {path}: {e}", structure=path) from e
