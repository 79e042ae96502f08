"""Backward version search over a run's version cache."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from core.compatibility import StructureCompatibilityChecker
from core.load_result import LoadResult, Pending, Success
from core.structures import StructureId, VersionedStructureReference
from fetchers.base import BaseContentFetcher
from fetchers.strategies import FetchStrategy, strategy_for
from models import Subtopic
from storage.version_cache import VersionCache
from utils.exceptions import LogicError

logger = logging.getLogger(__name__)


class VersionResolver:
    """
    Finds the newest individually compatible version of a structure.

    No guarantee is made about cross-structure consistency; that's checked
    by the pack assembler, which invalidates topic versions as needed.
    Fetches aren't atomic, but fetching and checking a version is
    idempotent, so redundant concurrent fetches only cost time and the last
    cached write wins.
    """

    def __init__(
        self,
        fetcher: BaseContentFetcher,
        checker: StructureCompatibilityChecker,
        cache: VersionCache,
        *,
        version_fetch_window: int = 1,
    ) -> None:
        self.fetcher = fetcher
        self.checker = checker
        self.cache = cache
        self.version_fetch_window = max(1, int(version_fetch_window))

    async def resolve(self, structure_id: StructureId, subtopic: Optional[Subtopic] = None) -> LoadResult:
        """Return the newest compatible version, or the failure of version 1 if none is."""
        strategy = strategy_for(structure_id, self.fetcher, self.checker, subtopic)
        if structure_id not in self.cache:
            await self._track_latest(strategy, subtopic)

        reference: Optional[VersionedStructureReference] = self.cache.most_recent(structure_id)
        last_invalid: Optional[VersionedStructureReference] = None
        while reference is not None:
            result = await self._load(strategy, reference)
            if last_invalid is not None:
                self.cache.invalidate(last_invalid)
            if isinstance(result, Success):
                if last_invalid is not None:
                    logger.debug(f"Resolved {structure_id} at fallback v{reference.version}")
                return result
            last_invalid = reference
            reference = reference.previous_version()

        # Every newer version was invalidated on the way down; only version 1 remains.
        oldest = self.cache.most_recent(structure_id)
        logger.debug(f"No compatible version of {structure_id}")
        return await self._load(strategy, oldest)

    async def _track_latest(self, strategy: FetchStrategy, subtopic: Optional[Subtopic]) -> None:
        structure, result = await strategy.load_latest()
        if strategy.structure_id in self.cache:
            # A concurrent caller tracked it while we were fetching.
            return
        latest = VersionedStructureReference(strategy.structure_id, structure.version, subtopic)
        self.cache.track(latest, result)

    async def _load(self, strategy: FetchStrategy, reference: VersionedStructureReference) -> LoadResult:
        result = self.cache.get(reference)
        if not isinstance(result, Pending):
            return result

        batch = self.cache.pending_window(reference, self.version_fetch_window)
        versions = [pending.version for pending in batch]
        logger.debug(f"Fetching {strategy.structure_id} versions {versions}")
        for version, loaded in await strategy.load_versions(versions):
            self.cache.put(replace(reference, version=version), loaded)

        result = self.cache.get(reference)
        if isinstance(result, Pending):
            raise LogicError(f"Expected {reference} to be loaded.")
        return result
