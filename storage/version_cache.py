"""
Version Cache
Per-run cache of load results for every known version of every structure
"""
from typing import Dict, List
import logging

from core.load_result import LoadResult, Pending
from core.structures import StructureId, VersionedStructureReference
from utils.exceptions import LogicError


logger = logging.getLogger(__name__)

VersionMap = Dict[VersionedStructureReference, LoadResult]


class VersionCache:
    """
    Load results keyed by structure, then by version.

    Once a structure is tracked its map holds exactly one entry for each
    version from 1 up to the newest remaining version. Versions are only
    dropped from the top, one at a time, and the last entry never goes.

    A cache belongs to a single resolution run and isn't safe to share
    between concurrent runs.
    """

    def __init__(self):
        self._structures: Dict[StructureId, VersionMap] = {}

    def __contains__(self, structure_id: StructureId) -> bool:
        return structure_id in self._structures

    def __len__(self) -> int:
        return len(self._structures)

    def track(self, latest: VersionedStructureReference, result: LoadResult) -> None:
        """
        Start tracking a structure from its latest version.

        Args:
            latest: reference to the newest version reported by the remote
            result: checked result for that version

        Every older version is recorded as Pending until it's fetched.
        """
        versions: VersionMap = {
            latest.to_version(version): Pending() for version in range(1, latest.version)
        }
        versions[latest] = result
        self._structures[latest.structure_id] = versions
        logger.debug(f"Tracking {latest.structure_id} with {latest.version} version(s)")

    def get(self, reference: VersionedStructureReference) -> LoadResult:
        versions = self._versions_of(reference.structure_id)
        try:
            return versions[reference]
        except KeyError as e:
            raise LogicError(f"No cached entry for {reference}.") from e

    def put(self, reference: VersionedStructureReference, result: LoadResult) -> None:
        """Store a result; the last write for a reference wins."""
        versions = self._versions_of(reference.structure_id)
        if reference not in versions:
            # Late redundant fetch for a version that has since been invalidated.
            logger.debug(f"Dropping result for invalidated {reference}")
            return
        versions[reference] = result

    def most_recent(self, structure_id: StructureId) -> VersionedStructureReference:
        versions = self._versions_of(structure_id)
        return max(versions, key=lambda reference: reference.version)

    def version_count(self, structure_id: StructureId) -> int:
        return len(self._structures.get(structure_id, {}))

    def references(self, structure_id: StructureId) -> List[VersionedStructureReference]:
        """All cached references for a structure, oldest first."""
        return sorted(self._versions_of(structure_id), key=lambda reference: reference.version)

    def pending_window(self, reference: VersionedStructureReference, window: int) -> List[VersionedStructureReference]:
        """
        Pending versions to fetch together, starting at ``reference`` and going back.

        Stops at the first non-pending version or after ``window`` versions.
        The result is ordered oldest first.
        """
        versions = self._versions_of(reference.structure_id)
        batch: List[VersionedStructureReference] = []
        cursor = reference
        while cursor is not None and len(batch) < max(1, window):
            if not isinstance(versions.get(cursor), Pending):
                break
            batch.append(cursor)
            cursor = cursor.previous_version()
        return list(reversed(batch))

    def invalidate(self, reference: VersionedStructureReference) -> None:
        """Drop the newest remaining version of a structure."""
        versions = self._versions_of(reference.structure_id)
        if reference != self.most_recent(reference.structure_id):
            raise LogicError(f"Can only invalidate the most recent version of a structure, not {reference}.")
        if len(versions) <= 1:
            raise LogicError(f"Cannot remove the final version of {reference.structure_id}.")
        del versions[reference]
        logger.debug(f"Invalidated {reference}")

    def _versions_of(self, structure_id: StructureId) -> VersionMap:
        versions = self._structures.get(structure_id)
        if not versions:
            raise LogicError(f"Structure {structure_id} is not tracked.")
        return versions
