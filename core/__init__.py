"""Core engine types: load results, structure identities, compatibility and skill references."""

from .load_result import (
    Failure,
    LoadResult,
    Pending,
    Success,
    combine_all,
    flatten,
    reduce_all,
)
from .structures import StructureId, StructureKind, VersionedStructureReference
from .compatibility import (
    Compatible,
    CompatibilityResult,
    Incompatible,
    PermissiveCompatibilityChecker,
    SchemaVersionCompatibilityChecker,
    StructureCompatibilityChecker,
)
from .skill_refs import collect_skill_ids, extract_skill_ids

__all__ = [
    "Failure",
    "LoadResult",
    "Pending",
    "Success",
    "combine_all",
    "flatten",
    "reduce_all",
    "StructureId",
    "StructureKind",
    "VersionedStructureReference",
    "Compatible",
    "CompatibilityResult",
    "Incompatible",
    "PermissiveCompatibilityChecker",
    "SchemaVersionCompatibilityChecker",
    "StructureCompatibilityChecker",
    "collect_skill_ids",
    "extract_skill_ids",
]
