"""Structure identities and version-pinned references to them."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from models import Subtopic
from utils.exceptions import LogicError


class StructureKind(str, Enum):
    """Every kind of versioned structure a topic pack is built from."""

    TOPIC = "topic"
    SUBTOPIC = "subtopic"
    STORY = "story"
    EXPLORATION = "exploration"
    SKILL = "skill"


@dataclass(frozen=True)
class StructureId:
    """Version-independent identity of a structure."""

    kind: StructureKind
    id: str
    subtopic_index: Optional[int] = None

    def __post_init__(self) -> None:
        if (self.kind is StructureKind.SUBTOPIC) != (self.subtopic_index is not None):
            raise LogicError(f"subtopic_index must be set exactly for subtopic IDs: {self!r}")

    @classmethod
    def topic(cls, topic_id: str) -> "StructureId":
        return cls(StructureKind.TOPIC, topic_id)

    @classmethod
    def subtopic(cls, topic_id: str, subtopic_index: int) -> "StructureId":
        return cls(StructureKind.SUBTOPIC, topic_id, subtopic_index)

    @classmethod
    def story(cls, story_id: str) -> "StructureId":
        return cls(StructureKind.STORY, story_id)

    @classmethod
    def exploration(cls, exploration_id: str) -> "StructureId":
        return cls(StructureKind.EXPLORATION, exploration_id)

    @classmethod
    def skill(cls, skill_id: str) -> "StructureId":
        return cls(StructureKind.SKILL, skill_id)

    def __str__(self) -> str:
        if self.kind is StructureKind.SUBTOPIC:
            return f"{self.kind.value}:{self.id}/{self.subtopic_index}"
        return f"{self.kind.value}:{self.id}"


@dataclass(frozen=True)
class VersionedStructureReference:
    """
    A structure pinned to one version.

    Subtopic page references also carry the subtopic metadata declared by the
    owning topic, which the compatibility check needs. It does not take part
    in equality, so references for the same (structure, version) are
    interchangeable as cache keys.
    """

    structure_id: StructureId
    version: int
    subtopic: Optional[Subtopic] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.version < 1:
            raise LogicError(f"Structure versions start at 1, got {self.version} for {self.structure_id}.")

    @property
    def kind(self) -> StructureKind:
        return self.structure_id.kind

    def to_version(self, version: int) -> "VersionedStructureReference":
        return replace(self, version=version)

    def previous_version(self) -> Optional["VersionedStructureReference"]:
        if self.version <= 1:
            return None
        return self.to_version(self.version - 1)

    def __str__(self) -> str:
        return f"{self.structure_id}@v{self.version}"
