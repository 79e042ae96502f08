"""Compatibility verdicts and the checkers that produce them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from config.settings import CompatibilitySettings
from models import (
    CompatibilityFailure,
    CompleteExploration,
    LanguageType,
    Skill,
    Story,
    Subtopic,
    SubtopicPage,
    Topic,
)


class CompatibilityResult:
    """Either ``Compatible`` or ``Incompatible(failures)``."""

    __slots__ = ()

    @property
    def is_compatible(self) -> bool:
        return isinstance(self, _Compatible)


@dataclass(frozen=True)
class _Compatible(CompatibilityResult):
    def __repr__(self) -> str:
        return "Compatible"


Compatible = _Compatible()


@dataclass(frozen=True)
class Incompatible(CompatibilityResult):
    failures: Tuple[CompatibilityFailure, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "failures", tuple(self.failures))


def verdict(failures: List[CompatibilityFailure]) -> CompatibilityResult:
    return Incompatible(failures) if failures else Compatible


class StructureCompatibilityChecker:
    """
    Decides whether one structure instance is usable by the application.

    The base implementation accepts everything; subclasses override the
    checks for the structure kinds they have rules for.
    """

    def check_topic(self, topic: Topic) -> CompatibilityResult:
        return Compatible

    def check_subtopic_page(self, page: SubtopicPage, subtopic: Optional[Subtopic]) -> CompatibilityResult:
        return Compatible

    def check_story(self, story: Story) -> CompatibilityResult:
        return Compatible

    def check_exploration(self, exploration: CompleteExploration) -> CompatibilityResult:
        return Compatible

    def check_skill(self, skill: Skill) -> CompatibilityResult:
        return Compatible


class PermissiveCompatibilityChecker(StructureCompatibilityChecker):
    """Accepts every structure."""


class SchemaVersionCompatibilityChecker(StructureCompatibilityChecker):
    """
    Rejects structures whose schema is newer than the application understands.

    Also rejects subtopic pages that don't belong to the subtopic the topic
    declares, and content in a language the application can't display.
    """

    def __init__(self, constraints: Optional[CompatibilitySettings] = None):
        self.constraints = constraints or CompatibilitySettings()

    def check_topic(self, topic: Topic) -> CompatibilityResult:
        failures = self._schema_failures("topic", topic.id, topic.version, topic.schema_version,
                                         self.constraints.max_topic_schema_version)
        failures += self._language_failures("topic", topic.id, topic.version, topic.language_code)
        return verdict(failures)

    def check_subtopic_page(self, page: SubtopicPage, subtopic: Optional[Subtopic]) -> CompatibilityResult:
        page_id = f"{page.topic_id}/{page.subtopic_index}"
        failures = self._schema_failures("subtopic", page_id, page.version, page.schema_version,
                                         self.constraints.max_subtopic_page_schema_version)
        if subtopic is None:
            failures.append(
                CompatibilityFailure(kind="subtopic", structure_id=page_id, version=page.version,
                                     reason="Topic does not declare this subtopic.")
            )
        elif subtopic.id != page.subtopic_index:
            failures.append(
                CompatibilityFailure(
                    kind="subtopic",
                    structure_id=page_id,
                    version=page.version,
                    reason=f"Page belongs to subtopic {page.subtopic_index}, expected {subtopic.id}.",
                )
            )
        return verdict(failures)

    def check_story(self, story: Story) -> CompatibilityResult:
        failures = self._schema_failures("story", story.id, story.version, story.schema_version,
                                         self.constraints.max_story_schema_version)
        failures += self._language_failures("story", story.id, story.version, story.language_code)
        return verdict(failures)

    def check_exploration(self, exploration: CompleteExploration) -> CompatibilityResult:
        exp = exploration.exploration
        failures = self._schema_failures("exploration", exp.id, exp.version, exp.schema_version,
                                         self.constraints.max_exploration_schema_version)
        failures += self._language_failures("exploration", exp.id, exp.version, exp.language_code)
        return verdict(failures)

    def check_skill(self, skill: Skill) -> CompatibilityResult:
        failures = self._schema_failures("skill", skill.id, skill.version, skill.schema_version,
                                         self.constraints.max_skill_schema_version)
        return verdict(failures)

    @staticmethod
    def _schema_failures(
        kind: str, structure_id: str, version: int, schema_version: int, max_schema_version: int
    ) -> List[CompatibilityFailure]:
        if schema_version <= max_schema_version:
            return []
        return [
            CompatibilityFailure(
                kind=kind,
                structure_id=structure_id,
                version=version,
                reason=f"Unsupported schema version {schema_version} (max {max_schema_version}).",
            )
        ]

    @staticmethod
    def _language_failures(kind: str, structure_id: str, version: int, language_code: str) -> List[CompatibilityFailure]:
        if LanguageType.from_content_code(language_code) is not LanguageType.LANGUAGE_CODE_UNSPECIFIED:
            return []
        return [
            CompatibilityFailure(
                kind=kind,
                structure_id=structure_id,
                version=version,
                reason=f"Unsupported language code '{language_code}'.",
            )
        ]
