"""Unit tests for the compatibility checkers."""

from __future__ import annotations

from config import CompatibilitySettings
from core.compatibility import Compatible, PermissiveCompatibilityChecker, SchemaVersionCompatibilityChecker
from models import CompleteExploration, Exploration, LanguageType, Skill, Story, Subtopic, SubtopicPage, Topic


def test_permissive_checker_accepts_everything() -> None:
    checker = PermissiveCompatibilityChecker()

    assert checker.check_topic(Topic(id="t", version=1, schema_version=999, language_code="xx")) is Compatible
    assert checker.check_subtopic_page(SubtopicPage(topic_id="t", subtopic_index=0, version=1), None).is_compatible


def test_schema_checker_rejects_newer_schemas() -> None:
    checker = SchemaVersionCompatibilityChecker(CompatibilitySettings(max_story_schema_version=2))

    ok = checker.check_story(Story(id="s", version=3, schema_version=2))
    too_new = checker.check_story(Story(id="s", version=4, schema_version=3))

    assert ok.is_compatible
    assert not too_new.is_compatible
    assert str(too_new.failures[0]) == "story s v4: Unsupported schema version 3 (max 2)."


def test_schema_checker_rejects_unknown_languages() -> None:
    checker = SchemaVersionCompatibilityChecker()
    exploration = CompleteExploration(exploration=Exploration(id="e", version=1, language_code="klingon"))

    result = checker.check_exploration(exploration)

    assert not result.is_compatible
    assert "klingon" in result.failures[0].reason
    assert checker.check_topic(Topic(id="t", version=1, language_code="pt-br")).is_compatible


def test_subtopic_pages_must_match_the_declared_subtopic() -> None:
    checker = SchemaVersionCompatibilityChecker()
    page = SubtopicPage(topic_id="t", subtopic_index=2, version=1)

    assert checker.check_subtopic_page(page, Subtopic(id=2)).is_compatible
    assert not checker.check_subtopic_page(page, Subtopic(id=3)).is_compatible
    assert not checker.check_subtopic_page(page, None).is_compatible


def test_skills_only_check_schema() -> None:
    checker = SchemaVersionCompatibilityChecker()

    assert checker.check_skill(Skill(id="k", version=1, language_code="zz")).is_compatible
    assert not checker.check_skill(Skill(id="k", version=1, schema_version=99)).is_compatible


def test_language_codes_normalize() -> None:
    assert LanguageType.from_content_code("PT-BR") is LanguageType.BRAZILIAN_PORTUGUESE
    assert LanguageType.from_content_code("hi-en") is LanguageType.HINGLISH
    assert LanguageType.from_content_code("unspecified") is LanguageType.LANGUAGE_CODE_UNSPECIFIED
    assert LanguageType.from_content_code(None) is LanguageType.LANGUAGE_CODE_UNSPECIFIED
