"""Partially assembled topic packs and how they merge."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Dict, Optional

from models import (
    CompleteExploration,
    CompleteTopicPack,
    LanguageType,
    Skill,
    Story,
    SubtopicPage,
    Topic,
)
from utils.exceptions import LogicError


@dataclass(frozen=True)
class TopicPackFragment:
    """
    Any subset of a topic pack's fields.

    Fragments are merged with ``combine_with``, which requires the two sides
    to populate disjoint fields.
    """

    topic: Optional[Topic] = None
    subtopic_pages: Optional[Dict[int, SubtopicPage]] = None
    stories: Optional[Dict[str, Story]] = None
    explorations: Optional[Dict[str, CompleteExploration]] = None
    referenced_skills: Optional[Dict[str, Skill]] = None
    default_language: Optional[LanguageType] = None

    def combine_with(self, other: "TopicPackFragment") -> "TopicPackFragment":
        merged = {}
        for field in fields(self):
            mine = getattr(self, field.name)
            theirs = getattr(other, field.name)
            if mine is not None and theirs is not None:
                raise LogicError(f"Both fragments populate '{field.name}'; expected exactly one to.")
            merged[field.name] = mine if mine is not None else theirs
        return replace(self, **merged)

    def missing_fields(self):
        return [field.name for field in fields(self) if getattr(self, field.name) is None]

    def to_topic_pack(self) -> CompleteTopicPack:
        missing = self.missing_fields()
        if missing:
            raise LogicError(f"Topic pack fragment is incomplete; missing: {', '.join(missing)}.")
        return CompleteTopicPack(
            topic=self.topic,
            subtopic_pages=self.subtopic_pages,
            stories=self.stories,
            explorations=self.explorations,
            referenced_skills=self.referenced_skills,
            default_language=self.default_language,
        )
