"""Unit tests for orchestrator.fragments."""

from __future__ import annotations

import pytest

from models import LanguageType, Topic
from orchestrator.fragments import TopicPackFragment
from utils.exceptions import LogicError


def test_disjoint_fragments_merge() -> None:
    topic = Topic(id="t1", version=1)

    merged = TopicPackFragment(topic=topic).combine_with(TopicPackFragment(stories={}))

    assert merged.topic == topic
    assert merged.stories == {}
    assert merged.explorations is None


def test_overlapping_fragments_are_a_logic_error() -> None:
    with pytest.raises(LogicError):
        TopicPackFragment(stories={}).combine_with(TopicPackFragment(stories={}))


def test_to_topic_pack_requires_every_field() -> None:
    partial = TopicPackFragment(topic=Topic(id="t1", version=1), subtopic_pages={})
    with pytest.raises(LogicError):
        partial.to_topic_pack()

    complete = partial.combine_with(
        TopicPackFragment(
            stories={},
            explorations={},
            referenced_skills={},
            default_language=LanguageType.ENGLISH,
        )
    )

    pack = complete.to_topic_pack()
    assert pack.topic.id == "t1"
    assert pack.default_language is LanguageType.ENGLISH
    assert complete.missing_fields() == []
