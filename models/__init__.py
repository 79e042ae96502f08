"""
Data Models
"""
from .schemas import (
    LanguageType,
    SUPPORTED_LANGUAGES,
    CompatibilityFailure,
    Subtopic,
    Topic,
    SubtopicPage,
    StoryNode,
    Story,
    ExplorationState,
    Exploration,
    ExplorationTranslation,
    CompleteExploration,
    Skill,
    CompleteTopicPack,
)

__all__ = [
    "LanguageType",
    "SUPPORTED_LANGUAGES",
    "CompatibilityFailure",
    "Subtopic",
    "Topic",
    "SubtopicPage",
    "StoryNode",
    "Story",
    "ExplorationState",
    "Exploration",
    "ExplorationTranslation",
    "CompleteExploration",
    "Skill",
    "CompleteTopicPack",
]
