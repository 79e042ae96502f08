"""
Data Models / Schemas
Versioned content structures and the assembled topic pack
"""
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _ordered_unique(values) -> List[str]:
    return list(dict.fromkeys(values))


class LanguageType(str, Enum):
    """Languages the consuming application ships content in"""
    LANGUAGE_CODE_UNSPECIFIED = "unspecified"
    ENGLISH = "en"
    ARABIC = "ar"
    HINDI = "hi"
    HINGLISH = "hi-en"
    # Content for Brazilian Portuguese is served under the generic "pt" code.
    BRAZILIAN_PORTUGUESE = "pt"
    SWAHILI = "sw"
    NIGERIAN_PIDGIN = "pcm"

    @property
    def content_code(self) -> str:
        return self.value

    @classmethod
    def from_content_code(cls, code: Optional[str]) -> "LanguageType":
        normalized = str(code or "").strip().lower()
        if normalized == "pt-br":
            normalized = "pt"
        for language in cls:
            if language is not cls.LANGUAGE_CODE_UNSPECIFIED and language.value == normalized:
                return language
        return cls.LANGUAGE_CODE_UNSPECIFIED


SUPPORTED_LANGUAGES: List[LanguageType] = [
    language for language in LanguageType if language is not LanguageType.LANGUAGE_CODE_UNSPECIFIED
]


class CompatibilityFailure(BaseModel):
    """One reason a structure instance was rejected"""
    model_config = ConfigDict(frozen=True)

    kind: str = Field(..., description="Structure kind, e.g. 'story'")
    structure_id: str = Field(..., description="Structure identifier")
    version: Optional[int] = Field(None, description="Rejected version")
    reason: str = Field(..., description="Human-readable reason")

    def __str__(self) -> str:
        version = f" v{self.version}" if self.version is not None else ""
        return f"{self.kind} {self.structure_id}{version}: {self.reason}"


class Subtopic(BaseModel):
    """Subtopic metadata declared on a topic"""
    id: int = Field(..., description="Subtopic index within its topic")
    title: str = ""
    skill_ids: List[str] = Field(default_factory=list)
    url_fragment: Optional[str] = None


class Topic(BaseModel):
    """Topic: the root of a topic pack"""
    id: str
    version: int = Field(..., ge=1)
    name: str = ""
    description: str = ""
    language_code: str = "en"
    schema_version: int = 1
    subtopics: List[Subtopic] = Field(default_factory=list)
    canonical_story_ids: List[str] = Field(default_factory=list)
    additional_story_ids: List[str] = Field(default_factory=list)
    uncategorized_skill_ids: List[str] = Field(default_factory=list)

    def subtopic_map(self) -> Dict[int, Subtopic]:
        return {subtopic.id: subtopic for subtopic in self.subtopics}

    def referenced_story_ids(self) -> List[str]:
        return _ordered_unique(self.canonical_story_ids + self.additional_story_ids)

    def html_fragments(self) -> List[str]:
        return [self.description]

    def directly_referenced_skill_ids(self) -> List[str]:
        subtopic_skill_ids = [skill_id for subtopic in self.subtopics for skill_id in subtopic.skill_ids]
        return _ordered_unique(self.uncategorized_skill_ids + subtopic_skill_ids)


class SubtopicPage(BaseModel):
    """Revision card content for one subtopic"""
    topic_id: str
    subtopic_index: int
    version: int = Field(..., ge=1)
    language_code: str = "en"
    schema_version: int = 1
    page_contents_html: str = ""

    def html_fragments(self) -> List[str]:
        return [self.page_contents_html]

    def directly_referenced_skill_ids(self) -> List[str]:
        return []


class StoryNode(BaseModel):
    """One chapter of a story"""
    id: str
    title: str = ""
    description: str = ""
    exploration_id: Optional[str] = None
    prerequisite_skill_ids: List[str] = Field(default_factory=list)
    acquired_skill_ids: List[str] = Field(default_factory=list)


class Story(BaseModel):
    """Story: an ordered sequence of explorations"""
    id: str
    version: int = Field(..., ge=1)
    title: str = ""
    description: str = ""
    language_code: str = "en"
    schema_version: int = 1
    nodes: List[StoryNode] = Field(default_factory=list)

    def referenced_exploration_ids(self) -> List[str]:
        return _ordered_unique(node.exploration_id for node in self.nodes if node.exploration_id)

    def html_fragments(self) -> List[str]:
        return [self.description] + [node.description for node in self.nodes]

    def directly_referenced_skill_ids(self) -> List[str]:
        return _ordered_unique(
            skill_id
            for node in self.nodes
            for skill_id in node.prerequisite_skill_ids + node.acquired_skill_ids
        )


class ExplorationState(BaseModel):
    """One card of an exploration"""
    content_html: str = ""
    linked_skill_id: Optional[str] = None
    tagged_skill_misconception_ids: List[str] = Field(
        default_factory=list,
        description="Entries shaped '<skill_id>-<misconception_id>'",
    )


class Exploration(BaseModel):
    """Exploration: an interactive lesson"""
    id: str
    version: int = Field(..., ge=1)
    title: str = ""
    language_code: str = "en"
    schema_version: int = 1
    states: Dict[str, ExplorationState] = Field(default_factory=dict)

    def html_fragments(self) -> List[str]:
        return [state.content_html for state in self.states.values()]

    def directly_referenced_skill_ids(self) -> List[str]:
        linked = [state.linked_skill_id for state in self.states.values() if state.linked_skill_id]
        tagged = [
            tag.rsplit("-", 1)[0]
            for state in self.states.values()
            for tag in state.tagged_skill_misconception_ids
            if "-" in tag
        ]
        return _ordered_unique(linked + tagged)


class ExplorationTranslation(BaseModel):
    """Per-language translations of an exploration version"""
    exploration_id: str
    version: int
    language_code: str
    translations: Dict[str, str] = Field(default_factory=dict, description="content_id -> html")


class CompleteExploration(BaseModel):
    """An exploration joined with every supported language's translations"""
    exploration: Exploration
    translations: Dict[LanguageType, ExplorationTranslation] = Field(default_factory=dict)

    @property
    def id(self) -> str:
        return self.exploration.id

    @property
    def version(self) -> int:
        return self.exploration.version

    def html_fragments(self) -> List[str]:
        translated = [
            html
            for translation in self.translations.values()
            for html in translation.translations.values()
        ]
        return self.exploration.html_fragments() + translated

    def directly_referenced_skill_ids(self) -> List[str]:
        return self.exploration.directly_referenced_skill_ids()


class Skill(BaseModel):
    """Skill with its concept card"""
    id: str
    version: int = Field(..., ge=1)
    description: str = ""
    language_code: str = "en"
    schema_version: int = 1
    explanation_html: str = ""
    worked_examples: List[str] = Field(default_factory=list)
    prerequisite_skill_ids: List[str] = Field(default_factory=list)

    def html_fragments(self) -> List[str]:
        return [self.description, self.explanation_html] + list(self.worked_examples)

    def directly_referenced_skill_ids(self) -> List[str]:
        return _ordered_unique(self.prerequisite_skill_ids)


class CompleteTopicPack(BaseModel):
    """A topic and its fully compatible dependency closure"""
    topic: Topic
    subtopic_pages: Dict[int, SubtopicPage]
    stories: Dict[str, Story]
    explorations: Dict[str, CompleteExploration]
    referenced_skills: Dict[str, Skill]
    default_language: LanguageType
