"""Topic pack orchestration: version resolution, skill closure and pack assembly."""

from .fragments import TopicPackFragment
from .service import TopicPackRepository, TopicPackRun, resolve_topic_pack
from .skill_closure import SkillClosureResolver
from .version_resolver import VersionResolver

__all__ = [
    "TopicPackFragment",
    "TopicPackRepository",
    "TopicPackRun",
    "resolve_topic_pack",
    "SkillClosureResolver",
    "VersionResolver",
]
