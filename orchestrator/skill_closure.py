"""Fixed-point expansion of the skills a topic pack transitively references."""

from __future__ import annotations

import logging
from typing import Iterable, List

from aggregator.fan_out import FanOutExecutor
from aggregator.metrics import DataGroupType, MetricCallbacks
from core.load_result import LoadResult, Success, flatten
from core.skill_refs import collect_skill_ids
from core.structures import StructureId
from models import Skill
from utils.exceptions import SkillClosureLimitError

from .version_resolver import VersionResolver

logger = logging.getLogger(__name__)


class SkillClosureResolver:
    """
    Loads a set of skills plus every skill their concept cards reference.

    Each round resolves the whole current set (already-resolved skills come
    straight from the version cache) and scans the results for new IDs. The
    number of rounds is capped so a runaway reference graph surfaces as
    ``SkillClosureLimitError`` instead of looping forever.
    """

    def __init__(self, resolver: VersionResolver, executor: FanOutExecutor, *, max_rounds: int = 32) -> None:
        self.resolver = resolver
        self.executor = executor
        self.max_rounds = max(1, int(max_rounds))

    async def resolve(self, skill_ids: Iterable[str], metrics: MetricCallbacks) -> LoadResult[List[Skill]]:
        current = list(dict.fromkeys(skill_ids))
        for round_number in range(1, self.max_rounds + 1):
            metrics.report_group_count(DataGroupType.SKILL, len(current))
            results = await self.executor.run(
                current,
                lambda skill_id: self.resolver.resolve(StructureId.skill(skill_id)),
                DataGroupType.SKILL,
                metrics,
            )
            skills_result = flatten(results)
            if not isinstance(skills_result, Success):
                return skills_result

            expanded = list(current)
            for skill in skills_result.value:
                for skill_id in collect_skill_ids(skill):
                    if skill_id not in expanded:
                        expanded.append(skill_id)
            if len(expanded) == len(current):
                logger.debug(f"Skill closure settled at {len(current)} skill(s) after {round_number} round(s)")
                return skills_result

            logger.debug(f"Skill closure grew from {len(current)} to {len(expanded)} skill(s)")
            metrics.reset_group_count(DataGroupType.SKILL)
            current = expanded

        raise SkillClosureLimitError(
            f"Skill closure still growing after {self.max_rounds} rounds; "
            "check for generated or runaway skill references.",
            rounds=self.max_rounds,
            skill_count=len(current),
        )
