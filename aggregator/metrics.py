"""
Metric Callbacks
Progress reporting hooks invoked while a topic pack downloads
"""
from enum import Enum
from typing import Dict, Optional, Set

from rich.progress import Progress, TaskID


class DataGroupType(str, Enum):
    """Groups of structures whose downloads are counted together"""
    STORY = "story"
    SUBTOPIC = "subtopic"
    EXPLORATION = "exploration"
    SKILL = "skill"


class MetricCallbacks:
    """
    Receives progress events from the resolver. The base class ignores them.

    A group's count may be reported several times and the latest report
    wins. It only shrinks after a reset. Downloaded indexes at or beyond the
    current count should be ignored.
    """

    def reset_all_group_counts(self) -> None:
        pass

    def reset_group_count(self, group: DataGroupType) -> None:
        pass

    def report_group_count(self, group: DataGroupType, count: int) -> None:
        pass

    def report_item_downloaded(self, group: DataGroupType, index: int) -> None:
        pass


class RichProgressMetrics(MetricCallbacks):
    """Renders each group as a rich progress bar."""

    def __init__(self, progress: Progress):
        self.progress = progress
        self.counts: Dict[DataGroupType, int] = {}
        self._tasks: Dict[DataGroupType, TaskID] = {}
        self._downloaded: Dict[DataGroupType, Set[int]] = {}

    def reset_all_group_counts(self) -> None:
        for group in DataGroupType:
            self.reset_group_count(group)

    def reset_group_count(self, group: DataGroupType) -> None:
        self.counts[group] = 0
        self._downloaded[group] = set()
        task = self._tasks.get(group)
        if task is not None:
            self.progress.reset(task, total=0, completed=0)

    def report_group_count(self, group: DataGroupType, count: int) -> None:
        self.counts[group] = count
        self.progress.update(self._task(group), total=count)

    def report_item_downloaded(self, group: DataGroupType, index: int) -> None:
        seen = self._downloaded.setdefault(group, set())
        if index >= self.counts.get(group, 0) or index in seen:
            return
        seen.add(index)
        self.progress.update(self._task(group), completed=len(seen))

    def downloaded_count(self, group: DataGroupType) -> int:
        return len(self._downloaded.get(group, ()))

    def _task(self, group: DataGroupType) -> TaskID:
        task: Optional[TaskID] = self._tasks.get(group)
        if task is None:
            task = self.progress.add_task(f"[cyan]{group.value}s", total=self.counts.get(group, 0))
            self._tasks[group] = task
        return task
