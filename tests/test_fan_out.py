"""Unit tests for aggregator.fan_out."""

from __future__ import annotations

import asyncio

import pytest

from aggregator import DataGroupType, FanOutExecutor, MetricCallbacks
from core.load_result import Success, flatten


class DownloadLog(MetricCallbacks):
    def __init__(self):
        self.downloaded = []

    def report_item_downloaded(self, group, index):
        self.downloaded.append((group, index))


@pytest.mark.asyncio
async def test_results_follow_input_order_not_completion_order() -> None:
    delays = {"slow": 0.03, "medium": 0.01, "fast": 0.0}
    metrics = DownloadLog()

    async def _load(name):
        await asyncio.sleep(delays[name])
        return Success(name)

    results = await FanOutExecutor().run(list(delays), _load, DataGroupType.STORY, metrics)

    assert flatten(results) == Success(["slow", "medium", "fast"])
    assert [index for _, index in metrics.downloaded] == [2, 1, 0]
    assert {group for group, _ in metrics.downloaded} == {DataGroupType.STORY}


@pytest.mark.asyncio
async def test_concurrency_is_bounded() -> None:
    running = 0
    peak = 0

    async def _load(item):
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1
        return Success(item)

    results = await FanOutExecutor(max_concurrency=2).run(
        list(range(6)), _load, DataGroupType.SKILL, MetricCallbacks()
    )

    assert len(results) == 6
    assert peak == 2


@pytest.mark.asyncio
async def test_load_errors_propagate() -> None:
    async def _load(item):
        raise RuntimeError(f"boom {item}")

    with pytest.raises(RuntimeError):
        await FanOutExecutor().run(["x"], _load, DataGroupType.EXPLORATION, MetricCallbacks())


def test_executor_can_be_reused_across_event_loops() -> None:
    executor = FanOutExecutor(max_concurrency=1)

    async def _load(item):
        await asyncio.sleep(0.001)
        return Success(item)

    async def _run_once():
        return await executor.run(list(range(3)), _load, DataGroupType.STORY, MetricCallbacks())

    first = asyncio.run(_run_once())
    second = asyncio.run(_run_once())

    assert flatten(first) == flatten(second) == Success([0, 1, 2])
