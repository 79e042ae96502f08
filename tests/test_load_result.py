"""Unit tests for core.load_result composition rules."""

from __future__ import annotations

import pytest

from core.load_result import Failure, Pending, Success, combine_all, flatten, reduce_all
from models import CompatibilityFailure
from utils.exceptions import LogicError


def _failure(structure_id: str) -> CompatibilityFailure:
    return CompatibilityFailure(kind="story", structure_id=structure_id, version=1, reason="too new")


def test_pending_dominates_everything() -> None:
    add = lambda left, right: left + right

    assert Success(1).combine_with(Pending(), add) == Pending()
    assert Pending().combine_with(Success(1), add) == Pending()
    assert Failure([_failure("a")]).combine_with(Pending(), add) == Pending()


def test_failures_concatenate_left_then_right() -> None:
    e1, e2 = _failure("e1"), _failure("e2")

    combined = Failure([e1]).combine_with(Failure([e2]), lambda left, right: left)

    assert combined == Failure([e1, e2])
    assert Failure([e1]).combine_with(Success(3), lambda left, right: left) == Failure([e1])
    assert Success(3).combine_with(Failure([e2]), lambda left, right: left) == Failure([e2])


def test_successes_merge_with_combine() -> None:
    assert Success(2).combine_with(Success(3), lambda left, right: left * right) == Success(6)


def test_map_and_flat_map_pass_through_non_success() -> None:
    e1 = _failure("e1")

    assert Success(2).map(lambda value: value + 1) == Success(3)
    assert Pending().map(lambda value: value + 1) == Pending()
    assert Failure([e1]).flat_map(lambda value: Success(value)) == Failure([e1])
    assert Success(2).flat_map(lambda value: Failure([e1])) == Failure([e1])


@pytest.mark.asyncio
async def test_flat_map_async_only_runs_on_success() -> None:
    calls = []

    async def _next(value):
        calls.append(value)
        return Success(value * 10)

    assert await Success(4).flat_map_async(_next) == Success(40)
    assert await Pending().flat_map_async(_next) == Pending()
    assert calls == [4]


def test_combine_all_keeps_input_order() -> None:
    assert combine_all([Success("a"), Success("b"), Success("c")], "".join) == Success("abc")
    assert combine_all([], list) == Success([])


def test_flatten_collects_every_failure_in_order() -> None:
    e1, e2 = _failure("e1"), _failure("e2")

    result = flatten([Failure([e1]), Success("x"), Failure([e2])])

    assert result == Failure([e1, e2])
    assert result.failure_report() == "- story e1 v1: too new\n- story e2 v1: too new"


def test_reduce_all_requires_items() -> None:
    assert reduce_all([Success(1), Success(2), Success(3)], lambda a, b: a + b) == Success(6)
    with pytest.raises(LogicError):
        reduce_all([], lambda a, b: a + b)
