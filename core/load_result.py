"""Three-state load results and the rules for composing them."""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Any, Awaitable, Callable, Generic, List, Sequence, Tuple, TypeVar

from models import CompatibilityFailure
from utils.exceptions import LogicError

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


class LoadResult(Generic[T]):
    """
    Outcome of loading a structure, or of composing several loads.

    Exactly one of ``Pending`` (not attempted yet), ``Success`` (loaded and
    compatible) or ``Failure`` (loaded and rejected). Values never change in
    place; every operation returns a new result.
    """

    __slots__ = ()

    def map(self, operation: Callable[[T], R]) -> "LoadResult[R]":
        """Transform a success value. Pending and Failure pass through."""
        return self.flat_map(lambda value: Success(operation(value)))

    def flat_map(self, operation: Callable[[T], "LoadResult[R]"]) -> "LoadResult[R]":
        """Sequence a dependent load. ``operation`` only runs on Success."""
        if isinstance(self, Success):
            return operation(self.value)
        return self._pass_through()

    async def flat_map_async(
        self, operation: Callable[[T], Awaitable["LoadResult[R]"]]
    ) -> "LoadResult[R]":
        """Like ``flat_map`` for coroutine functions."""
        if isinstance(self, Success):
            return await operation(self.value)
        return self._pass_through()

    def combine_with(
        self, other: "LoadResult[U]", combine: Callable[[T, U], R]
    ) -> "LoadResult[R]":
        """
        Pairwise combination.

        Pending dominates; otherwise failures win and are concatenated
        left-then-right; two successes are merged with ``combine``.
        """
        if isinstance(self, Pending) or isinstance(other, Pending):
            return Pending()
        if isinstance(self, Failure) and isinstance(other, Failure):
            return Failure(self.failures + other.failures)
        if isinstance(self, Failure):
            return Failure(self.failures)
        if isinstance(other, Failure):
            return Failure(other.failures)
        return Success(combine(self.value, other.value))

    def _pass_through(self) -> "LoadResult[Any]":
        if isinstance(self, Pending):
            return Pending()
        if isinstance(self, Failure):
            return Failure(self.failures)
        raise LogicError(f"Cannot pass through a successful result: {self!r}")


@dataclass(frozen=True)
class Pending(LoadResult[T]):
    """Not attempted yet."""


@dataclass(frozen=True)
class Success(LoadResult[T]):
    value: T


@dataclass(frozen=True)
class Failure(LoadResult[T]):
    failures: Tuple[CompatibilityFailure, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "failures", tuple(self.failures))

    def failure_report(self) -> str:
        return "\n".join(f"- {failure}" for failure in self.failures)


def combine_all(results: Sequence[LoadResult[U]], transform: Callable[[List[U]], R]) -> LoadResult[R]:
    """
    Fold results in input order, starting from an empty success.

    The order of values handed to ``transform`` always matches ``results``,
    whatever order the underlying loads completed in.
    """
    folded: LoadResult[List[U]] = Success([])
    for result in results:
        folded = folded.combine_with(result, lambda values, value: values + [value])
    return folded.map(transform)


def flatten(results: Sequence[LoadResult[T]]) -> LoadResult[List[T]]:
    return combine_all(results, lambda values: values)


def reduce_all(results: Sequence[LoadResult[T]], combine: Callable[[T, T], T]) -> LoadResult[T]:
    """Reduce a non-empty list of results pairwise, without an identity value."""
    if not results:
        raise LogicError("Cannot reduce an empty list of load results.")
    return reduce(lambda ongoing, new: ongoing.combine_with(new, combine), results)
