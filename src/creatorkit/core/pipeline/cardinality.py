"""Cardinality enforcement for array-valued output fields.

``enforce`` takes already-cleaned entries and drives them to a declared
count: case-insensitive de-duplication (first seen wins), truncation to
the maximum, then padding up to the minimum from a stream of synthetic
candidates.  Padding candidates go through the same uniqueness check as
model entries, so padded output never contains duplicates.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .exceptions import ToolSpecError

if TYPE_CHECKING:
    from .fields import RequestConfig

T = TypeVar("T")

# An int, the name of an integer input, or a function of the request config.
Bound = int | str | Callable[["RequestConfig"], int]

# Extra attempts allowed beyond the number of missing entries before the
# candidate stream is considered unable to produce unique values.
PAD_ATTEMPT_SLACK = 500


def _resolve(bound: Bound, config: RequestConfig | None) -> int:
    if callable(bound):
        if config is None:
            raise ToolSpecError("A computed count needs a request config.")
        return int(bound(config))
    if isinstance(bound, str):
        if config is None or bound not in config:
            raise ToolSpecError(f"Count refers to unknown input '{bound}'.")
        return int(config[bound])
    return bound


@dataclass(frozen=True)
class Cardinality:
    """Required entry count ``[minimum, maximum]`` of an array field."""

    minimum: Bound
    maximum: Bound

    @classmethod
    def exact(cls, count: Bound) -> Cardinality:
        return cls(count, count)

    @classmethod
    def between(cls, minimum: Bound, maximum: Bound) -> Cardinality:
        return cls(minimum, maximum)

    def resolve(self, config: RequestConfig | None = None) -> tuple[int, int]:
        minimum = max(0, _resolve(self.minimum, config))
        maximum = max(minimum, _resolve(self.maximum, config))
        return minimum, maximum

    def describe(self, config: RequestConfig | None = None) -> str:
        minimum, maximum = self.resolve(config)
        if minimum == maximum:
            return f"exactly {minimum}"
        if minimum == 0:
            return f"up to {maximum}"
        return f"between {minimum} and {maximum}"

    def references(self) -> tuple[str, ...]:
        return tuple(b for b in (self.minimum, self.maximum) if isinstance(b, str))


@dataclass
class Enforced(Generic[T]):
    """Entries after enforcement plus what it took to get there."""

    items: list[T]
    deduplicated: int = 0
    truncated: int = 0
    padded: int = 0
    pad_values: list[T] = field(default_factory=list)


def _identity(item: Any) -> str:
    return str(item)


def dedupe(
    items: Iterable[T],
    key: Callable[[T], str] = _identity,
    reserved: Collection[str] = (),
) -> list[T]:
    """Drop empty-keyed and case-insensitively repeated entries, keeping order."""
    seen = {r.lower() for r in reserved}
    unique: list[T] = []
    for item in items:
        k = key(item).lower()
        if not k or k in seen:
            continue
        seen.add(k)
        unique.append(item)
    return unique


def enforce(
    items: Iterable[T],
    minimum: int,
    maximum: int,
    *,
    key: Callable[[T], str] = _identity,
    pad: Callable[[Sequence[T]], Iterable[T]] | None = None,
    rescue: Callable[[Sequence[T]], Iterable[T]] | None = None,
    reserved: Collection[str] = (),
) -> Enforced[T]:
    """Deduplicate, truncate to *maximum*, then pad to *minimum*.

    *pad* is called with the surviving entries and returns the candidate
    stream; rejected candidates should be yielded as empty values so that
    every attempt counts against the attempt budget.  *rescue* is a
    last-resort stream with the same contract, tried with a fresh budget
    once *pad* runs dry or stalls.

    Raises
    ------
    ToolSpecError
        Every candidate stream ran dry or kept colliding before *minimum*
        entries were reached.
    """
    entries = list(items)
    unique = dedupe(entries, key, reserved)
    result = Enforced(items=unique, deduplicated=len(entries) - len(unique))

    if len(unique) > maximum:
        result.truncated = len(unique) - maximum
        del unique[maximum:]

    missing = minimum - len(unique)
    if missing <= 0:
        return result

    seen = {r.lower() for r in reserved} | {key(item).lower() for item in unique}
    failure = f"Fallback ran out of candidates at {len(unique)} of {minimum}."
    for source in (pad, rescue):
        if source is None:
            continue
        stream: Iterator[T] = iter(source(list(unique)))
        budget = minimum - len(unique) + PAD_ATTEMPT_SLACK
        while len(unique) < minimum and budget > 0:
            budget -= 1
            try:
                candidate = next(stream)
            except StopIteration:
                break
            k = key(candidate).lower()
            if not k or k in seen:
                continue
            seen.add(k)
            unique.append(candidate)
            result.pad_values.append(candidate)
        if len(unique) >= minimum:
            break
        if budget == 0:
            failure = f"Could not pad to {minimum} unique entries (stuck at {len(unique)})."
        else:
            failure = f"Fallback ran out of candidates at {len(unique)} of {minimum}."

    result.padded = len(result.pad_values)
    if len(unique) < minimum:
        raise ToolSpecError(failure)
    return result
