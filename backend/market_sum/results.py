# backend/market_sum/results.py
"""
Outcome of a fetch that may have fallen back to fabricated data.

  Ok(data)               live upstream data
  Degraded(data, reason) fallback/mock data standing in for a failed fetch
  Failed(reason)         nothing usable at all
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterable, List, Optional, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: T

    @property
    def degraded(self) -> bool:
        return False

    @property
    def reason(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class Degraded(Generic[T]):
    data: T
    reason: str

    @property
    def degraded(self) -> bool:
        return True


@dataclass(frozen=True)
class Failed:
    reason: str

    @property
    def data(self) -> None:
        return None

    @property
    def degraded(self) -> bool:
        return True


FetchResult = Union[Ok[T], Degraded[T], Failed]


def map_result(result: "FetchResult[T]", fn: Callable[[T], U]) -> "FetchResult[U]":
    """Transform the payload, keeping the Ok/Degraded/Failed status."""
    if isinstance(result, Failed):
        return result
    if isinstance(result, Degraded):
        return Degraded(fn(result.data), result.reason)
    return Ok(fn(result.data))


def combine(results: Iterable["FetchResult[T]"]) -> "FetchResult[List[T]]":
    """
    Collect several results into one list.
    Failed entries are dropped; any non-Ok entry makes the whole thing Degraded.
    """
    data: List[T] = []
    reasons: List[str] = []
    for r in results:
        if isinstance(r, Failed):
            reasons.append(r.reason)
            continue
        data.append(r.data)
        if isinstance(r, Degraded):
            reasons.append(r.reason)
    if reasons:
        return Degraded(data, "; ".join(reasons))
    return Ok(data)
