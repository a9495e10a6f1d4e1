"""Scatter/gather of independent API calls with per-call failure isolation"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Generic, Hashable, List, Mapping, Optional, TypeVar

from kedi_client.domain.exceptions import ApiError

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


@dataclass
class Outcome(Generic[T]):
    """Result-or-error of one sub-call"""

    value: Optional[T] = None
    error: Optional[ApiError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _capture(awaitable: Awaitable[T]) -> Outcome[T]:
    try:
        return Outcome(value=await awaitable)
    except ApiError as e:
        return Outcome(error=e)


async def gather_outcomes(*awaitables: Awaitable[Any]) -> List[Outcome[Any]]:
    """
    Start every awaitable at once and wait for all of them.

    An ApiError is captured on that call's Outcome only; siblings keep running
    and the returned list is in argument order.
    """
    return list(await asyncio.gather(*(_capture(aw) for aw in awaitables)))


async def gather_mapping(calls: Mapping[K, Awaitable[T]]) -> Dict[K, Outcome[T]]:
    """Same as gather_outcomes, keyed by the caller's identifiers"""
    keys = list(calls)
    outcomes = await gather_outcomes(*(calls[key] for key in keys))
    return dict(zip(keys, outcomes))
