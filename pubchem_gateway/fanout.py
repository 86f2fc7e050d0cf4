"""
Concurrent fan-out over independent upstream calls.

fan_out() runs one operation per input item concurrently and returns one
FanoutOutcome per item, in input order. A failed item yields an outcome with
``error`` set instead of aborting the batch. Cancellation is never a
per-item failure: cancelling the batch, or any single call ending in
CancelledError, propagates and the sibling outcomes are discarded.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

ItemT = TypeVar("ItemT")
T = TypeVar("T")


@dataclass(frozen=True)
class FanoutOutcome(Generic[ItemT, T]):
    """Result of one fanned-out call: a value, or the error that replaced it."""

    item: ItemT
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def fan_out(
    items: Sequence[ItemT],
    operation: Callable[[ItemT], Awaitable[T]],
) -> list[FanoutOutcome[ItemT, T]]:
    """
    Run ``operation`` for every item concurrently.

    Args:
        items: Ordered inputs
        operation: Async callable applied to each input

    Returns:
        One outcome per input, positionally aligned with ``items``
    """
    if not items:
        return []

    results = await asyncio.gather(
        *(operation(item) for item in items),
        return_exceptions=True,
    )

    outcomes: list[FanoutOutcome[ItemT, T]] = []
    for item, result in zip(items, results):
        if isinstance(result, Exception):
            outcomes.append(FanoutOutcome(item=item, error=result))
        elif isinstance(result, BaseException):
            # Cancellation of an individual call is not a per-item failure
            raise result
        else:
            outcomes.append(FanoutOutcome(item=item, value=result))
    return outcomes


def values_or_none(outcomes: Sequence[FanoutOutcome[ItemT, T]]) -> list[T | None]:
    """Collapse outcomes to values, with None where the call failed."""
    return [outcome.value if outcome.ok else None for outcome in outcomes]
