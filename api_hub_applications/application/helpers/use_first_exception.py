"""
Fan-out helpers.

Calls made concurrently with asyncio.gather(..., return_exceptions=True)
come back as a mix of results and exceptions. use_first_exception()
raises the first exception in call order, or returns the results.

Dependencies: asyncio (stdlib)
System role: Error aggregation for concurrent downstream calls
"""

import asyncio
from typing import Any, Awaitable, Iterable, TypeVar

T = TypeVar("T")


def use_first_exception(results: Iterable[T | BaseException]) -> list[T]:
    """
    Raise the first exception in results, otherwise return them unchanged.

    Raises:
        BaseException: The first exception found
    """
    collected = list(results)
    for result in collected:
        if isinstance(result, BaseException):
            raise result
    return collected  # type: ignore[return-value]


async def gather_all(awaitables: Iterable[Awaitable[Any]]) -> list[Any]:
    """Run awaitables concurrently, raising the first failure only after all have finished."""
    return use_first_exception(await asyncio.gather(*awaitables, return_exceptions=True))
