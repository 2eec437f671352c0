"""
Error helpers shared by the pipeline.
"""

import asyncio
import logging
from typing import Any, Awaitable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PipelineError(Exception):
    """Base class for pipeline errors."""


class PipelineAbort(PipelineError):
    """Fatal for the current run; the run is logged and ends."""


class InvariantError(PipelineAbort):
    """A mandatory value was missing."""


def invariant(value: Optional[T], name: str) -> T:
    """
    Return value if it is truthy, otherwise abort the run.

    Args:
        value: Value to check
        name: Name used in the error message

    Returns:
        The unchanged value
    """
    if not value:
        raise InvariantError(f"{name} is required and cannot be falsy.")
    return value


def alert_error(err: Any, raise_error: bool = False) -> None:
    """
    Log an error and optionally abort the run.

    Args:
        err: Error message or exception
        raise_error: Raise PipelineAbort after logging
    """
    logger.error(str(err))
    if raise_error:
        if isinstance(err, PipelineAbort):
            raise err
        raise PipelineAbort(str(err))


async def _log_failure(aw: Awaitable[T]) -> T:
    try:
        return await aw
    except Exception as e:
        logger.error(f"Concurrent step failed: {e}")
        raise


async def gather_settled(*aws: Awaitable[Any]) -> List[Any]:
    """
    Await all awaitables concurrently and report every failure.

    A failing branch never cancels the others, and its error is logged as soon as
    it fails. Once everything has settled the first PipelineAbort is raised; any
    other exception is re-raised as-is since it is not a run-level failure.

    Returns:
        Results in argument order
    """
    results = await asyncio.gather(*(_log_failure(aw) for aw in aws), return_exceptions=True)

    failures = [r for r in results if isinstance(r, BaseException)]
    for failure in failures:
        if not isinstance(failure, PipelineError):
            raise failure
    if failures:
        raise failures[0]

    return list(results)
