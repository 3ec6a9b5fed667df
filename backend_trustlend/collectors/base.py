"""
Shared collector plumbing: hard timeout and local failure isolation.

A collector coroutine either returns a SourceSignal or raises. run_isolated()
bounds it with asyncio.wait_for and turns any expected failure (timeout,
transport error, non-success status, malformed body) into an absent signal
with fetch_error set. Collectors wrap body parsing with unexpected_payload()
so only real payload problems are reported that way; other bugs propagate.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable

import httpx

from backend_trustlend.collectors.models import SourceKind, SourceSignal
from backend_trustlend.core.exceptions import SourceUnavailableError
from backend_trustlend.trustlend_logging import get_logger

logger = get_logger(__name__)


def short_id(value: str) -> str:
    """Truncate identifiers for logs."""
    return value[:16] + "..." if len(value) > 16 else value


def raise_for_source_status(source: SourceKind, response: httpx.Response) -> None:
    """Raise SourceUnavailableError for any non-2xx response."""
    if not response.is_success:
        raise SourceUnavailableError(
            source.value,
            f"{source.value} returned HTTP {response.status_code}",
        )


def unexpected_payload(source: SourceKind, error: Exception) -> SourceUnavailableError:
    """Wrap a parse failure on a source body as SourceUnavailableError."""
    return SourceUnavailableError(
        source.value,
        f"{source.value} returned an unexpected payload: {error.__class__.__name__}: {error}",
    )


async def run_isolated(
    source: SourceKind,
    fetch: Awaitable[SourceSignal],
    timeout_sec: float,
) -> SourceSignal:
    """Await fetch under a hard timeout; degrade any expected failure to an absent signal."""
    try:
        return await asyncio.wait_for(fetch, timeout=timeout_sec)
    except asyncio.TimeoutError:
        error = f"{source.value} timed out after {timeout_sec:g}s"
    except SourceUnavailableError as e:
        error = e.message
    except httpx.HTTPError as e:
        error = f"{source.value} request failed: {e.__class__.__name__}: {e}"
    logger.warning("collector_fetch_failed", source=source.value, error=error)
    return SourceSignal.absent(source, fetch_error=error)
