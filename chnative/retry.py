"""Checking a connection and reconnecting it when the check fails."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from chnative.errors import Error

log = logging.getLogger(__name__)

_RETRYABLE = (Error, OSError, asyncio.TimeoutError, TimeoutError)


async def retry_guard(
    check: Callable[[], Awaitable[object]],
    reconnect: Callable[[], Awaitable[object]],
    max_attempt: int,
    delay: float,
) -> None:
    """Run ``check``; on failure ``reconnect`` and check again.

    A successful reconnect is followed by another check. A failed
    reconnect is retried after ``delay`` seconds without checking.
    Once ``max_attempt`` attempts are used up the last error is raised.
    """
    attempt = 0
    skip_check = False

    while True:
        if skip_check:
            skip_check = False
        else:
            try:
                await check()
                return
            except _RETRYABLE:
                if attempt >= max_attempt:
                    raise

        log.warning("[reconnect]")
        try:
            await reconnect()
            continue
        except _RETRYABLE:
            skip_check = True
            if attempt >= max_attempt:
                raise
            await asyncio.sleep(delay)

        attempt += 1