"""Bounded retry for transient RPC failures.

Only failures that say nothing about on-chain state are retried: transport
errors, timeouts, HTTP 429 and 5xx. RPC-level rejections are final.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import httpx
from solana.exceptions import SolanaRpcException
from solana.rpc.core import RPCException

log = logging.getLogger(__name__)

T = TypeVar("T")


def is_retryable(exc: BaseException) -> bool:
    """Classify an RPC failure as transient (retry) or terminal (report)."""
    if isinstance(exc, RPCException):
        return False
    if isinstance(exc, SolanaRpcException):
        cause = exc.__cause__
        return cause is None or is_retryable(cause)
    if isinstance(exc, httpx.HTTPStatusError):
        code = exc.response.status_code
        return code == 429 or code >= 500
    return isinstance(exc, (httpx.TimeoutException, httpx.TransportError))


@dataclass
class RetryPolicy:
    """Linear backoff: waits ``backoff * attempt`` seconds between attempts."""

    attempts: int = 3
    backoff: float = 0.5

    async def run(self, label: str, op: Callable[[], Awaitable[T]]) -> T:
        attempts = max(1, self.attempts)
        for attempt in range(1, attempts):
            try:
                return await op()
            except Exception as exc:
                if not is_retryable(exc):
                    raise
                log.warning(
                    "%s failed (attempt %d/%d): %s", label, attempt, attempts, exc,
                )
                await asyncio.sleep(self.backoff * attempt)
        return await op()
