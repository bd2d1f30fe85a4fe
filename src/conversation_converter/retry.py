from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from .config import RetryConfig
from .errors import RetryExhausted


logger = logging.getLogger(__name__)

Operation = Callable[[], Awaitable[None]]
Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    attempts: int = 3
    base_delay_s: float = 0.5

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryPolicy":
        return cls(attempts=max(1, config.attempts), base_delay_s=config.base_delay_ms / 1000)

    def retrying(self, sleep: Sleep) -> AsyncRetrying:
        """Linear schedule: ``base``, ``2 * base``, ... between attempts, no jitter."""
        return AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_incrementing(start=self.base_delay_s, increment=self.base_delay_s),
            retry=retry_if_exception_type(Exception),
            sleep=sleep,
            before_sleep=before_sleep_log(logger, logging.DEBUG),
        )


async def attempt_with_backoff(
    operation: Operation,
    label: str,
    *,
    policy: RetryPolicy | None = None,
    sleep: Sleep = asyncio.sleep,
) -> None:
    policy = policy or RetryPolicy()
    try:
        async for attempt in policy.retrying(sleep):
            with attempt:
                await operation()
    except RetryError as exc:
        last_error = exc.last_attempt.exception()
        raise RetryExhausted(policy.attempts, label, last_error) from last_error


class RetryExecutor:
    def __init__(self, policy: RetryPolicy | None = None, sleep: Sleep = asyncio.sleep) -> None:
        self._policy = policy or RetryPolicy()
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def execute(self, operation: Operation, label: str) -> None:
        await attempt_with_backoff(operation, label, policy=self._policy, sleep=self._sleep)


__all__ = ["RetryExecutor", "RetryPolicy", "attempt_with_backoff"]
