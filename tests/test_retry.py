import asyncio

import pytest

from conversation_converter.config import RetryConfig
from conversation_converter.errors import RetryExhausted
from conversation_converter.retry import RetryExecutor, RetryPolicy, attempt_with_backoff


class FlakyOperation:
    def __init__(self, failures: int) -> None:
        self.failures = failures
        self.calls = 0

    async def __call__(self) -> None:
        self.calls += 1
        if self.calls <= self.failures:
            raise TimeoutError(f"attempt {self.calls} timed out")


def recording_sleep():  # type: ignore[no-untyped-def]
    delays: list[float] = []

    async def sleep(delay: float) -> None:
        delays.append(delay)

    return delays, sleep


def test_success_on_first_attempt_does_not_sleep() -> None:
    delays, sleep = recording_sleep()
    operation = FlakyOperation(failures=0)
    asyncio.run(attempt_with_backoff(operation, "loading", sleep=sleep))
    assert operation.calls == 1
    assert delays == []


def test_linear_backoff_until_success() -> None:
    delays, sleep = recording_sleep()
    operation = FlakyOperation(failures=2)
    asyncio.run(attempt_with_backoff(operation, "loading", sleep=sleep))
    assert operation.calls == 3
    assert delays == [0.5, 1.0]


def test_exhaustion_reports_label_and_last_error() -> None:
    delays, sleep = recording_sleep()
    operation = FlakyOperation(failures=10)
    with pytest.raises(RetryExhausted) as exc:
        asyncio.run(attempt_with_backoff(operation, "loading the page", sleep=sleep))
    error = exc.value
    assert operation.calls == 3
    assert delays == [0.5, 1.0]
    assert error.attempts == 3
    assert error.label == "loading the page"
    assert isinstance(error.__cause__, TimeoutError)
    assert str(error) == "Failed after 3 attempts while loading the page. Last error: attempt 3 timed out"


def test_executor_uses_configured_policy() -> None:
    delays, sleep = recording_sleep()
    policy = RetryPolicy.from_config(RetryConfig(attempts=2, base_delay_ms=100))
    executor = RetryExecutor(policy, sleep=sleep)
    operation = FlakyOperation(failures=5)
    with pytest.raises(RetryExhausted):
        asyncio.run(executor.execute(operation, "waiting"))
    assert operation.calls == 2
    assert delays == [0.1]


def test_cancellation_is_not_retried() -> None:
    delays, sleep = recording_sleep()
    calls = 0

    async def cancelled() -> None:
        nonlocal calls
        calls += 1
        raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(attempt_with_backoff(cancelled, "loading", sleep=sleep))
    assert calls == 1
    assert delays == []
