"""Exponential backoff retry and circuit breaker for outbound calls."""

from __future__ import annotations

import asyncio
import random
import time
from enum import StrEnum
from typing import TYPE_CHECKING, TypeVar

import structlog

from contentlab.metrics import (
    circuit_breaker_state,
    retry_attempts_total,
    retry_exhausted_total,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = structlog.get_logger()

T = TypeVar("T")


class RetryExhaustedError(Exception):
    """All retry attempts failed."""


class CircuitOpenError(Exception):
    """Circuit breaker is open, service assumed unavailable."""


async def async_with_retry(
    fn: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    jitter: bool = True,
    retryable: tuple[type[Exception], ...] = (Exception,),
    fn_name: str = "",
) -> T:
    """Await *fn* with exponential backoff retries.

    Uses jitter (delay * random(0.5, 1.5)) when *jitter* is True so that
    concurrent callers do not retry in lockstep.

    Raises RetryExhaustedError after *max_retries* consecutive failures.
    Exceptions outside *retryable* propagate immediately.
    """
    label = fn_name or getattr(fn, "__name__", "fn")
    last_exc: Exception | None = None
    for attempt in range(max_retries + 1):
        try:
            return await fn()
        except retryable as exc:
            last_exc = exc
            if attempt == max_retries:
                break
            retry_attempts_total.labels(fn_name=label).inc()
            delay = min(base_delay * (2**attempt), max_delay)
            if jitter:
                delay = delay * (0.5 + random.random())
            logger.warning(
                "Async retry attempt",
                attempt=attempt + 1,
                max_retries=max_retries,
                fn=label,
                delay_s=round(delay, 2),
                error=str(exc),
            )
            await asyncio.sleep(delay)
    retry_exhausted_total.labels(fn_name=label).inc()
    raise RetryExhaustedError(f"Failed after {max_retries + 1} attempts") from last_exc


class BreakerState(StrEnum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


_GAUGE_VALUES = {BreakerState.CLOSED: 0, BreakerState.OPEN: 1, BreakerState.HALF_OPEN: 2}


class CircuitBreaker:
    """Guards calls to one outbound service.

    Opens after *failure_threshold* consecutive failures and rejects calls
    while open. Once *reset_timeout* seconds have passed it goes half-open and
    lets a single trial call through: success closes it again, failure reopens
    it for another full timeout.
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        reset_timeout: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self._clock = clock
        self._state = BreakerState.CLOSED
        self._failures = 0
        self._opened_at = 0.0
        self._trial_running = False

    def __repr__(self) -> str:
        return f"CircuitBreaker(name={self.name!r}, state={self._state.value})"

    @property
    def state(self) -> BreakerState:
        if (
            self._state is BreakerState.OPEN
            and self._clock() - self._opened_at >= self.reset_timeout
        ):
            self._move_to(BreakerState.HALF_OPEN)
        return self._state

    @property
    def is_open(self) -> bool:
        return self.state is BreakerState.OPEN

    def _move_to(self, state: BreakerState) -> None:
        if state is self._state:
            return
        logger.info(
            "Circuit breaker state changed",
            breaker=self.name,
            previous=self._state.value,
            current=state.value,
        )
        self._state = state
        circuit_breaker_state.labels(name=self.name).set(_GAUGE_VALUES[state])

    def record_success(self) -> None:
        self._failures = 0
        self._move_to(BreakerState.CLOSED)

    def record_failure(self) -> None:
        self._failures += 1
        failed_trial = self._state is BreakerState.HALF_OPEN
        if failed_trial or self._failures >= self.failure_threshold:
            if self._state is BreakerState.CLOSED:
                logger.warning(
                    "Circuit breaker tripped", breaker=self.name, failures=self._failures
                )
            self._opened_at = self._clock()
            self._move_to(BreakerState.OPEN)

    async def call(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Await *fn* unless the breaker rejects it with CircuitOpenError.

        While half-open only one call runs at a time; concurrent callers are
        rejected until the trial settles.
        """
        state = self.state
        if state is BreakerState.OPEN or (state is BreakerState.HALF_OPEN and self._trial_running):
            raise CircuitOpenError(f"Circuit breaker '{self.name}' is {state.value}")
        trial = state is BreakerState.HALF_OPEN
        if trial:
            self._trial_running = True
        try:
            result = await fn()
        except Exception:
            self.record_failure()
            raise
        finally:
            if trial:
                self._trial_running = False
        self.record_success()
        return result
