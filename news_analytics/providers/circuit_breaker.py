"""Circuit breaker for calls to remote inference services.

CLOSED → OPEN → HALF_OPEN → CLOSED state machine wrapping any ``async def``.
When a model endpoint keeps failing, further calls are rejected immediately
with CircuitOpenError until the recovery timeout has elapsed.

Usage:
    breaker = GenericCircuitBreaker(failure_threshold=5, recovery_timeout=60.0)
    try:
        result = await breaker.call(client.post, url, json_body=payload)
    except CircuitOpenError:
        ...
"""

import enum
import logging
import time
from typing import Any, Callable, Coroutine, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(enum.Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitOpenError(Exception):
    """Raised when calling through an open circuit breaker."""


class GenericCircuitBreaker:
    """Wraps any async callable with circuit breaker protection.

    - CLOSED: Calls pass through. Consecutive failures tracked.
    - OPEN: Calls rejected with CircuitOpenError. After recovery_timeout,
      moves to HALF_OPEN.
    - HALF_OPEN: Single probe call allowed. Success → CLOSED, failure → OPEN.

    Args:
        failure_threshold: Consecutive failures before opening circuit.
        recovery_timeout: Seconds before attempting a recovery probe.
        name: Name used in log messages.
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
        name: str = "circuit_breaker",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._failure_threshold = failure_threshold
        self._recovery_timeout = recovery_timeout
        self._name = name
        self._clock = clock
        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0
        self._opened_at: float = 0.0

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> CircuitState:
        """Current circuit state."""
        return self._state

    @property
    def consecutive_failures(self) -> int:
        """Number of consecutive failures."""
        return self._consecutive_failures

    async def call(
        self,
        fn: Callable[..., Coroutine[Any, Any, T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Execute an async function through the circuit breaker.

        Raises:
            CircuitOpenError: If circuit is open and recovery timeout
                has not elapsed.
        """
        if self._state == CircuitState.OPEN:
            if self._clock() - self._opened_at < self._recovery_timeout:
                raise CircuitOpenError(f"Circuit breaker {self._name} is OPEN")
            self._state = CircuitState.HALF_OPEN
            logger.info("Circuit breaker %s: OPEN → HALF_OPEN (recovery probe)", self._name)

        try:
            result = await fn(*args, **kwargs)
        except Exception:
            self._record_failure()
            raise

        if self._state == CircuitState.HALF_OPEN:
            logger.info("Circuit breaker %s: HALF_OPEN → CLOSED (probe succeeded)", self._name)
        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0
        return result

    def reset(self) -> None:
        """Force the breaker back to CLOSED."""
        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0

    def _record_failure(self) -> None:
        self._consecutive_failures += 1

        if self._state == CircuitState.HALF_OPEN:
            self._state = CircuitState.OPEN
            self._opened_at = self._clock()
            logger.warning("Circuit breaker %s: HALF_OPEN → OPEN (probe failed)", self._name)
        elif self._consecutive_failures >= self._failure_threshold:
            self._state = CircuitState.OPEN
            self._opened_at = self._clock()
            logger.warning(
                "Circuit breaker %s: CLOSED → OPEN after %d failures",
                self._name,
                self._consecutive_failures,
            )
