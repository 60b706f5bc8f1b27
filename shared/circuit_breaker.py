"""
Circuit breaker for external collaborators (chat model, embedding model).

The chunking engine never retries; a degraded service fails fast instead of
stalling every document behind it.
"""

import inspect
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    CLOSED = "closed"  # Normal operation
    OPEN = "open"  # Failing, reject requests
    HALF_OPEN = "half_open"  # Testing if service recovered


@dataclass
class CircuitBreaker:
    """
    Circuit breaker for external service calls.

    States:
    - CLOSED: Normal operation, requests pass through
    - OPEN: Too many failures, requests rejected immediately
    - HALF_OPEN: Testing recovery, limited requests allowed

    Usage:
        breaker = CircuitBreaker(failure_threshold=5)
        result = await breaker.call_async(external_api_call, *args)
    """

    name: str = "external"
    failure_threshold: int = 5
    reset_timeout: float = 60.0
    half_open_max_calls: int = 3

    # State tracking
    state: CircuitState = field(default=CircuitState.CLOSED)
    failures: int = field(default=0)
    successes: int = field(default=0)
    last_failure_time: Optional[float] = field(default=None)
    half_open_calls: int = field(default=0)

    def _should_allow_request(self) -> bool:
        """Check if request should be allowed based on circuit state."""
        if self.state == CircuitState.CLOSED:
            return True

        if self.state == CircuitState.OPEN:
            # Check if reset timeout has passed
            if (
                self.last_failure_time
                and (time.time() - self.last_failure_time) >= self.reset_timeout
            ):
                self._transition_to_half_open()
                return True
            return False

        if self.state == CircuitState.HALF_OPEN:
            return self.half_open_calls < self.half_open_max_calls

        return False

    def _transition_to_open(self):
        """Transition to OPEN state."""
        logger.warning(
            f"Circuit breaker {self.name} OPEN: {self.failures} failures in succession"
        )
        self.state = CircuitState.OPEN
        self.last_failure_time = time.time()

    def _transition_to_half_open(self):
        """Transition to HALF_OPEN state."""
        logger.info(f"Circuit breaker {self.name} transitioning to HALF_OPEN")
        self.state = CircuitState.HALF_OPEN
        self.half_open_calls = 0
        self.successes = 0

    def _transition_to_closed(self):
        """Transition to CLOSED state."""
        logger.info(f"Circuit breaker {self.name} CLOSED: service recovered")
        self.state = CircuitState.CLOSED
        self.failures = 0
        self.successes = 0
        self.half_open_calls = 0

    def _record_success(self):
        """Record a successful call."""
        self.failures = 0

        if self.state == CircuitState.HALF_OPEN:
            self.successes += 1
            if self.successes >= self.half_open_max_calls:
                self._transition_to_closed()

    def _record_failure(self):
        """Record a failed call."""
        self.failures += 1
        self.last_failure_time = time.time()

        if self.state == CircuitState.HALF_OPEN:
            self._transition_to_open()
        elif self.failures >= self.failure_threshold:
            self._transition_to_open()

    async def call_async(self, fn: Callable, *args, **kwargs) -> Any:
        """
        Await ``fn`` (or call it, if synchronous) under breaker protection.

        Raises:
            CircuitOpenError: If circuit is open
            Exception: Original exception from function
        """
        if not self._should_allow_request():
            wait = self.reset_timeout - (time.time() - (self.last_failure_time or 0))
            raise CircuitOpenError(
                f"Circuit {self.name} is {self.state.value}. Wait {wait:.0f}s"
            )

        if self.state == CircuitState.HALF_OPEN:
            self.half_open_calls += 1

        try:
            result = fn(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            self._record_success()
            return result
        except Exception:
            self._record_failure()
            raise


class CircuitOpenError(Exception):
    """Raised when circuit breaker is open."""

    pass


# Global circuit breakers for different services
_llm_breaker: Optional[CircuitBreaker] = None
_embedding_breaker: Optional[CircuitBreaker] = None


def get_llm_breaker() -> CircuitBreaker:
    """Get circuit breaker for chat model calls."""
    global _llm_breaker
    if _llm_breaker is None:
        _llm_breaker = CircuitBreaker(
            name="llm", failure_threshold=3, reset_timeout=30.0, half_open_max_calls=2
        )
    return _llm_breaker


def get_embedding_breaker() -> CircuitBreaker:
    """Get circuit breaker for embedding model calls."""
    global _embedding_breaker
    if _embedding_breaker is None:
        _embedding_breaker = CircuitBreaker(
            name="embedding", failure_threshold=5, reset_timeout=60.0, half_open_max_calls=3
        )
    return _embedding_breaker


def reset_breakers():
    """Drop the global breakers (fresh state on next use)."""
    global _llm_breaker, _embedding_breaker
    _llm_breaker = None
    _embedding_breaker = None
