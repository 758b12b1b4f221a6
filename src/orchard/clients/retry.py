from __future__ import annotations

from typing import TYPE_CHECKING, Callable, TypeVar

import structlog
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)

if TYPE_CHECKING:
    from orchard.config import ProviderSettings

logger = structlog.get_logger()

T = TypeVar("T")

ErrorClassifier = Callable[[BaseException], bool]


def never_transient(exc: BaseException) -> bool:
    return False


class RetryPolicy:
    """Bounded retry with exponential backoff around a blocking call.

    ``classifier`` decides which exceptions are transient; anything it rejects
    propagates unchanged on the first attempt. Once attempts run out
    ``tenacity.RetryError`` is raised; its ``last_attempt`` carries the final
    cause and attempt number.
    """

    def __init__(
        self,
        *,
        max_attempts: int = 5,
        wait_multiplier: float = 1.0,
        wait_min: float = 1.0,
        wait_max: float = 30.0,
        max_elapsed: float | None = None,
        classifier: ErrorClassifier = never_transient,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.wait_multiplier = wait_multiplier
        self.wait_min = wait_min
        self.wait_max = wait_max
        self.max_elapsed = max_elapsed
        self.classifier = classifier

    @classmethod
    def from_settings(
        cls, settings: "ProviderSettings", classifier: ErrorClassifier
    ) -> "RetryPolicy":
        return cls(
            max_attempts=settings.retry_max_attempts,
            wait_multiplier=settings.retry_wait_multiplier,
            wait_min=settings.retry_wait_min,
            wait_max=settings.retry_wait_max,
            max_elapsed=settings.retry_max_elapsed,
            classifier=classifier,
        )

    def _retrying(self, description: str) -> Retrying:
        stop = stop_after_attempt(self.max_attempts)
        if self.max_elapsed is not None:
            stop = stop | stop_after_delay(self.max_elapsed)

        def _log_retry(retry_state: RetryCallState) -> None:
            exc = retry_state.outcome.exception() if retry_state.outcome else None
            logger.warning(
                "backend_call_retrying",
                operation=description,
                attempt=retry_state.attempt_number,
                max_attempts=self.max_attempts,
                sleep=retry_state.next_action.sleep if retry_state.next_action else 0,
                error=type(exc).__name__ if exc else None,
            )

        return Retrying(
            stop=stop,
            wait=wait_exponential(
                multiplier=self.wait_multiplier, min=self.wait_min, max=self.wait_max
            ),
            retry=retry_if_exception(self.classifier),
            before_sleep=_log_retry,
        )

    def call(self, operation: Callable[[], T], *, description: str = "call") -> T:
        """Run ``operation`` until it succeeds, fails permanently or attempts run out."""
        return self._retrying(description)(operation)
