# ABOUTME: Bounded retry policy for Gemini quota errors, built on tenacity.
# ABOUTME: Fixed delay schedule, pluggable error predicate and injectable sleep for tests.

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import structlog
from google.genai import errors as genai_errors
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_chain,
    wait_fixed,
    wait_none,
)

from brief_enricher.config import Settings

log = structlog.get_logger()

T = TypeVar("T")


def is_quota_error(exc: BaseException) -> bool:
    """True for 429 / RESOURCE_EXHAUSTED errors from the Gemini API."""
    if isinstance(exc, genai_errors.APIError) and exc.code == 429:
        return True
    message = str(exc)
    return "RESOURCE_EXHAUSTED" in message or "429" in message


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    log.warning(
        "api_retry",
        attempt=retry_state.attempt_number,
        wait=retry_state.next_action.sleep if retry_state.next_action else None,
        error=str(exc)[:100] if exc else None,
    )


@dataclass(frozen=True)
class RetryPolicy:
    """Retry up to len(delays) extra times, waiting delays[i] before retry i+1.

    Errors rejected by is_retryable propagate on the first attempt.
    """

    delays: tuple[float, ...] = (2.0, 5.0, 15.0)
    is_retryable: Callable[[BaseException], bool] = is_quota_error
    sleep: Callable[[float], None] = time.sleep

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> "RetryPolicy":
        return cls(delays=tuple(settings.retry_delays), **overrides)

    @property
    def max_attempts(self) -> int:
        return len(self.delays) + 1

    @property
    def max_total_delay(self) -> float:
        return sum(self.delays)

    def _wait(self) -> Any:
        # wait_chain needs at least one strategy
        if not self.delays:
            return wait_none()
        return wait_chain(*(wait_fixed(delay) for delay in self.delays))

    def retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self._wait(),
            retry=retry_if_exception(self.is_retryable),
            sleep=self.sleep,
            before_sleep=_log_retry,
            reraise=True,
        )

    def call(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run fn under this policy. The last error is re-raised unchanged."""
        return self.retrying()(fn, *args, **kwargs)
