# ABOUTME: Tests for the quota retry policy.
# ABOUTME: Verifies the attempt bound, the exact wait schedule and fail-fast on other errors.

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest
from google.genai import errors as genai_errors

from brief_enricher.ai.retry import RetryPolicy, is_quota_error


def make_flaky(failures: int, exc: Exception) -> tuple[Callable[[], str], dict[str, int]]:
    """Return a function that raises exc for the first `failures` calls, then 'ok'."""
    calls = {"count": 0}

    def fn() -> str:
        calls["count"] += 1
        if calls["count"] <= failures:
            raise exc
        return "ok"

    return fn, calls


def quota_error() -> RuntimeError:
    return RuntimeError("429 RESOURCE_EXHAUSTED: quota exceeded")


class TestIsQuotaError:
    """Tests for quota error classification."""

    def test_resource_exhausted_message(self) -> None:
        """RESOURCE_EXHAUSTED in the message is a quota error."""
        assert is_quota_error(RuntimeError("RESOURCE_EXHAUSTED"))

    def test_429_message(self) -> None:
        """A 429 status in the message is a quota error."""
        assert is_quota_error(RuntimeError("HTTP 429 Too Many Requests"))

    def test_api_error_code(self) -> None:
        """google-genai APIError with code 429 is a quota error."""
        error = MagicMock(spec=genai_errors.APIError)
        error.code = 429
        assert is_quota_error(error)

    def test_other_errors(self) -> None:
        """Other failures are not retryable."""
        assert not is_quota_error(ValueError("invalid argument"))
        assert not is_quota_error(RuntimeError("500 INTERNAL"))


class TestRetryPolicy:
    """Tests for RetryPolicy.call."""

    @pytest.mark.parametrize("failures", [0, 1, 2, 3])
    def test_succeeds_within_budget(self, failures: int) -> None:
        """Up to three quota errors are absorbed; waits are the first N delays."""
        sleeps: list[float] = []
        policy = RetryPolicy(sleep=sleeps.append)
        fn, calls = make_flaky(failures, quota_error())

        assert policy.call(fn) == "ok"
        assert calls["count"] == failures + 1
        assert sleeps == [2.0, 5.0, 15.0][:failures]
        assert sum(sleeps) <= policy.max_total_delay

    def test_fourth_quota_error_propagates(self) -> None:
        """After three retries the quota error is re-raised unchanged."""
        sleeps: list[float] = []
        policy = RetryPolicy(sleep=sleeps.append)
        error = quota_error()
        fn, calls = make_flaky(4, error)

        with pytest.raises(RuntimeError) as exc_info:
            policy.call(fn)

        assert exc_info.value is error
        assert calls["count"] == 4
        assert sleeps == [2.0, 5.0, 15.0]

    def test_non_quota_error_not_retried(self) -> None:
        """Errors rejected by the predicate propagate immediately."""
        sleeps: list[float] = []
        policy = RetryPolicy(sleep=sleeps.append)
        fn, calls = make_flaky(1, ValueError("bad request"))

        with pytest.raises(ValueError):
            policy.call(fn)

        assert calls["count"] == 1
        assert sleeps == []

    def test_custom_schedule_and_predicate(self) -> None:
        """Delay schedule and predicate are both pluggable."""
        sleeps: list[float] = []
        policy = RetryPolicy(
            delays=(0.5,),
            is_retryable=lambda exc: isinstance(exc, KeyError),
            sleep=sleeps.append,
        )
        fn, calls = make_flaky(1, KeyError("flaky"))

        assert policy.call(fn) == "ok"
        assert sleeps == [0.5]
        assert policy.max_attempts == 2

    def test_arguments_passed_through(self) -> None:
        """Positional and keyword arguments reach the wrapped function."""
        policy = RetryPolicy(sleep=lambda _: None)

        assert policy.call(lambda a, b=0: a + b, 1, b=2) == 3

    def test_empty_schedule_is_single_attempt(self) -> None:
        """With no delays the first quota error is re-raised without waiting."""
        sleeps: list[float] = []
        policy = RetryPolicy(delays=(), sleep=sleeps.append)
        error = quota_error()
        fn, calls = make_flaky(1, error)

        with pytest.raises(RuntimeError) as exc_info:
            policy.call(fn)

        assert exc_info.value is error
        assert calls["count"] == 1
        assert sleeps == []
        assert policy.max_attempts == 1

    def test_empty_schedule_success(self) -> None:
        """With no delays a successful call still returns its value."""
        policy = RetryPolicy(delays=(), sleep=lambda _: None)
        fn, _ = make_flaky(0, quota_error())

        assert policy.call(fn) == "ok"
