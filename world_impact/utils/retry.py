# world_impact/utils/retry.py

"""
Retrying HTTP fetcher for the biography gateway.

The gateway runs on a serverless backend that answers its first call after
idling slowly or with an HTTP 500. The retry decision is a pure function of
(attempt, response/error) so it can be tested without a network; the fetch
loop only performs the call and sleeps for the delay the policy returns.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from world_impact.utils.logger import get_logger

logger = get_logger("Retry")

COLD_START_STATUS = 500


@dataclass(frozen=True)
class RetryPolicy:
    """Timeouts and delays used by fetch_with_retry (seconds)."""

    max_attempts: int = 3
    first_timeout: float = 30.0
    retry_timeout: float = 10.0
    cold_start_delay: float = 2.0
    backoff_base_delay: float = 1.0

    @classmethod
    def from_settings(cls, settings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.fetch_max_attempts,
            first_timeout=settings.fetch_first_timeout,
            retry_timeout=settings.fetch_retry_timeout,
            cold_start_delay=settings.cold_start_delay,
            backoff_base_delay=settings.backoff_base_delay,
        )

    def timeout_for_attempt(self, attempt: int) -> float:
        """The first attempt absorbs cold-start latency; later ones fail fast."""
        return self.first_timeout if attempt == 1 else self.retry_timeout


@dataclass(frozen=True)
class RetryDecision:
    retry: bool
    delay: float = 0.0
    reason: str = ""


def decide_retry(
    attempt: int,
    policy: RetryPolicy,
    response: Optional[requests.Response] = None,
    error: Optional[BaseException] = None,
) -> RetryDecision:
    """
    Decide whether a finished attempt should be retried.

    Args:
        attempt: 1-based number of the attempt that just finished.
        policy: Retry policy in force.
        response: The response, when the call returned one.
        error: The exception, when the call raised.

    Returns:
        RetryDecision with the delay to wait before the next attempt.
    """
    if attempt >= policy.max_attempts:
        return RetryDecision(retry=False, reason="attempts exhausted")

    if error is not None:
        if isinstance(error, requests.exceptions.Timeout):
            return RetryDecision(True, policy.cold_start_delay, "timeout")
        return RetryDecision(True, policy.backoff_base_delay * attempt, "network error")

    if response is not None and response.status_code == COLD_START_STATUS:
        return RetryDecision(True, policy.cold_start_delay, "cold start")

    return RetryDecision(retry=False, reason="final response")


def fetch_with_retry(
    session: requests.Session,
    method: str,
    url: str,
    policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], None] = time.sleep,
    **request_kwargs,
) -> requests.Response:
    """
    Perform an HTTP request, retrying presumed transient failures.

    Only HTTP 500 and network errors are retried. Any other status is
    returned as-is. When attempts run out the last exception is re-raised or
    the last response is returned; a success is never synthesized.

    Raises:
        requests.exceptions.RequestException: The last network error.
    """
    policy = policy or RetryPolicy()

    for attempt in range(1, policy.max_attempts + 1):
        timeout = policy.timeout_for_attempt(attempt)
        try:
            response = session.request(method, url, timeout=timeout, **request_kwargs)
        except requests.exceptions.RequestException as e:
            decision = decide_retry(attempt, policy, error=e)
            if not decision.retry:
                logger.error(
                    f"Request to {url} failed after {attempt} attempt(s): {e}",
                    attempt=attempt,
                    max_attempts=policy.max_attempts,
                )
                raise
            logger.warning(
                f"Request {decision.reason} (attempt {attempt}/{policy.max_attempts}), "
                f"retrying in {decision.delay:.1f}s",
                url=url,
                error=str(e),
            )
            sleep(decision.delay)
            continue

        decision = decide_retry(attempt, policy, response=response)
        if not decision.retry:
            return response

        logger.info(
            f"Cold start detected (attempt {attempt}/{policy.max_attempts}), "
            f"retrying in {decision.delay:.1f}s",
            url=url,
            status_code=response.status_code,
        )
        response.close()
        sleep(decision.delay)

    # Unreachable: the last attempt always returns or raises
    raise RuntimeError("fetch_with_retry exhausted without a result")
