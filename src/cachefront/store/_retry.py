import logging
from collections.abc import Callable
from typing import Any

import redis
from tenacity import RetryCallState, retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

logger = logging.getLogger(__name__)


def default_redis_retry(label: str, retries: int = 3) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Return a tenacity retry decorator for transient Redis failures.

    *retries* is the number of extra attempts after the first one; 0 turns
    retrying off. *label* is interpolated into the warning emitted before
    each retry, e.g. ``"Retrying <label> (attempt 2): <error>"``.
    """

    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning("Retrying %s (attempt %d): %s", label, retry_state.attempt_number, retry_state.outcome)

    return retry(
        stop=stop_after_attempt(retries + 1),
        wait=wait_exponential_jitter(initial=0.1, max=2, jitter=0.1),
        retry=retry_if_exception_type((redis.ConnectionError, redis.TimeoutError)),
        before_sleep=_log_retry,
        reraise=True,
    )
