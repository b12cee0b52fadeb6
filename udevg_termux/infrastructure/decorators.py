"""
Infrastructure-specific decorators, providing cross-cutting concerns like
retry logic for network operations.
"""

import logging

import httpx
from tenacity import (
    retry,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

logger = logging.getLogger(__name__)

# --- Constants for Retry Logic ---
# First attempt plus three retries, one second apart.
_RETRY_ATTEMPTS = 4
_RETRY_WAIT_SECONDS = 1


def _is_transient_status(exception: BaseException) -> bool:
    """Server-side failures and rate limiting are worth another try."""
    if not isinstance(exception, httpx.HTTPStatusError):
        return False
    status = exception.response.status_code
    return status >= 500 or status == 429


def _log_before_retry(retry_state):
    """Log the retry attempt with details about the exception and wait time."""
    exception = retry_state.outcome.exception()
    next_attempt_in = retry_state.next_action.sleep
    logger.warning(
        f"Retrying {retry_state.fn.__name__} in {next_attempt_in:.2f}s due to "
        f"{type(exception).__name__} (attempt {retry_state.attempt_number})..."
    )


# A pre-configured decorator for synchronous network operations. The last
# exception is re-raised once attempts are exhausted.
retry_on_network_error = retry(
    stop=stop_after_attempt(_RETRY_ATTEMPTS),
    wait=wait_fixed(_RETRY_WAIT_SECONDS),
    retry=(
        retry_if_exception_type(
            (httpx.NetworkError, httpx.TimeoutException, httpx.RemoteProtocolError)
        )
        | retry_if_exception(_is_transient_status)
    ),
    before_sleep=_log_before_retry,
    reraise=True,
)
