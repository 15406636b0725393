"""
PhenoGO Retry Logic with Exponential Backoff

Provides retry decorators and utilities for handling transient failures of
remote lookups. All pipeline I/O is sequential, so only blocking variants
are provided.

Author: PhenoGO Team
"""

import logging
from typing import Callable, Optional, Any
from functools import wraps

from tenacity import (
    stop_after_attempt,
    wait_exponential,
    retry_if_exception,
    before_sleep_log,
    Retrying,
)

from .exceptions import (
    RemoteServiceError,
    is_transient_error,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Retry Configuration
# =============================================================================

class RetryConfig:
    """
    Configuration for retry behavior.

    Attributes:
        max_attempts: Maximum number of attempts (default: 3)
        initial_wait: Initial wait time in seconds (default: 1)
        max_wait: Maximum wait time in seconds (default: 10)
        multiplier: Exponential backoff multiplier (default: 2)
    """

    def __init__(
        self,
        max_attempts: int = 3,
        initial_wait: float = 1.0,
        max_wait: float = 10.0,
        multiplier: float = 2.0
    ):
        """
        Initialize retry configuration.

        Args:
            max_attempts: Maximum attempts (1-10)
            initial_wait: Initial wait in seconds (0.0-5.0)
            max_wait: Maximum wait in seconds (0.0-60.0)
            multiplier: Backoff multiplier (1.0-5.0)
        """
        self.max_attempts = max(1, min(10, max_attempts))
        self.initial_wait = max(0.0, min(5.0, initial_wait))
        self.max_wait = max(self.initial_wait, min(60.0, max_wait))
        self.multiplier = max(1.0, min(5.0, multiplier))


DEFAULT_RETRY_CONFIG = RetryConfig(
    max_attempts=3,
    initial_wait=1.0,
    max_wait=10.0,
    multiplier=2.0
)

# NCBI throttles aggressively (HTTP 429); give it more room
NCBI_RETRY_CONFIG = RetryConfig(
    max_attempts=4,
    initial_wait=1.0,
    max_wait=20.0,
    multiplier=2.0
)


# =============================================================================
# Retry Condition Helpers
# =============================================================================

def should_retry_exception(exception: BaseException) -> bool:
    """
    Determine if an exception should trigger a retry.

    Args:
        exception: The exception to check

    Returns:
        True if the exception is retryable
    """
    if not isinstance(exception, Exception):
        return False

    if isinstance(exception, RemoteServiceError):
        return exception.is_retryable()

    return is_transient_error(exception)


# =============================================================================
# Retry Decorator
# =============================================================================

def sync_retry_with_backoff(
    config: Optional[RetryConfig] = None,
    logger_name: Optional[str] = None
) -> Callable:
    """
    Decorator for blocking functions with exponential backoff retry.

    Non-retryable errors propagate immediately; after the last attempt the
    original exception is re-raised.

    Args:
        config: Retry configuration (defaults to DEFAULT_RETRY_CONFIG)
        logger_name: Logger name for retry logs

    Returns:
        Decorated function with retry logic

    Example:
        >>> @sync_retry_with_backoff(config=NCBI_RETRY_CONFIG)
        ... def fetch_gene(gene_id: str):
        ...     return session.get(url, params={"id": gene_id}, timeout=30)
    """
    cfg = config or DEFAULT_RETRY_CONFIG
    log = logging.getLogger(logger_name) if logger_name else logger

    def decorator(func: Callable) -> Callable:
        func_name = getattr(func, '__name__', 'operation')

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in Retrying(
                stop=stop_after_attempt(cfg.max_attempts),
                wait=wait_exponential(
                    multiplier=cfg.initial_wait,
                    exp_base=cfg.multiplier,
                    max=cfg.max_wait
                ),
                retry=retry_if_exception(should_retry_exception),
                before_sleep=before_sleep_log(log, logging.WARNING),
                reraise=True
            ):
                with attempt:
                    result = func(*args, **kwargs)

                    if attempt.retry_state.attempt_number > 1:
                        log.info(
                            f"{func_name} succeeded after "
                            f"{attempt.retry_state.attempt_number} attempts"
                        )

                    return result

        return wrapper
    return decorator


def retry_sync_operation(
    operation: Callable,
    *args,
    config: Optional[RetryConfig] = None,
    operation_name: Optional[str] = None,
    **kwargs
) -> Any:
    """
    Retry an operation with exponential backoff.

    Useful when the retry configuration is only known at call time (it
    comes from the run configuration), so a decorator cannot be used.

    Args:
        operation: Callable to retry
        *args: Positional arguments for operation
        config: Retry configuration
        operation_name: Name for logging (defaults to operation.__name__)
        **kwargs: Keyword arguments for operation

    Returns:
        Result of the operation

    Raises:
        Exception: The last error if all attempts fail, or the first
            non-retryable error

    Example:
        >>> text = retry_sync_operation(
        ...     session.get, url, params=params, timeout=30,
        ...     config=NCBI_RETRY_CONFIG,
        ...     operation_name="efetch_gene_839580"
        ... )
    """
    cfg = config or DEFAULT_RETRY_CONFIG
    op_name = operation_name or getattr(operation, '__name__', 'sync_operation')

    try:
        return sync_retry_with_backoff(cfg)(operation)(*args, **kwargs)
    except Exception as e:
        if should_retry_exception(e):
            logger.error(
                f"{op_name} failed after {cfg.max_attempts} attempts. "
                f"Last error: {type(e).__name__}: {e}"
            )
        else:
            logger.debug(f"{op_name} failed with non-retryable error: {type(e).__name__}: {e}")
        raise
