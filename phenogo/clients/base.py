"""
Base HTTP client for remote gene databases.

Wraps one ``requests.Session`` per run with a request timeout, a minimum
interval between requests and retry with exponential backoff. Transport
failures are mapped to the PhenoGO exception hierarchy so that the retry
layer can tell transient failures from permanent ones.
"""

import logging
import time
from typing import Any, Dict, Optional

import requests

from ..core.exceptions import (
    DatabaseConnectionError,
    DatabaseTimeoutError,
    DatabaseUnavailableError,
    RemoteServiceError,
)
from ..core.retry import DEFAULT_RETRY_CONFIG, RetryConfig, retry_sync_operation

logger = logging.getLogger(__name__)


class HTTPClient:
    """Base class for sequential, rate-limited HTTP lookups."""

    def __init__(
        self,
        base_url: str,
        server_name: str,
        timeout: float = 30,
        min_interval: float = 0.0,
        retry_config: Optional[RetryConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: Service root URL
            server_name: Human-readable name for logging and errors
            timeout: Per-request timeout in seconds
            min_interval: Minimum seconds between two requests
            retry_config: Retry policy for transient failures
            session: Existing session (mainly for tests); created on demand otherwise
        """
        self.base_url = base_url.rstrip('/')
        self.server_name = server_name
        self.timeout = timeout
        self.min_interval = min_interval
        self.retry_config = retry_config or DEFAULT_RETRY_CONFIG
        self.session = session
        self._owns_session = session is None
        self._last_request = 0.0
        self.request_count = 0

    def __enter__(self) -> "HTTPClient":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def open(self) -> None:
        if self.session is None:
            self.session = requests.Session()
            self._owns_session = True
            logger.debug(f"Opened {self.server_name} session")

    def close(self) -> None:
        if self.session is not None and self._owns_session:
            self.session.close()
            self.session = None
            logger.info(f"Closed {self.server_name} session after {self.request_count} requests")

    def _wait_for_slot(self) -> None:
        elapsed = time.monotonic() - self._last_request
        if elapsed < self.min_interval:
            time.sleep(self.min_interval - elapsed)
        self._last_request = time.monotonic()

    def _get_once(self, endpoint: str, params: Dict[str, Any]) -> str:
        """Issue a single GET request and map failures to PhenoGO exceptions."""
        if self.session is None:
            self.open()

        url = f"{self.base_url}/{endpoint}"
        self._wait_for_slot()
        self.request_count += 1
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise DatabaseTimeoutError(
                server_name=self.server_name,
                timeout=self.timeout,
                query=f"{endpoint} {params.get('id', '')}".strip(),
                details={"error": str(e)}
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise DatabaseConnectionError(
                server_name=self.server_name,
                message=f"Connection failed: {e}",
                details={"url": url}
            ) from e
        except requests.exceptions.RequestException as e:
            raise RemoteServiceError(
                server_name=self.server_name,
                status_code=None,
                error_message=str(e),
                endpoint=endpoint
            ) from e

        if response.status_code == 429:
            retry_after = response.headers.get('Retry-After')
            raise DatabaseUnavailableError(
                server_name=self.server_name,
                reason="rate limit exceeded (HTTP 429)",
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None
            )
        if response.status_code >= 400:
            raise RemoteServiceError(
                server_name=self.server_name,
                status_code=response.status_code,
                error_message=response.text[:200].strip() or response.reason or "",
                endpoint=endpoint
            )
        return response.text

    def get_text(self, endpoint: str, params: Dict[str, Any], operation_name: Optional[str] = None) -> str:
        """
        GET ``endpoint`` and return the response body, retrying transient failures.

        Raises:
            DatabaseError: After the last attempt, or at once for a
                non-retryable status
        """
        return retry_sync_operation(
            self._get_once,
            endpoint,
            params,
            config=self.retry_config,
            operation_name=operation_name or f"{self.server_name} {endpoint}",
        )
