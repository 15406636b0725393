"""
PhenoGO Custom Exception Hierarchy

Provides specific exception types so that each stage of the pipeline can
decide whether a failure is fatal to the run, retryable, or a row-level gap.

Author: PhenoGO Team
"""

from typing import Optional, Dict, Any


class PhenoGOException(Exception):
    """
    Base exception for all PhenoGO errors.

    All custom exceptions should inherit from this class.
    This allows catching all PhenoGO-specific errors with a single except clause.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception with message and optional details.

        Args:
            message: Human-readable error message
            details: Additional context (service name, identifiers, etc.)
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        """String representation with details."""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


# =============================================================================
# Reference Data Errors
# =============================================================================

class ReferenceDataError(PhenoGOException):
    """
    Upstream reference data is missing or unreadable.

    Raised when the ontology, annotation or cross-reference source cannot be
    loaded at startup. This is the only condition that aborts a run before
    any output is produced.
    """

    def __init__(self, source: str, path: Optional[str], reason: str):
        """
        Initialize with source information.

        Args:
            source: Kind of reference data ("ontology", "annotations", "cross_reference")
            path: Location the data was read from
            reason: Why it could not be used
        """
        details = {'source': source}
        if path:
            details['path'] = path
        super().__init__(f"Cannot load {source}: {reason}", details)
        self.source = source
        self.path = path
        self.reason = reason


# =============================================================================
# Remote Database Errors
# =============================================================================

class DatabaseError(PhenoGOException):
    """
    Base class for remote database errors.

    Use for errors related to external database access (NCBI E-utilities).
    """
    pass


class DatabaseConnectionError(DatabaseError):
    """
    Database connection failed.

    Raised when unable to reach the remote service.
    This is typically a transient error - retry may succeed.
    """

    def __init__(self, server_name: str, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize with server information.

        Args:
            server_name: Name of the database/server (e.g., "NCBI")
            message: Error description
            details: Additional context
        """
        details = details or {}
        details['server'] = server_name
        super().__init__(message, details)
        self.server_name = server_name


class DatabaseTimeoutError(DatabaseError):
    """
    Database query timed out.

    Raised when a request exceeds the timeout threshold.
    This is typically a transient error - retry may succeed.
    """

    def __init__(self, server_name: str, timeout: float, query: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize with timeout information.

        Args:
            server_name: Name of the database/server
            timeout: Timeout threshold in seconds
            query: Query that timed out
            details: Additional context
        """
        details = details or {}
        details.update({
            'server': server_name,
            'timeout_seconds': timeout,
            'query': query
        })
        message = f"{server_name} query timed out after {timeout}s: {query}"
        super().__init__(message, details)
        self.server_name = server_name
        self.timeout = timeout
        self.query = query


class DatabaseUnavailableError(DatabaseError):
    """
    Database service is unavailable.

    Raised when the service answers with a throttling or maintenance status.
    This typically requires waiting before retry.
    """

    def __init__(self, server_name: str, reason: str, retry_after: Optional[int] = None):
        """
        Initialize with unavailability information.

        Args:
            server_name: Name of the database/server
            reason: Why service is unavailable
            retry_after: Suggested retry delay in seconds
        """
        details = {
            'server': server_name,
            'reason': reason
        }
        if retry_after:
            details['retry_after_seconds'] = retry_after

        message = f"{server_name} is unavailable: {reason}"
        super().__init__(message, details)
        self.server_name = server_name
        self.retry_after = retry_after


class RemoteServiceError(DatabaseError):
    """
    Remote service returned an HTTP error status.

    This may or may not be retryable depending on the status code.
    """

    def __init__(self, server_name: str, status_code: Optional[int], error_message: str,
                 endpoint: Optional[str] = None):
        """
        Initialize with HTTP error information.

        Args:
            server_name: Name of the remote service
            status_code: HTTP status code
            error_message: Error message or response excerpt
            endpoint: Endpoint that failed
        """
        details = {
            'server': server_name,
            'status_code': status_code,
            'error_message': error_message
        }
        if endpoint:
            details['endpoint'] = endpoint

        message = f"{server_name} error"
        if status_code:
            message += f" [{status_code}]"
        if endpoint:
            message += f" in {endpoint}"
        message += f": {error_message}"

        super().__init__(message, details)
        self.server_name = server_name
        self.status_code = status_code
        self.error_message = error_message
        self.endpoint = endpoint

    def is_retryable(self) -> bool:
        """
        Determine if this error is retryable.

        Returns:
            True if error might succeed on retry, False otherwise
        """
        if self.status_code is None:
            return True
        if self.status_code == 429:
            return True
        # Client errors (bad id, bad parameters) will fail the same way again
        return self.status_code >= 500


# =============================================================================
# Data Validation Errors
# =============================================================================

class DataValidationError(PhenoGOException):
    """
    Data validation failed.

    Raised when data does not meet quality or format requirements.
    This is typically NOT retryable - the data itself is the problem.
    """

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Optional[Any] = None, expected: Optional[str] = None):
        """
        Initialize with validation details.

        Args:
            message: Validation error description
            field: Field that failed validation
            value: Invalid value
            expected: Expected format/value
        """
        details = {}
        if field:
            details['field'] = field
        if value is not None:
            details['value'] = str(value)
        if expected:
            details['expected'] = expected

        super().__init__(message, details)
        self.field = field
        self.value = value
        self.expected = expected


class RecordParseError(DataValidationError):
    """
    A remote response could not be parsed at all.

    Missing individual fields are not errors; this is raised only when the
    response has no recognizable structure (e.g. an empty FASTA payload).
    """

    def __init__(self, record_type: str, identifier: str, reason: str):
        message = f"Could not parse {record_type} record for {identifier}: {reason}"
        super().__init__(message, field=record_type, value=identifier)
        self.record_type = record_type
        self.identifier = identifier
        self.reason = reason


class EmptyResultError(DataValidationError):
    """
    Query returned no results.

    Raised when a lookup returns an empty body where a record was expected.
    """

    def __init__(self, query_type: str, query: str):
        """
        Initialize with query information.

        Args:
            query_type: Type of query (e.g., "gene_record", "protein_sequence")
            query: The query that returned no results
        """
        message = f"{query_type} returned no results for: {query}"
        super().__init__(message)
        self.details.update({
            'query_type': query_type,
            'query': query
        })
        self.query_type = query_type
        self.query = query


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(PhenoGOException):
    """
    Configuration error.

    Raised when configuration is invalid or missing.
    This is NOT retryable - requires fixing configuration.
    """

    def __init__(self, config_key: str, message: str, config_file: Optional[str] = None):
        """
        Initialize with configuration details.

        Args:
            config_key: Configuration key that's problematic
            message: Error description
            config_file: Path to configuration file
        """
        details = {'config_key': config_key}
        if config_file:
            details['config_file'] = config_file

        super().__init__(message, details)
        self.config_key = config_key
        self.config_file = config_file


# =============================================================================
# Pipeline Execution Errors
# =============================================================================

class PipelineStageError(PhenoGOException):
    """
    A pipeline stage failed unexpectedly.

    Wraps the underlying exception together with the name of the stage.
    """

    def __init__(self, stage: str, original_error: Optional[Exception] = None):
        """
        Initialize with stage details.

        Args:
            stage: Stage that failed (e.g., "graph_expansion", "report_writing")
            original_error: The underlying exception that caused failure
        """
        message = f"Pipeline failed in stage: {stage}"

        details: Dict[str, Any] = {'stage': stage}
        if original_error:
            details['original_error'] = str(original_error)
            details['original_error_type'] = type(original_error).__name__

        super().__init__(message, details)
        self.stage = stage
        self.original_error = original_error


# =============================================================================
# Helper Functions
# =============================================================================

def is_transient_error(error: Exception) -> bool:
    """
    Determine if an error is transient (retryable).

    Args:
        error: The exception to check

    Returns:
        True if error is likely transient and should be retried

    Example:
        >>> try:
        ...     client.fetch_gene_record("839580")
        ... except Exception as e:
        ...     if is_transient_error(e):
        ...         # Retry
        ...     else:
        ...         # Record the row as missing
    """
    transient_types = (
        DatabaseConnectionError,
        DatabaseTimeoutError,
        DatabaseUnavailableError,
        ConnectionError,
        TimeoutError,
    )

    if isinstance(error, transient_types):
        return True

    if isinstance(error, RemoteServiceError):
        return error.is_retryable()

    # Wrapped connection resets
    error_msg = str(error).upper()
    if 'ECONNRESET' in error_msg or 'CONNECTION RESET' in error_msg:
        return True

    return False


def format_error_for_logging(error: Exception) -> Dict[str, Any]:
    """
    Format exception for structured logging.

    Args:
        error: The exception to format

    Returns:
        Dictionary with error details for logging

    Example:
        >>> logger.error("Operation failed", extra={"extra_fields": format_error_for_logging(e)})
    """
    base_info = {
        'error_type': type(error).__name__,
        'error_message': str(error),
        'is_transient': is_transient_error(error)
    }

    if isinstance(error, PhenoGOException):
        base_info.update(error.details)

    return base_info
