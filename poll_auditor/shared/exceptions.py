"""
Exception hierarchy for the poll auditor.

Exception Categories:
- RetryableException: Transient failures that may succeed on retry (HTTP, network)
- NonRetryableException: Permanent failures that won't benefit from retry (bad data)
- ConfigurationException: Startup/config errors that prevent a run

Concrete exceptions:
- APIException -> RetryableException (upstream API or transport failure)
- RetryExhaustedException -> RetryableException (retry budget used up, fatal)
- VoteDataException -> NonRetryableException (vote data that cannot be attributed)
"""

from typing import Optional


class RetryableException(Exception):
    """
    Base class for exceptions that may succeed on retry.

    Use for transient failures like:
    - HTTP timeouts
    - Rate limiting
    - Temporary network issues
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NonRetryableException(Exception):
    """
    Base class for exceptions that won't benefit from retry.

    Use for permanent failures like:
    - Invalid input data
    - Missing required configuration
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationException(NonRetryableException):
    """
    Exception for configuration/startup errors.

    Use when:
    - Vote addresses are missing or identical
    - The block window is inverted
    - Page size or retry settings are out of range
    """

    pass


class VoteDataException(NonRetryableException):
    """Vote data that cannot be attributed to the YES or NO side."""

    pass


class APIException(RetryableException):
    """
    Exception for upstream API failures (Stacks API, mempool API).

    Carries the requested URL and, when the server answered, its status code.
    """

    def __init__(
        self, message: str, url: str = "", status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class RetryExhaustedException(RetryableException):
    """
    Raised when an operation failed on every attempt of its retry budget.

    This is fatal for the whole run: no partial report is produced.
    """

    def __init__(
        self, operation: str, attempts: int, last_error: Exception
    ):
        super().__init__(
            f"{operation} failed after {attempts} attempts: {last_error}"
        )
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error
