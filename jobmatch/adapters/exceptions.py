"""Custom exceptions for job source adapters.

Adapters raise these from fetch_jobs(); BaseAdapter.fetch_outcome() turns
them into a FetchOutcome so nothing escapes to the aggregator.
"""


class AdapterError(Exception):
    """Base exception for all adapter errors."""

    pass


class AdapterHTTPError(AdapterError):
    """Provider request failed at the transport level or returned a non-2xx status.

    A status_code of 0 means no HTTP response was received (DNS failure,
    connection refused, TLS error, ...).
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class AdapterTimeoutError(AdapterError):
    """Provider request did not complete within the configured timeout."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class AdapterResponseError(AdapterError):
    """Provider returned a body that is not JSON or does not match its schema."""

    pass


class AdapterConfigurationError(AdapterError):
    """Adapter was given invalid configuration (unknown source, bad timeout, ...)."""

    pass


class AdapterCredentialsError(AdapterConfigurationError):
    """Provider credentials are absent; the adapter skips itself for this run."""

    pass
