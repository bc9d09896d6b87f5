"""Base adapter class with shared functionality for all job source adapters.

This module provides the abstract base class every provider adapter
implements, along with shared helpers for HTTP requests, payload validation,
HTML cleaning, timestamp parsing and salary/remote/URL normalization.
"""

import html
import logging
import re
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from jobmatch.domain.models import CanonicalJob, JobSource, is_absolute_http_url
from jobmatch.logging import get_logger
from jobmatch.logging.context import log_context
from jobmatch.utils.timestamps import parse_iso_datetime, to_iso_string

from .exceptions import (
    AdapterConfigurationError,
    AdapterCredentialsError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)
from .models import FetchOutcome

logger = get_logger(__name__, component="adapter")

ModelT = TypeVar("ModelT", bound=BaseModel)

REMOTE_MARKERS = ("remote", "work from home")


class BaseAdapter(ABC):
    """Base class for all job source adapters.

    Subclasses set SOURCE and implement fetch_jobs(), which may raise
    AdapterError subclasses. Callers use fetch() or fetch_outcome(), which
    never raise: every failure becomes an empty result plus a log line.

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
        max_jobs: Maximum jobs to return per fetch (0 = unlimited)
    """

    SOURCE: JobSource

    def __init__(
        self,
        timeout: int = 15,
        user_agent: str = "JobMatchPipeline/1.0",
        max_jobs: int = 100,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize adapter.

        Args:
            timeout: HTTP request timeout in seconds (1-120)
            user_agent: User-Agent header for requests
            max_jobs: Maximum jobs to return per fetch (0 = unlimited)
            session: Optional pre-built requests session (tests inject one)

        Raises:
            AdapterConfigurationError: If timeout is out of range or user_agent is empty
        """
        if not 1 <= timeout <= 120:
            raise AdapterConfigurationError(f"Timeout must be between 1 and 120 seconds, got: {timeout}")
        if not user_agent or not user_agent.strip():
            raise AdapterConfigurationError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()
        self.max_jobs = max_jobs

        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})

    @property
    def source(self) -> JobSource:
        return self.SOURCE

    @property
    def label(self) -> str:
        return self.SOURCE.label

    @abstractmethod
    def fetch_jobs(self, query: str, location: str, remote_only: bool) -> List[CanonicalJob]:
        """Fetch and normalize listings from the provider.

        Implementations should:
        1. Raise AdapterCredentialsError when required credentials are absent
        2. Request the provider API through _make_request()
        3. Validate the payload with _validate_response()
        4. Convert entries with _normalize_entries(), skipping malformed ones

        Raises:
            AdapterError: Any failure that makes the whole response unusable
        """

    def fetch(self, query: str, location: str, remote_only: bool) -> List[CanonicalJob]:
        """Fetch canonical jobs. Never raises; failures yield an empty list."""
        return self.fetch_outcome(query, location, remote_only).jobs

    def fetch_outcome(self, query: str, location: str, remote_only: bool) -> FetchOutcome:
        """Fetch canonical jobs and report how the fetch went.

        Never raises. Missing credentials produce a skipped outcome; every
        other failure produces an outcome carrying the error message.
        """
        started = time.monotonic()

        with log_context(source=self.SOURCE.value):
            try:
                jobs = self.fetch_jobs(query, location, remote_only)
                jobs = self._truncate_jobs(jobs)
            except AdapterCredentialsError as e:
                logger.warning(
                    f"{self.label} credentials not configured, skipping source",
                    extra={"event": "adapter.fetch.skipped", "reason": str(e)},
                )
                return FetchOutcome(
                    source=self.SOURCE,
                    skipped=True,
                    duration_seconds=time.monotonic() - started,
                )
            except AdapterError as e:
                logger.error(
                    f"{self.label} fetch failed: {e}",
                    extra={"event": "adapter.fetch.failed", "error_type": type(e).__name__, "error": str(e)},
                )
                return FetchOutcome(
                    source=self.SOURCE,
                    error=str(e),
                    duration_seconds=time.monotonic() - started,
                )
            except Exception as e:
                logger.error(
                    f"Unexpected error in {self.label} adapter: {e}",
                    extra={"event": "adapter.fetch.failed", "error_type": type(e).__name__, "error": str(e)},
                    exc_info=True,
                )
                return FetchOutcome(
                    source=self.SOURCE,
                    error=f"Unexpected {type(e).__name__}: {e}",
                    duration_seconds=time.monotonic() - started,
                )

            duration = time.monotonic() - started
            logger.info(
                f"Fetched {len(jobs)} jobs from {self.label}",
                extra={
                    "event": "adapter.fetch.completed",
                    "count": len(jobs),
                    "query": query,
                    "duration_ms": int(duration * 1000),
                },
            )
            return FetchOutcome(source=self.SOURCE, jobs=jobs, duration_seconds=duration)

    def _make_request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make an HTTP request and return the decoded JSON body.

        Raises:
            AdapterHTTPError: On non-2xx status or transport failure (status_code 0)
            AdapterTimeoutError: On request timeout
            AdapterResponseError: On a body that is not valid JSON
        """
        request_headers = self._session.headers.copy()
        if headers:
            request_headers.update(headers)

        logger.debug(
            f"HTTP {method} request to {url}",
            extra={"event": "adapter.fetch.request", "method": method, "url": url, "timeout": self.timeout},
        )

        try:
            response = self._session.request(
                method=method,
                url=url,
                headers=request_headers,
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise AdapterTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            raise AdapterHTTPError(f"Request to {url} failed: {e}", status_code=0, url=url) from e

        if not 200 <= response.status_code < 300:
            log_level = logging.WARNING if response.status_code >= 500 else logging.ERROR
            logger.log(
                log_level,
                f"HTTP {response.status_code} error from {url}",
                extra={"event": "adapter.fetch.http_error", "status_code": response.status_code, "url": url},
            )
            raise AdapterHTTPError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
                url=url,
            )

        try:
            return response.json()
        except ValueError as e:
            raise AdapterResponseError(f"Failed to parse JSON response from {url}: {e}") from e

    def _validate_response(self, model: Type[ModelT], payload: Any) -> ModelT:
        """Validate a whole provider payload; a mismatch discards the response."""
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise AdapterResponseError(
                f"{self.label} response failed validation: {e.error_count()} error(s), "
                f"first: {_first_error(e)}"
            ) from e

    def _normalize_entries(
        self,
        entries: Iterable[Any],
        entry_model: Type[ModelT],
        to_job: Callable[[ModelT], CanonicalJob],
    ) -> List[CanonicalJob]:
        """Validate and normalize entries one by one, skipping malformed ones."""
        jobs = []
        skipped = 0

        for index, item in enumerate(entries):
            try:
                entry = entry_model.model_validate(item)
                jobs.append(to_job(entry))
            except (ValidationError, ValueError, TypeError) as e:
                skipped += 1
                logger.warning(
                    f"Skipping invalid {self.label} job entry",
                    extra={
                        "event": "adapter.entry.skipped",
                        "entry_index": index,
                        "entry_id": item.get("id") if isinstance(item, dict) else None,
                        "error": _first_error(e) if isinstance(e, ValidationError) else str(e),
                    },
                )

        if skipped:
            logger.info(
                f"Skipped {skipped} invalid {self.label} entries",
                extra={"event": "adapter.entries.skipped", "skipped": skipped, "kept": len(jobs)},
            )

        return jobs

    def _clean_html(self, html_text: Optional[str]) -> str:
        """Convert an HTML fragment to plain text.

        Decodes entities, turns <br> and </p> into line breaks, strips the
        remaining tags and normalizes whitespace while keeping paragraphs.
        """
        if not html_text:
            return ""

        text = re.sub(r"<br\s*/?>", "\n", html_text, flags=re.IGNORECASE)
        text = re.sub(r"</(p|div|li|h[1-6])>", "\n\n", text, flags=re.IGNORECASE)
        text = re.sub(r"<[^>]+>", " ", text)

        # Decode after stripping so that escaped markup (&lt;b&gt;) stays literal text
        text = html.unescape(text)
        text = text.replace("\xa0", " ")

        text = re.sub(r"[ \t\r\f\v]+", " ", text)
        text = re.sub(r" *\n *", "\n", text)
        text = re.sub(r"\n{3,}", "\n\n", text)

        return text.strip()

    def _parse_timestamp(self, value: Any) -> Optional[str]:
        """Normalize a provider timestamp to an ISO-8601 UTC string, or None."""
        if value is None or value == "":
            return None

        parsed = parse_iso_datetime(value)
        if parsed is None:
            logger.warning(
                "Failed to parse timestamp",
                extra={"event": "adapter.timestamp.invalid", "timestamp": str(value)},
            )
            return None

        return to_iso_string(parsed)

    @staticmethod
    def _format_salary(
        minimum: Optional[float],
        maximum: Optional[float],
        currency: str,
        period: str = "year",
    ) -> Optional[str]:
        """Build a human-readable salary string from disjoint provider fields.

        Example:
            >>> BaseAdapter._format_salary(90000, 120000, "USD", "YEAR")
            'USD 90,000 - 120,000 / year'
        """
        if minimum is None and maximum is None:
            return None

        period = (period or "year").strip().lower()

        if minimum is not None and maximum is not None:
            if minimum == maximum:
                return f"{currency} {_format_amount(minimum)} / {period}"
            return f"{currency} {_format_amount(minimum)} - {_format_amount(maximum)} / {period}"

        amount = minimum if minimum is not None else maximum
        return f"{currency} {_format_amount(amount)} / {period}"

    @staticmethod
    def _detect_remote(*texts: Optional[str]) -> bool:
        """Heuristic remote flag for providers without a structured one."""
        combined = " ".join(text for text in texts if text).lower()
        return any(marker in combined for marker in REMOTE_MARKERS)

    @staticmethod
    def _absolute_url(candidate: Optional[str], fallback: str) -> str:
        """Return the provider URL when usable, else the synthesized fallback."""
        if candidate and is_absolute_http_url(candidate.strip()):
            return candidate.strip()
        return fallback

    def _truncate_jobs(self, jobs: List[CanonicalJob]) -> List[CanonicalJob]:
        """Cap the number of jobs returned per fetch when max_jobs is set."""
        if self.max_jobs > 0 and len(jobs) > self.max_jobs:
            logger.warning(
                "Truncating jobs to max_jobs limit",
                extra={"event": "adapter.fetch.truncated", "total": len(jobs), "max": self.max_jobs},
            )
            return jobs[: self.max_jobs]

        return jobs


def _format_amount(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def _first_error(error: ValidationError) -> str:
    """Summarize the first pydantic error as 'field.path: message'."""
    errors = error.errors()
    if not errors:
        return str(error)
    first = errors[0]
    location = ".".join(str(part) for part in first["loc"]) or "(root)"
    return f"{location}: {first['msg']}"
