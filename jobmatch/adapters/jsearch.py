"""JSearch (RapidAPI) adapter implementation."""

from typing import Any, List, Optional
from urllib.parse import quote_plus

from pydantic import BaseModel, ConfigDict, Field

from jobmatch.domain.models import CanonicalJob, JobSource

from .base import BaseAdapter
from .exceptions import AdapterCredentialsError


class JSearchJob(BaseModel):
    """One entry of the JSearch 'data' array."""

    model_config = ConfigDict(extra="ignore")

    job_id: str
    job_title: str
    employer_name: Optional[str] = None
    job_city: Optional[str] = None
    job_state: Optional[str] = None
    job_country: Optional[str] = None
    job_description: Optional[str] = None
    job_min_salary: Optional[float] = None
    job_max_salary: Optional[float] = None
    job_salary_currency: Optional[str] = None
    job_salary_period: Optional[str] = None
    job_apply_link: Optional[str] = None
    job_posted_at_datetime_utc: Optional[str] = None
    job_is_remote: Optional[bool] = None


class JSearchResponse(BaseModel):
    """Top-level JSearch search response. Entries are validated one by one."""

    model_config = ConfigDict(extra="ignore")

    status: str
    data: List[Any] = Field(default_factory=list)


class JSearchAdapter(BaseAdapter):
    """Adapter for the JSearch job search API.

    API Details:
        Endpoint: https://jsearch.p.rapidapi.com/search
        Method: GET
        Authentication: x-rapidapi-key header (JSEARCH_API_KEY)
        Response: JSON object with 'status' and a 'data' array
    """

    SOURCE = JobSource.JSEARCH
    API_URL = "https://jsearch.p.rapidapi.com/search"
    API_HOST = "jsearch.p.rapidapi.com"

    def __init__(self, api_key: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key

    def fetch_jobs(self, query: str, location: str, remote_only: bool) -> List[CanonicalJob]:
        if not self.api_key:
            raise AdapterCredentialsError("JSEARCH_API_KEY is not set")

        if remote_only:
            search = f"{query} remote"
        elif location:
            search = f"{query} in {location}"
        else:
            search = query

        params = {
            "query": search,
            "page": "1",
            "num_pages": "1",
            "date_posted": "month",
        }
        if remote_only:
            params["remote_jobs_only"] = "true"

        payload = self._make_request(
            self.API_URL,
            headers={"x-rapidapi-key": self.api_key, "x-rapidapi-host": self.API_HOST},
            params=params,
        )
        response = self._validate_response(JSearchResponse, payload)

        return self._normalize_entries(response.data, JSearchJob, self._to_canonical)

    def _to_canonical(self, raw: JSearchJob) -> CanonicalJob:
        """Map a JSearch entry onto the canonical shape."""
        description = self._clean_html(raw.job_description)
        location = ", ".join(part for part in (raw.job_city, raw.job_state, raw.job_country) if part)

        if raw.job_is_remote is not None:
            remote = raw.job_is_remote
        else:
            remote = self._detect_remote(raw.job_title, location, description)

        return CanonicalJob(
            external_id=raw.job_id,
            source=self.SOURCE,
            title=raw.job_title,
            company=raw.employer_name or "Unknown",
            location=location or "Unknown",
            description=description,
            salary=self._format_salary(
                raw.job_min_salary,
                raw.job_max_salary,
                raw.job_salary_currency or "USD",
                raw.job_salary_period or "year",
            ),
            url=self._absolute_url(raw.job_apply_link, self._fallback_url(raw)),
            posted_at=self._parse_timestamp(raw.job_posted_at_datetime_utc),
            remote=remote,
        )

    @staticmethod
    def _fallback_url(raw: JSearchJob) -> str:
        terms = f"{raw.job_title} {raw.employer_name or ''}".strip()
        return f"https://www.google.com/search?q={quote_plus(terms)}"
