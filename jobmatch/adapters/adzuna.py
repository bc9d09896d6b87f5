"""Adzuna adapter implementation."""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from jobmatch.domain.models import CanonicalJob, JobSource

from .base import BaseAdapter
from .exceptions import AdapterCredentialsError

# Salary currency per Adzuna country endpoint
COUNTRY_CURRENCIES = {
    "at": "EUR", "au": "AUD", "be": "EUR", "br": "BRL", "ca": "CAD", "ch": "CHF",
    "de": "EUR", "es": "EUR", "fr": "EUR", "gb": "GBP", "in": "INR", "it": "EUR",
    "mx": "MXN", "nl": "EUR", "nz": "NZD", "pl": "PLN", "sg": "SGD", "us": "USD",
    "za": "ZAR",
}


class AdzunaDisplayName(BaseModel):
    model_config = ConfigDict(extra="ignore")

    display_name: Optional[str] = None


class AdzunaJob(BaseModel):
    """One entry of the Adzuna 'results' array."""

    model_config = ConfigDict(extra="ignore")

    id: Union[str, int]
    title: str
    company: Optional[AdzunaDisplayName] = None
    location: Optional[AdzunaDisplayName] = None
    description: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    redirect_url: Optional[str] = None
    created: Optional[str] = None
    contract_type: Optional[str] = None


class AdzunaResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: List[Any] = Field(default_factory=list)


class AdzunaAdapter(BaseAdapter):
    """Adapter for the Adzuna job search API.

    Adzuna has no remote filter, so remote-only queries are filtered
    client-side with the text heuristic.

    API Details:
        Endpoint: https://api.adzuna.com/v1/api/jobs/{country}/search/1
        Method: GET
        Authentication: app_id + app_key query parameters
        Response: JSON object with a 'results' array
    """

    SOURCE = JobSource.ADZUNA
    API_BASE_URL = "https://api.adzuna.com/v1/api/jobs"
    RESULTS_PER_PAGE = 50
    MAX_DAYS_OLD = 30

    def __init__(
        self,
        app_id: Optional[str] = None,
        app_key: Optional[str] = None,
        country: str = "us",
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.app_id = app_id
        self.app_key = app_key
        self.country = country.lower()

    @property
    def currency(self) -> str:
        return COUNTRY_CURRENCIES.get(self.country, "USD")

    def fetch_jobs(self, query: str, location: str, remote_only: bool) -> List[CanonicalJob]:
        if not self.app_id or not self.app_key:
            raise AdapterCredentialsError("ADZUNA_APP_ID or ADZUNA_APP_KEY is not set")

        params = {
            "app_id": self.app_id,
            "app_key": self.app_key,
            "results_per_page": str(self.RESULTS_PER_PAGE),
            "what": query,
            "content-type": "application/json",
            "max_days_old": str(self.MAX_DAYS_OLD),
        }
        if location:
            params["where"] = location

        url = f"{self.API_BASE_URL}/{self.country}/search/1"
        payload = self._make_request(url, params=params)
        response = self._validate_response(AdzunaResponse, payload)

        jobs = self._normalize_entries(response.results, AdzunaJob, self._to_canonical)

        if remote_only:
            jobs = [job for job in jobs if job.remote]

        return jobs

    def _to_canonical(self, raw: AdzunaJob) -> CanonicalJob:
        description = self._clean_html(raw.description)
        location = raw.location.display_name if raw.location else None

        return CanonicalJob(
            external_id=str(raw.id),
            source=self.SOURCE,
            title=self._clean_html(raw.title),
            company=(raw.company.display_name if raw.company else None) or "Unknown",
            location=location or "Unknown",
            description=description,
            salary=self._format_salary(raw.salary_min, raw.salary_max, self.currency, "year"),
            url=self._absolute_url(raw.redirect_url, f"https://www.adzuna.co.uk/jobs/details/{raw.id}"),
            posted_at=self._parse_timestamp(raw.created),
            remote=self._detect_remote(raw.title, description, location),
        )
