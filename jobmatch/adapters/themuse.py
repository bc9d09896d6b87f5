"""The Muse adapter implementation."""

from typing import Any, List, Optional
from urllib.parse import quote_plus

from pydantic import BaseModel, ConfigDict, Field

from jobmatch.domain.models import CanonicalJob, JobSource

from .base import BaseAdapter


class MuseName(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None


class MuseRefs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    landing_page: Optional[str] = None


class MuseJob(BaseModel):
    """One entry of The Muse 'results' array."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    company: Optional[MuseName] = None
    locations: List[MuseName] = Field(default_factory=list)
    contents: Optional[str] = None
    refs: Optional[MuseRefs] = None
    publication_date: Optional[str] = None
    categories: List[MuseName] = Field(default_factory=list)
    levels: List[MuseName] = Field(default_factory=list)


class MuseResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: List[Any] = Field(default_factory=list)
    page: Optional[int] = None
    page_count: Optional[int] = None


class TheMuseAdapter(BaseAdapter):
    """Adapter for The Muse public jobs API.

    The Muse has no free-text search: the query is passed as a category hint.
    It publishes no salary data. Remote-only queries are filtered client-side.

    API Details:
        Endpoint: https://www.themuse.com/api/public/jobs
        Method: GET
        Authentication: None (public)
        Response: JSON object with a 'results' array
    """

    SOURCE = JobSource.THEMUSE
    API_URL = "https://www.themuse.com/api/public/jobs"

    def fetch_jobs(self, query: str, location: str, remote_only: bool) -> List[CanonicalJob]:
        params = {"page": "0", "descending": "true"}
        if query:
            params["category"] = query
        if location:
            params["location"] = location

        payload = self._make_request(self.API_URL, headers={"Accept": "application/json"}, params=params)
        response = self._validate_response(MuseResponse, payload)

        jobs = self._normalize_entries(response.results, MuseJob, self._to_canonical)

        if remote_only:
            jobs = [job for job in jobs if job.remote]

        return jobs

    def _to_canonical(self, raw: MuseJob) -> CanonicalJob:
        location_names = [loc.name for loc in raw.locations if loc.name]
        description = self._clean_html(raw.contents)
        landing_page = raw.refs.landing_page if raw.refs else None

        return CanonicalJob(
            external_id=str(raw.id),
            source=self.SOURCE,
            title=raw.name,
            company=(raw.company.name if raw.company else None) or "Unknown",
            location="; ".join(location_names) or "Unknown",
            description=description,
            salary=None,
            url=self._absolute_url(
                landing_page,
                f"https://www.themuse.com/search/keyword/{quote_plus(raw.name)}",
            ),
            posted_at=self._parse_timestamp(raw.publication_date),
            remote=self._is_remote(location_names, description),
        )

    def _is_remote(self, location_names: List[str], description: str) -> bool:
        # The Muse lists remote roles under a "Flexible / Remote" location
        location_text = " ".join(location_names).lower()
        if "flexible" in location_text:
            return True
        return self._detect_remote(location_text, description)
