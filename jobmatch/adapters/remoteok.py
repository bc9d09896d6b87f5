"""RemoteOK adapter implementation."""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from jobmatch.domain.models import CanonicalJob, JobSource

from .base import BaseAdapter


class RemoteOKJob(BaseModel):
    """One job element of the RemoteOK array."""

    model_config = ConfigDict(extra="ignore")

    id: Union[str, int]
    slug: Optional[str] = None
    company: Optional[str] = None
    position: str
    description: Optional[str] = None
    location: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    tags: List[str] = Field(default_factory=list)
    url: Optional[str] = None
    apply_url: Optional[str] = None
    date: Optional[str] = None
    epoch: Optional[int] = None

    @field_validator("tags", mode="before")
    @classmethod
    def none_tags_is_empty(cls, v):
        return [] if v is None else v

    @field_validator("salary_min", "salary_max", mode="before")
    @classmethod
    def zero_salary_is_unknown(cls, v):
        # RemoteOK reports 0 for "not disclosed"
        return None if v in (0, "0", "") else v


class RemoteOKResponse(RootModel[List[Any]]):
    """RemoteOK returns a bare array; the first element is a legal notice."""


class RemoteOKAdapter(BaseAdapter):
    """Adapter for the RemoteOK public API.

    RemoteOK returns its whole feed with no server-side search, so the query
    is matched client-side. Location is ignored; every listing is remote.

    API Details:
        Endpoint: https://remoteok.com/api
        Method: GET
        Authentication: None (a User-Agent header is required)
        Response: JSON array, first element is metadata
    """

    SOURCE = JobSource.REMOTEOK
    API_URL = "https://remoteok.com/api"

    def fetch_jobs(self, query: str, location: str, remote_only: bool) -> List[CanonicalJob]:
        payload = self._make_request(self.API_URL, headers={"Accept": "application/json"})
        response = self._validate_response(RemoteOKResponse, payload)

        # Drop the legal/metadata element(s) before per-entry validation
        entries = [
            item for item in response.root
            if isinstance(item, dict) and "legal" not in item
        ]

        jobs = self._normalize_entries(entries, RemoteOKJob, self._to_canonical)

        return [job for job in jobs if self._matches_query(job, query)]

    def _to_canonical(self, raw: RemoteOKJob) -> CanonicalJob:
        description = self._clean_html(raw.description)
        tags_text = ", ".join(raw.tags)

        return CanonicalJob(
            external_id=str(raw.id),
            source=self.SOURCE,
            title=raw.position,
            company=raw.company or "Unknown",
            location=raw.location or "Remote",
            description=f"{description}\n\nTags: {tags_text}".strip() if tags_text else description,
            salary=self._format_salary(raw.salary_min, raw.salary_max, "USD", "year"),
            url=self._build_url(raw),
            posted_at=self._parse_timestamp(raw.date or raw.epoch),
            remote=True,
        )

    def _build_url(self, raw: RemoteOKJob) -> str:
        for candidate in (raw.apply_url, raw.url):
            url = self._absolute_url(candidate, "")
            if url:
                return url
        return f"https://remoteok.com/remote-jobs/{raw.slug or raw.id}"

    @staticmethod
    def _matches_query(job: CanonicalJob, query: str) -> bool:
        """True when any query term appears in the title, company or description."""
        terms = query.lower().split()
        if not terms:
            return True
        searchable = f"{job.title} {job.company} {job.description}".lower()
        return any(term in searchable for term in terms)
