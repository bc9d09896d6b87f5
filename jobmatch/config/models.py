"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from jobmatch.domain.models import JobSource

# Registration order matters: deduplication keeps the first occurrence,
# so earlier sources are authoritative for duplicates.
DEFAULT_SOURCE_ORDER = (
    JobSource.JSEARCH,
    JobSource.ADZUNA,
    JobSource.THEMUSE,
    JobSource.REMOTEOK,
)


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class SourceConfig(BaseModel):
    """Configuration for a single job provider."""

    type: JobSource = Field(..., description="Provider tag (jsearch, adzuna, themuse, remoteok)")
    enabled: bool = Field(True, description="Whether to query this provider")


def _default_sources() -> List[SourceConfig]:
    return [SourceConfig(type=source) for source in DEFAULT_SOURCE_ORDER]


class ScoringConfig(BaseModel):
    """Settings for the AI scoring stage."""

    batch_size: int = Field(5, ge=1, le=20, description="Jobs per AI request")
    model: str = Field("gpt-4o-mini", min_length=1, description="Model name sent to the AI service")
    max_tokens: int = Field(2048, ge=256, le=16384, description="Response token limit per batch")
    max_description_chars: int = Field(
        2000, ge=200, description="Descriptions longer than this are truncated in the prompt"
    )
    request_timeout: int = Field(60, ge=5, le=600, description="AI request timeout (seconds)")

    @field_validator("model")
    @classmethod
    def strip_model(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("model cannot be empty")
        return stripped


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(LogFormat.KEY_VALUE, description="Log output format (json or key-value)")

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Advanced runtime settings for provider calls."""

    http_request_timeout: int = Field(
        15, ge=1, le=120, description="Request timeout for provider API calls (seconds)"
    )
    user_agent: str = Field(
        "JobMatchPipeline/1.0", min_length=1, description="User-Agent string for HTTP requests"
    )
    max_jobs_per_source: int = Field(
        100, ge=0, description="Maximum listings kept per provider (0 = unlimited)"
    )
    max_workers: Optional[int] = Field(
        None, ge=1, le=32, description="Thread pool size for adapter fan-out (default: one per source)"
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object for the job match pipeline."""

    sources: List[SourceConfig] = Field(
        default_factory=_default_sources, min_length=1, description="Providers in registration order"
    )
    scoring: ScoringConfig = Field(default_factory=ScoringConfig, description="AI scoring settings")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig, description="Advanced runtime settings")

    @model_validator(mode="after")
    def validate_sources(self):
        if not any(source.enabled for source in self.sources):
            raise ValueError("At least one source must be enabled. All sources have enabled=false.")

        seen = set()
        for source in self.sources:
            if source.type in seen:
                raise ValueError(f"Duplicate source: {source.type.value} appears multiple times")
            seen.add(source.type)

        return self

    def get_enabled_sources(self) -> List[SourceConfig]:
        """Enabled sources in registration order."""
        return [source for source in self.sources if source.enabled]
