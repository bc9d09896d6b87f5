"""Factory functions for instantiating source adapters."""

import logging
from typing import Dict, List, Type

from jobmatch.config.environment import EnvironmentConfig
from jobmatch.config.models import AdvancedConfig, AppConfig, SourceConfig
from jobmatch.domain.models import JobSource

from .adzuna import AdzunaAdapter
from .base import BaseAdapter
from .exceptions import AdapterConfigurationError
from .jsearch import JSearchAdapter
from .remoteok import RemoteOKAdapter
from .themuse import TheMuseAdapter

logger = logging.getLogger(__name__)

ADAPTER_CLASSES: Dict[JobSource, Type[BaseAdapter]] = {
    JobSource.JSEARCH: JSearchAdapter,
    JobSource.ADZUNA: AdzunaAdapter,
    JobSource.THEMUSE: TheMuseAdapter,
    JobSource.REMOTEOK: RemoteOKAdapter,
}


def get_adapter(
    source_config: SourceConfig,
    advanced_config: AdvancedConfig,
    env_config: EnvironmentConfig,
) -> BaseAdapter:
    """Instantiate the adapter for one configured source.

    Credentials come from env_config; an adapter built without them skips
    itself at fetch time instead of failing here.

    Raises:
        AdapterConfigurationError: If the source type is unknown or settings are invalid

    Example:
        >>> adapter = get_adapter(SourceConfig(type="remoteok"), AdvancedConfig(), EnvironmentConfig())
        >>> jobs = adapter.fetch("python", "", remote_only=True)
    """
    source = JobSource(source_config.type)
    adapter_class = ADAPTER_CLASSES.get(source)

    if adapter_class is None:
        supported = ", ".join(sorted(s.value for s in ADAPTER_CLASSES))
        raise AdapterConfigurationError(f"Unknown source type: {source.value}. Supported types: {supported}")

    common = {
        "timeout": advanced_config.http_request_timeout,
        "user_agent": advanced_config.user_agent,
        "max_jobs": advanced_config.max_jobs_per_source,
    }

    if source is JobSource.JSEARCH:
        credentials = {"api_key": env_config.jsearch_api_key}
    elif source is JobSource.ADZUNA:
        credentials = {
            "app_id": env_config.adzuna_app_id,
            "app_key": env_config.adzuna_app_key,
            "country": env_config.adzuna_country,
        }
    else:
        credentials = {}

    logger.debug(
        "Creating adapter instance",
        extra={"event": "adapter.create", "source": source.value, "adapter_class": adapter_class.__name__},
    )

    return adapter_class(**credentials, **common)


def build_adapters(app_config: AppConfig, env_config: EnvironmentConfig) -> List[BaseAdapter]:
    """Build adapters for every enabled source, preserving registration order."""
    return [
        get_adapter(source_config, app_config.advanced, env_config)
        for source_config in app_config.get_enabled_sources()
    ]
