"""Job source adapters.

One adapter per external provider, each converting that provider's payload
into CanonicalJob records:
- JSearch: jsearch.JSearchAdapter
- Adzuna: adzuna.AdzunaAdapter
- The Muse: themuse.TheMuseAdapter
- RemoteOK: remoteok.RemoteOKAdapter

Build the configured set with the factory:
    from jobmatch.adapters import build_adapters
    adapters = build_adapters(app_config, env_config)

Every adapter's fetch() and fetch_outcome() are safe to call: provider
failures never raise.
"""

from .adzuna import AdzunaAdapter
from .base import BaseAdapter
from .exceptions import (
    AdapterConfigurationError,
    AdapterCredentialsError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)
from .factory import ADAPTER_CLASSES, build_adapters, get_adapter
from .jsearch import JSearchAdapter
from .models import FetchOutcome
from .remoteok import RemoteOKAdapter
from .themuse import TheMuseAdapter

__all__ = [
    # Base, result type and factory
    "BaseAdapter",
    "FetchOutcome",
    "get_adapter",
    "build_adapters",
    "ADAPTER_CLASSES",
    # Adapters
    "JSearchAdapter",
    "AdzunaAdapter",
    "TheMuseAdapter",
    "RemoteOKAdapter",
    # Exceptions
    "AdapterError",
    "AdapterHTTPError",
    "AdapterTimeoutError",
    "AdapterResponseError",
    "AdapterConfigurationError",
    "AdapterCredentialsError",
]
