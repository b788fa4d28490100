"""
Upstream package for the Pokédex service.

Contains the HTTP fetcher and the catalog client built on top of the
cache-aside resolver. These adapters encapsulate:

- Base URLs and path segment validation
- Mapping of transport and decode failures to shared errors

No retries happen here; failures surface to the caller immediately.
"""

from .fetcher import HTTPFetcher, build_http_client
from .catalog_client import CatalogClient
from .record import Record

__all__ = [
    "HTTPFetcher",
    "build_http_client",
    "CatalogClient",
    "Record",
]
