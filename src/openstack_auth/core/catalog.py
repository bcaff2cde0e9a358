"""
Service catalog returned alongside an Identity v3 token.
"""

from typing import Iterable, Iterator, List, Optional, Tuple

from .constants import DEFAULT_INTERFACE
from .schema import CatalogEntrySchema
from ..logger import get_logger

logger = get_logger('core.catalog')


class ServiceCatalog:
    """Immutable collection of catalog entries with endpoint lookup."""

    __slots__ = ('_entries',)

    def __init__(self, entries: Iterable[CatalogEntrySchema] = ()):
        self._entries: Tuple[CatalogEntrySchema, ...] = tuple(entries)

    def __iter__(self) -> Iterator[CatalogEntrySchema]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ServiceCatalog):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(tuple(self.service_types()))

    def __repr__(self) -> str:
        return f"ServiceCatalog(services={self.service_types()})"

    def service_types(self) -> List[str]:
        return [entry.type for entry in self._entries]

    def find_entry(self, service: str) -> Optional[CatalogEntrySchema]:
        """Find a catalog entry by service type, falling back to service name."""
        for entry in self._entries:
            if entry.type == service:
                return entry
        for entry in self._entries:
            if entry.name == service:
                return entry
        return None

    def find_endpoint(
        self,
        service: str,
        interface: str = DEFAULT_INTERFACE,
        region: Optional[str] = None,
    ) -> Optional[str]:
        """
        Resolve an endpoint URL.

        Args:
            service: Service type (e.g., 'compute') or service name (e.g., 'nova')
            interface: Endpoint interface ('public', 'internal', 'admin')
            region: Optional region name or id; when None any region matches

        Returns:
            Endpoint URL, or None if no endpoint matches
        """
        entry = self.find_entry(service)
        if entry is None:
            logger.debug(f"Service '{service}' not present in catalog")
            return None

        for endpoint in entry.endpoints:
            if endpoint.interface != interface:
                continue
            if region is not None and region not in (endpoint.region, endpoint.region_id):
                continue
            logger.debug(f"Resolved {interface} endpoint for '{service}': {endpoint.url}")
            return endpoint.url

        logger.debug(f"No {interface} endpoint for '{service}' (region={region})")
        return None


EMPTY_CATALOG = ServiceCatalog()
