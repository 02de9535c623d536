"""Discovery bounded context: name resolution and request assembly."""

from TestDiscovery.discovery.creator import DiscoveryRequestCreator
from TestDiscovery.discovery.filters import (
    ClassNameFilter,
    EngineFilter,
    FilterMode,
    TagFilter,
)
from TestDiscovery.discovery.request import (
    DiscoveryRequest,
    DiscoveryRequestBuilder,
    request,
)
from TestDiscovery.discovery.resolver import SelectorResolver

__all__ = [
    "ClassNameFilter",
    "DiscoveryRequest",
    "DiscoveryRequestBuilder",
    "DiscoveryRequestCreator",
    "EngineFilter",
    "FilterMode",
    "SelectorResolver",
    "TagFilter",
    "request",
]
