"""Discovery request value object and its builder."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

from TestDiscovery.discovery.filters import (
    ClassNameFilter,
    DiscoveryFilter,
    EngineFilter,
    FilterMode,
    TagFilter,
)
from TestDiscovery.errors import ConfigurationError, PreconditionViolationError
from TestDiscovery.shared.config import REQUEST_FORMAT_VERSION
from TestDiscovery.shared.types import (
    ClassSelector,
    ClasspathRootSelector,
    DiscoverySelector,
    MethodSelector,
    PackageSelector,
    selector_kind,
)

S = TypeVar("S")
F = TypeVar("F")


@dataclass(frozen=True)
class DiscoveryRequest:
    """Aggregate root: what a test engine should discover and how to filter it.

    Selectors keep the order they were added in, duplicates included.
    Filters form a set.
    """

    selectors: tuple[DiscoverySelector, ...]
    filters: frozenset[DiscoveryFilter] = frozenset()

    def selectors_by_type(self, selector_type: type[S]) -> list[S]:
        return [s for s in self.selectors if isinstance(s, selector_type)]

    def filters_by_type(self, filter_type: type[F]) -> list[F]:
        return [f for f in self.filters if isinstance(f, filter_type)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": REQUEST_FORMAT_VERSION,
            "selectors": [_selector_to_dict(s) for s in self.selectors],
            "filters": sorted(
                (_filter_to_dict(f) for f in self.filters),
                key=lambda d: (d["kind"], json.dumps(d, sort_keys=True)),
            ),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DiscoveryRequest:
        if not isinstance(data, dict):
            msg = f"A request must be a JSON object, not {type(data).__name__}"
            raise ConfigurationError(msg)
        version = data.get("version", REQUEST_FORMAT_VERSION)
        if version != REQUEST_FORMAT_VERSION:
            msg = f"Unsupported request format version {version!r}"
            raise ConfigurationError(msg)
        return cls(
            selectors=tuple(
                _selector_from_dict(s) for s in _entries(data, "selectors")
            ),
            filters=frozenset(
                _filter_from_dict(f) for f in _entries(data, "filters")
            ),
        )

    def to_json(self, path: Path) -> None:
        path.write_text(json.dumps(self.to_dict(), indent=2))

    @classmethod
    def from_json(cls, path: Path) -> DiscoveryRequest:
        return cls.from_dict(json.loads(path.read_text()))


class DiscoveryRequestBuilder:
    """Accumulates selectors and filters, then freezes them into a request."""

    def __init__(self) -> None:
        self._selectors: list[DiscoverySelector] = []
        self._filters: list[DiscoveryFilter] = []

    def selectors(self, *selectors: DiscoverySelector) -> DiscoveryRequestBuilder:
        for selector in selectors:
            if selector is None:
                raise PreconditionViolationError("selectors must not contain None")
        self._selectors.extend(selectors)
        return self

    def filters(self, *filters: DiscoveryFilter) -> DiscoveryRequestBuilder:
        for discovery_filter in filters:
            if discovery_filter is None:
                raise PreconditionViolationError("filters must not contain None")
        self._filters.extend(filters)
        return self

    def build(self) -> DiscoveryRequest:
        return DiscoveryRequest(
            selectors=tuple(self._selectors),
            filters=frozenset(self._filters),
        )


def request() -> DiscoveryRequestBuilder:
    """Start a new request builder."""
    return DiscoveryRequestBuilder()


def _entries(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    entries = data.get(key, [])
    if not isinstance(entries, list):
        raise ConfigurationError(f"'{key}' must be a list")
    for entry in entries:
        if not isinstance(entry, dict):
            msg = f"Every entry of '{key}' must be an object, got {entry!r}"
            raise ConfigurationError(msg)
    return entries


def _selector_to_dict(selector: DiscoverySelector) -> dict[str, Any]:
    kind = selector_kind(selector)
    if isinstance(selector, ClassSelector):
        return {"kind": kind, "class_name": selector.class_name}
    if isinstance(selector, MethodSelector):
        return {
            "kind": kind,
            "class_name": selector.class_name,
            "method_name": selector.method_name,
        }
    if isinstance(selector, PackageSelector):
        return {"kind": kind, "package_name": selector.package_name}
    return {"kind": kind, "path": str(selector.path)}


def _selector_from_dict(data: dict[str, Any]) -> DiscoverySelector:
    kind = data.get("kind")
    try:
        if kind == "class":
            return ClassSelector(data["class_name"])
        if kind == "method":
            return MethodSelector(data["class_name"], data["method_name"])
        if kind == "package":
            return PackageSelector(data["package_name"])
        if kind == "classpath_root":
            return ClasspathRootSelector(Path(data["path"]))
    except KeyError as exc:
        msg = f"Selector of kind {kind!r} is missing field {exc}"
        raise ConfigurationError(msg) from exc
    except (TypeError, ValueError) as exc:
        msg = f"Malformed selector of kind {kind!r}: {exc}"
        raise ConfigurationError(msg) from exc
    raise ConfigurationError(f"Unknown selector kind {kind!r}")


def _filter_to_dict(discovery_filter: DiscoveryFilter) -> dict[str, Any]:
    if isinstance(discovery_filter, ClassNameFilter):
        return {"kind": discovery_filter.kind, "pattern": discovery_filter.pattern}
    if isinstance(discovery_filter, TagFilter):
        return {"kind": discovery_filter.kind, "tags": sorted(discovery_filter.tags)}
    return {
        "kind": discovery_filter.kind,
        "engine_ids": sorted(discovery_filter.engine_ids),
    }


def _filter_from_dict(data: dict[str, Any]) -> DiscoveryFilter:
    kind = data.get("kind")
    try:
        if kind == "include_classname":
            return ClassNameFilter(data["pattern"])
        if kind in ("include_tags", "exclude_tags"):
            return TagFilter(data["tags"], FilterMode(kind.split("_")[0]))
        if kind in ("include_engines", "exclude_engines"):
            return EngineFilter(data["engine_ids"], FilterMode(kind.split("_")[0]))
    except KeyError as exc:
        msg = f"Filter of kind {kind!r} is missing field {exc}"
        raise ConfigurationError(msg) from exc
    except (TypeError, ValueError) as exc:
        msg = f"Malformed filter of kind {kind!r}: {exc}"
        raise ConfigurationError(msg) from exc
    raise ConfigurationError(f"Unknown filter kind {kind!r}")
