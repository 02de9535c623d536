"""Translation of a discovery request into pytest command line arguments."""
from __future__ import annotations

import importlib.util
import inspect
from pathlib import Path

from TestDiscovery.discovery.request import DiscoveryRequest
from TestDiscovery.errors import EngineExecutionError
from TestDiscovery.introspection.importlib_adapter import ImportlibIntrospector
from TestDiscovery.introspection.ports import ClasspathIntrospector
from TestDiscovery.shared.types import (
    ClassSelector,
    ClasspathRootSelector,
    DiscoverySelector,
    MethodSelector,
    PackageSelector,
)


def to_pytest_args(
    discovery_request: DiscoveryRequest,
    introspector: ClasspathIntrospector | None = None,
) -> list[str]:
    """Map every selector to a pytest path or node id, keeping order."""
    introspector = introspector or ImportlibIntrospector()
    return [
        node_id
        for selector in discovery_request.selectors
        for node_id in selector_to_node_ids(selector, introspector)
    ]


def selector_to_node_ids(
    selector: DiscoverySelector, introspector: ClasspathIntrospector,
) -> list[str]:
    """A namespace package spread over several directories yields one path each."""
    if isinstance(selector, ClasspathRootSelector):
        return [str(selector.path)]
    if isinstance(selector, PackageSelector):
        return [str(p) for p in _package_locations(selector.package_name)]
    if isinstance(selector, ClassSelector):
        return ["::".join(_class_node_parts(selector.class_name, introspector))]
    if isinstance(selector, MethodSelector):
        parts = _class_node_parts(selector.class_name, introspector)
        return ["::".join([*parts, selector.method_name])]
    msg = f"Unsupported selector {selector!r}"
    raise EngineExecutionError(msg)


def _package_locations(package_name: str) -> list[Path]:
    try:
        spec = importlib.util.find_spec(package_name)
    except (ImportError, ValueError) as exc:
        msg = f"Cannot locate package {package_name!r}: {exc}"
        raise EngineExecutionError(msg) from exc
    if spec is None:
        raise EngineExecutionError(f"Cannot locate package {package_name!r}")
    if spec.submodule_search_locations:
        return [Path(location) for location in spec.submodule_search_locations]
    if spec.origin and spec.has_location:
        return [Path(spec.origin)]
    raise EngineExecutionError(f"Package {package_name!r} has no file location")


def _class_node_parts(
    class_name: str, introspector: ClasspathIntrospector,
) -> list[str]:
    cls = introspector.try_load_type(class_name)
    if cls is None:
        raise EngineExecutionError(f"Cannot load class {class_name!r}")
    try:
        source_file = inspect.getsourcefile(cls)
    except TypeError as exc:
        msg = f"Class {class_name!r} is not defined in a source file"
        raise EngineExecutionError(msg) from exc
    if source_file is None:
        raise EngineExecutionError(f"No source file for class {class_name!r}")
    return [source_file, *cls.__qualname__.split(".")]
