"""Resolution of free-text names into discovery selectors.

A name may denote a class (``pkg.mod.Class``), a method of a class
(``pkg.mod.Class#method``), or a package/module (``pkg.mod``). The
probes run in that order and the first match wins, so a string that
is both a class and a package resolves to the class.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from TestDiscovery.errors import NameResolutionError, PreconditionViolationError
from TestDiscovery.introspection.ports import ClasspathIntrospector
from TestDiscovery.shared.types import (
    ClassSelector,
    DiscoverySelector,
    MethodSelector,
    PackageSelector,
)

logger = logging.getLogger(__name__)

Probe = Callable[[str], "DiscoverySelector | None"]


class SelectorResolver:
    """Turns names into selectors using an introspector."""

    def __init__(self, introspector: ClasspathIntrospector) -> None:
        self._introspector = introspector
        self._probes: tuple[tuple[str, Probe], ...] = (
            ("class", self._probe_class),
            ("method", self._probe_method),
            ("package", self._probe_package),
        )

    def resolve(self, name: str) -> DiscoverySelector:
        """Return the selector for ``name``.

        Raises PreconditionViolationError for a blank name (no probe is
        consulted) and NameResolutionError when every probe misses.
        """
        if not isinstance(name, str) or not name.strip():
            raise PreconditionViolationError("name must not be None or blank")

        for kind, probe in self._probes:
            selector = probe(name)
            if selector is not None:
                logger.debug(
                    "[DISCOVERY] stage=resolve event=resolved name=%s kind=%s",
                    name,
                    kind,
                )
                return selector

        logger.debug("[DISCOVERY] stage=resolve event=unresolved name=%s", name)
        raise NameResolutionError(name)

    def select_names(self, names: Sequence[str]) -> list[DiscoverySelector]:
        """Resolve every name in order; the first failure propagates."""
        if names is None:
            raise PreconditionViolationError("names collection must not be None")
        return [self.resolve(name) for name in names]

    def _probe_class(self, name: str) -> ClassSelector | None:
        if self._introspector.try_load_type(name) is None:
            return None
        return ClassSelector(name)

    def _probe_method(self, name: str) -> MethodSelector | None:
        found = self._introspector.try_load_member(name)
        if found is None:
            return None
        _, method_name = found
        class_name = name.partition("#")[0]
        return MethodSelector(class_name, method_name)

    def _probe_package(self, name: str) -> PackageSelector | None:
        if not self._introspector.is_namespace(name):
            return None
        return PackageSelector(name)
