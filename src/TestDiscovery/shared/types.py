from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class ClassSelector:
    """Selects a single test class by its fully qualified name."""

    class_name: str

    @property
    def module_name(self) -> str:
        return self.class_name.rpartition(".")[0]


@dataclass(frozen=True)
class MethodSelector:
    """Selects one method of a test class, ``pkg.mod.Class#method``."""

    class_name: str
    method_name: str

    @property
    def qualified_name(self) -> str:
        return f"{self.class_name}#{self.method_name}"


@dataclass(frozen=True)
class PackageSelector:
    """Selects every test inside an importable package or module."""

    package_name: str


@dataclass(frozen=True)
class ClasspathRootSelector:
    """Selects every test reachable from a root directory."""

    path: Path


DiscoverySelector = Union[
    ClassSelector, MethodSelector, PackageSelector, ClasspathRootSelector
]

SELECTOR_KINDS: dict[str, type] = {
    "class": ClassSelector,
    "method": MethodSelector,
    "package": PackageSelector,
    "classpath_root": ClasspathRootSelector,
}


def selector_kind(selector: DiscoverySelector) -> str:
    for kind, selector_type in SELECTOR_KINDS.items():
        if isinstance(selector, selector_type):
            return kind
    msg = f"Unsupported selector type {type(selector).__name__}"
    raise TypeError(msg)
