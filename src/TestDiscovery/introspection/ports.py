"""Introspection protocol -- the port for classpath/import adapters."""
from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class ClasspathIntrospector(Protocol):
    """Protocol for answering "what does this name denote?".

    Decouples name resolution from importlib and ``sys.path`` so the
    resolver can be driven by deterministic fakes. No method raises for
    a name that simply does not exist; absence is reported as ``None``
    or ``False``.
    """

    def try_load_type(self, name: str) -> type | None: ...

    def try_load_member(self, qualified_name: str) -> tuple[type, str] | None: ...

    def is_namespace(self, name: str) -> bool: ...

    def list_classpath_root_directories(self) -> tuple[Path, ...]: ...
