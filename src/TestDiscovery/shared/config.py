from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from TestDiscovery.errors import PreconditionViolationError

ENGINE_ID = "pytest"
REQUEST_FORMAT_VERSION = 1


def _as_tuple(field_name: str, values: Iterable[str] | None) -> tuple[str, ...]:
    if values is None:
        raise PreconditionViolationError(f"{field_name} must not be None")
    if isinstance(values, str):
        return (values,)
    return tuple(values)


def _as_frozenset(
    field_name: str, values: Iterable[str] | None,
) -> frozenset[str]:
    return frozenset(_as_tuple(field_name, values))


@dataclass(frozen=True)
class LauncherOptions:
    """Parsed launcher options: what to select and how to filter it.

    ``arguments`` keeps its order. Collections may be passed as any
    iterable and are frozen on construction; ``None`` is rejected.
    """

    arguments: tuple[str, ...] = ()
    scan_classpath: bool = False
    additional_classpath_entries: tuple[str, ...] = ()
    include_classname_pattern: str | None = None
    included_tags: frozenset[str] = frozenset()
    excluded_tags: frozenset[str] = frozenset()
    included_engines: frozenset[str] = frozenset()
    excluded_engines: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        for name in ("arguments", "additional_classpath_entries"):
            object.__setattr__(self, name, _as_tuple(name, getattr(self, name)))
        for name in (
            "included_tags",
            "excluded_tags",
            "included_engines",
            "excluded_engines",
        ):
            object.__setattr__(
                self, name, _as_frozenset(name, getattr(self, name)),
            )
