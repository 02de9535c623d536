"""Include/exclude filters attached to a discovery request."""
from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Union

from TestDiscovery.errors import PreconditionViolationError


class FilterMode(str, Enum):
    INCLUDE = "include"
    EXCLUDE = "exclude"


def _non_blank_set(label: str, values: Iterable[str]) -> frozenset[str]:
    if isinstance(values, str):
        values = (values,)
    result = frozenset(values)
    if not result:
        raise PreconditionViolationError(f"{label} must not be empty")
    for value in result:
        if not isinstance(value, str) or not value.strip():
            raise PreconditionViolationError(
                f"{label} must not contain blank elements"
            )
    return frozenset(v.strip() for v in result)


@dataclass(frozen=True)
class ClassNameFilter:
    """Keeps tests whose fully qualified class name matches ``pattern``.

    The whole name must match, as with ``re.fullmatch``.
    """

    pattern: str

    def __post_init__(self) -> None:
        if not isinstance(self.pattern, str) or not self.pattern.strip():
            raise PreconditionViolationError("pattern must not be blank")
        try:
            re.compile(self.pattern)
        except re.error as exc:
            raise PreconditionViolationError(
                f"Invalid class name pattern {self.pattern!r}: {exc}"
            ) from exc

    @property
    def kind(self) -> str:
        return "include_classname"

    def matches(self, class_name: str) -> bool:
        return re.fullmatch(self.pattern, class_name) is not None


@dataclass(frozen=True)
class TagFilter:
    """Includes or excludes tests carrying any of ``tags``."""

    tags: frozenset[str]
    mode: FilterMode = FilterMode.INCLUDE

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", _non_blank_set("tags", self.tags))
        object.__setattr__(self, "mode", FilterMode(self.mode))

    @property
    def kind(self) -> str:
        return f"{self.mode.value}_tags"

    def matches(self, tags: Iterable[str]) -> bool:
        hit = bool(self.tags & frozenset(tags))
        return hit if self.mode is FilterMode.INCLUDE else not hit


@dataclass(frozen=True)
class EngineFilter:
    """Includes or excludes whole test engines by identifier."""

    engine_ids: frozenset[str]
    mode: FilterMode = FilterMode.INCLUDE

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "engine_ids", _non_blank_set("engine_ids", self.engine_ids),
        )
        object.__setattr__(self, "mode", FilterMode(self.mode))

    @property
    def kind(self) -> str:
        return f"{self.mode.value}_engines"

    def matches(self, engine_id: str) -> bool:
        hit = engine_id in self.engine_ids
        return hit if self.mode is FilterMode.INCLUDE else not hit


DiscoveryFilter = Union[ClassNameFilter, TagFilter, EngineFilter]


def include_classname_pattern(pattern: str) -> ClassNameFilter:
    return ClassNameFilter(pattern)


def include_tags(tags: Iterable[str]) -> TagFilter:
    return TagFilter(tags, FilterMode.INCLUDE)


def exclude_tags(tags: Iterable[str]) -> TagFilter:
    return TagFilter(tags, FilterMode.EXCLUDE)


def include_engines(engine_ids: Iterable[str]) -> EngineFilter:
    return EngineFilter(engine_ids, FilterMode.INCLUDE)


def exclude_engines(engine_ids: Iterable[str]) -> EngineFilter:
    return EngineFilter(engine_ids, FilterMode.EXCLUDE)
