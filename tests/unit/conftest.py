"""Shared fakes for the discovery unit tests."""
from __future__ import annotations

from collections import Counter
from pathlib import Path

import pytest


class Widget:
    def parse(self) -> None: ...


class FakeIntrospector:
    """Deterministic introspector backed by plain dictionaries.

    Every probe call is counted in ``calls`` so tests can assert on
    probe order and on probes that must never run.
    """

    def __init__(
        self,
        types: dict[str, type] | None = None,
        members: dict[str, str] | None = None,
        namespaces: set[str] | None = None,
        roots: tuple[Path, ...] = (),
    ) -> None:
        self.types = types or {}
        self.members = members or {}
        self.namespaces = namespaces or set()
        self.roots = roots
        self.calls: Counter[str] = Counter()
        self.probed: list[tuple[str, str]] = []

    def try_load_type(self, name: str) -> type | None:
        self.calls["type"] += 1
        self.probed.append(("type", name))
        return self.types.get(name)

    def try_load_member(self, qualified_name: str) -> tuple[type, str] | None:
        self.calls["member"] += 1
        self.probed.append(("member", qualified_name))
        class_name, _, member = qualified_name.partition("#")
        if self.members.get(class_name) == member and class_name in self.types:
            return self.types[class_name], member
        return None

    def is_namespace(self, name: str) -> bool:
        self.calls["namespace"] += 1
        self.probed.append(("namespace", name))
        return name in self.namespaces

    def list_classpath_root_directories(self) -> tuple[Path, ...]:
        self.calls["roots"] += 1
        return self.roots


@pytest.fixture()
def acme_introspector() -> FakeIntrospector:
    """Introspector knowing com.acme.Widget, its parse method and com.acme."""
    return FakeIntrospector(
        types={"com.acme.Widget": Widget},
        members={"com.acme.Widget": "parse"},
        namespaces={"com.acme"},
    )


@pytest.fixture()
def fake_introspector_factory():
    return FakeIntrospector
