"""Tests for the importlib-backed introspector."""
from __future__ import annotations

from pathlib import Path

import pytest

from TestDiscovery.errors import ModuleImportError
from TestDiscovery.introspection.importlib_adapter import ImportlibIntrospector
from TestDiscovery.introspection.ports import ClasspathIntrospector

SAMPLE_PROJECT = (
    Path(__file__).resolve().parent.parent.parent / "fixtures" / "sample_project"
)


@pytest.fixture()
def introspector(monkeypatch: pytest.MonkeyPatch) -> ImportlibIntrospector:
    monkeypatch.syspath_prepend(str(SAMPLE_PROJECT))
    return ImportlibIntrospector()


class TestProtocol:
    def test_satisfies_port(self) -> None:
        assert isinstance(ImportlibIntrospector(), ClasspathIntrospector)


class TestTryLoadType:
    def test_module_level_class(self, introspector) -> None:
        cls = introspector.try_load_type("calc_pkg.core.Calculator")
        assert cls is not None
        assert cls.__name__ == "Calculator"

    def test_reexported_class(self, introspector) -> None:
        cls = introspector.try_load_type("calc_pkg.Calculator")
        assert cls is introspector.try_load_type("calc_pkg.core.Calculator")

    def test_nested_class(self, introspector) -> None:
        cls = introspector.try_load_type("calc_pkg.core.Calculator.History")
        assert cls is not None
        assert cls.__qualname__ == "Calculator.History"

    @pytest.mark.parametrize(
        "name",
        [
            "calc_pkg.core",
            "calc_pkg.core.Calculator.add",
            "calc_pkg.core.Missing",
            "no_such_module.Thing",
            "calc_pkg.core.Calculator#add",
            "Calculator",
            "calc_pkg..core",
        ],
    )
    def test_non_types_report_absence(self, introspector, name: str) -> None:
        assert introspector.try_load_type(name) is None


class TestTryLoadMember:
    def test_declared_method(self, introspector) -> None:
        found = introspector.try_load_member("calc_pkg.core.Calculator#add")
        assert found is not None
        cls, member = found
        assert cls.__name__ == "Calculator"
        assert member == "add"

    def test_inherited_method(self, introspector) -> None:
        found = introspector.try_load_member("calc_pkg.core.Calculator#reset")
        assert found is not None
        assert found[0].__name__ == "Calculator"

    @pytest.mark.parametrize(
        "name",
        [
            "calc_pkg.core.Calculator",
            "calc_pkg.core.Calculator#",
            "calc_pkg.core.Calculator#missing",
            "calc_pkg.core.Calculator#is_zero",
            "calc_pkg.core.Calculator#precision",
            "calc_pkg.core.Calculator#add#again",
            "calc_pkg.core.Nope#add",
        ],
    )
    def test_non_methods_report_absence(self, introspector, name: str) -> None:
        assert introspector.try_load_member(name) is None


class TestIsNamespace:
    def test_package_and_module(self, introspector) -> None:
        assert introspector.is_namespace("calc_pkg")
        assert introspector.is_namespace("calc_pkg.core")
        assert introspector.is_namespace("calc_tests.test_calculator")

    @pytest.mark.parametrize(
        "name", ["calc_pkg.nothing", "no_such_pkg.sub", "calc pkg", "calc_pkg#x"],
    )
    def test_unknown_names(self, introspector, name: str) -> None:
        assert not introspector.is_namespace(name)


class TestClasspathRoots:
    def test_only_existing_directories_kept(self, tmp_path: Path) -> None:
        existing = tmp_path / "lib"
        existing.mkdir()
        archive = tmp_path / "lib.zip"
        archive.write_bytes(b"")
        introspector = ImportlibIntrospector(
            [str(existing), str(archive), str(tmp_path / "missing"), str(existing)],
        )
        assert introspector.list_classpath_root_directories() == (existing,)

    def test_empty_entry_means_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        introspector = ImportlibIntrospector([""])
        roots = introspector.list_classpath_root_directories()
        assert [root.resolve() for root in roots] == [tmp_path.resolve()]

    def test_search_path_is_a_snapshot(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        introspector = ImportlibIntrospector()
        before = introspector.list_classpath_root_directories()
        monkeypatch.syspath_prepend(str(tmp_path))
        assert introspector.list_classpath_root_directories() == before


def _write_exploding_package(root: Path, name: str, *, in_init: bool = False) -> None:
    package = root / name
    package.mkdir()
    boom = "raise RuntimeError('boom at import')\n"
    (package / "__init__.py").write_text(boom if in_init else "")
    (package / "mod.py").write_text(boom)


class TestFailingImports:
    def test_module_raising_at_import_is_reported(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        _write_exploding_package(tmp_path, "exploding_type_pkg")
        monkeypatch.syspath_prepend(str(tmp_path))

        with pytest.raises(ModuleImportError, match="boom at import") as info:
            ImportlibIntrospector().try_load_type("exploding_type_pkg.mod.TestX")

        assert info.value.module_name == "exploding_type_pkg.mod"
        assert isinstance(info.value.__cause__, RuntimeError)

    def test_member_lookup_reports_the_same_failure(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        _write_exploding_package(tmp_path, "exploding_member_pkg")
        monkeypatch.syspath_prepend(str(tmp_path))

        with pytest.raises(ModuleImportError):
            ImportlibIntrospector().try_load_member(
                "exploding_member_pkg.mod.TestX#test_it",
            )

    def test_parent_package_raising_during_namespace_lookup(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        _write_exploding_package(tmp_path, "exploding_ns_pkg", in_init=True)
        monkeypatch.syspath_prepend(str(tmp_path))

        with pytest.raises(ModuleImportError, match="exploding_ns_pkg"):
            ImportlibIntrospector().is_namespace("exploding_ns_pkg.mod")

    def test_missing_module_still_means_absent(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.syspath_prepend(str(tmp_path))
        introspector = ImportlibIntrospector()
        assert introspector.try_load_type("absent_pkg_for_import.mod.TestX") is None
        assert introspector.is_namespace("absent_pkg_for_import.mod") is False
