"""importlib-backed implementation of the ClasspathIntrospector port."""
from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
import sys
from collections.abc import Iterable
from pathlib import Path

from TestDiscovery.errors import ModuleImportError
from TestDiscovery.introspection.classpath_entries import unique_paths

logger = logging.getLogger(__name__)

MEMBER_SEPARATOR = "#"


def _is_dotted_identifier(name: str) -> bool:
    parts = name.split(".")
    return all(part.isidentifier() for part in parts)


class ImportlibIntrospector:
    """Answers type/member/namespace questions by importing modules.

    The root directories are a snapshot of the import path taken when
    the introspector is created, so repeated builds see the same roots.
    A missing module counts as absent; a module that raises anything else
    while importing surfaces as :class:`ModuleImportError`.
    """

    def __init__(self, search_path: Iterable[str] | None = None) -> None:
        self._search_path = tuple(sys.path if search_path is None else search_path)

    def try_load_type(self, name: str) -> type | None:
        if not _is_dotted_identifier(name):
            return None
        parts = name.split(".")
        # Longest importable module prefix wins, the rest is an attribute path.
        for split in range(len(parts) - 1, 0, -1):
            module = self._import(".".join(parts[:split]))
            if module is None:
                continue
            obj: object = module
            for attr in parts[split:]:
                obj = getattr(obj, attr, None)
                if obj is None:
                    break
            if inspect.isclass(obj):
                return obj
        return None

    def try_load_member(self, qualified_name: str) -> tuple[type, str] | None:
        class_name, sep, member_name = qualified_name.partition(MEMBER_SEPARATOR)
        if not sep or not member_name.isidentifier():
            return None
        cls = self.try_load_type(class_name)
        if cls is None:
            return None
        # Inherited methods count; the first definition along the MRO decides.
        for klass in inspect.getmro(cls):
            if member_name in vars(klass):
                if callable(getattr(cls, member_name, None)):
                    return cls, member_name
                return None
        return None

    def is_namespace(self, name: str) -> bool:
        if not _is_dotted_identifier(name):
            return False
        try:
            return importlib.util.find_spec(name) is not None
        except (ImportError, ValueError) as exc:
            logger.debug(
                "[DISCOVERY] stage=resolve event=probe_miss probe=namespace "
                "name=%s error=%s",
                name,
                exc,
            )
            return False
        except Exception as exc:
            raise ModuleImportError(name, exc) from exc

    def list_classpath_root_directories(self) -> tuple[Path, ...]:
        directories = []
        for entry in self._search_path:
            path = Path(entry) if entry else Path.cwd()
            if path.is_dir():
                directories.append(path)
        return unique_paths(directories)

    def _import(self, module_name: str) -> object | None:
        try:
            return importlib.import_module(module_name)
        except ImportError as exc:
            logger.debug(
                "[DISCOVERY] stage=resolve event=probe_miss probe=import "
                "module=%s error=%s",
                module_name,
                exc,
            )
            return None
        except Exception as exc:
            raise ModuleImportError(module_name, exc) from exc
