"""Parsing of additional classpath entries and temporary import path setup."""
from __future__ import annotations

import contextlib
import logging
import os
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path

from TestDiscovery.errors import PreconditionViolationError

logger = logging.getLogger(__name__)


def unique_paths(paths: Iterable[Path]) -> tuple[Path, ...]:
    """Drop duplicates by resolved path, keeping the first occurrence."""
    seen: set[Path] = set()
    result: list[Path] = []
    for path in paths:
        key = path.resolve()
        if key not in seen:
            seen.add(key)
            result.append(path)
    return tuple(result)


class ClasspathEntriesParser:
    """Turns ``os.pathsep`` separated entry strings into paths."""

    def __init__(self, separator: str = os.pathsep) -> None:
        self._separator = separator

    def to_paths(self, entries: Iterable[str]) -> tuple[Path, ...]:
        """Split every entry and return all non-blank paths, in order."""
        if entries is None:
            raise PreconditionViolationError("entries must not be None")
        paths: list[Path] = []
        for entry in entries:
            for part in entry.split(self._separator):
                if part.strip():
                    paths.append(Path(part.strip()))
        return unique_paths(paths)

    def to_directories(self, entries: Iterable[str]) -> tuple[Path, ...]:
        """Like :meth:`to_paths`, but keep existing directories only."""
        directories = []
        for path in self.to_paths(entries):
            if path.is_dir():
                directories.append(path)
            else:
                logger.debug(
                    "[DISCOVERY] stage=build event=skip_entry "
                    "path=%s reason=not_a_directory",
                    path,
                )
        return tuple(directories)


@contextlib.contextmanager
def extended_import_path(paths: Iterable[Path]) -> Iterator[None]:
    """Prepend ``paths`` to ``sys.path`` for the duration of the block."""
    added = [str(p) for p in paths]
    saved = list(sys.path)
    sys.path[:0] = added
    try:
        yield
    finally:
        sys.path[:] = saved
