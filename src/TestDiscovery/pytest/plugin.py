"""pytest plugin applying a discovery request's filters during collection.

Not registered as an entry point; the runner passes an instance to
``pytest.main(plugins=[...])`` so it is only active for that session.
"""
from __future__ import annotations

import logging

import pytest

from TestDiscovery.discovery.filters import (
    ClassNameFilter,
    EngineFilter,
    TagFilter,
)
from TestDiscovery.discovery.request import DiscoveryRequest
from TestDiscovery.shared.config import ENGINE_ID

logger = logging.getLogger("TestDiscovery.pytest")


def item_class_name(item: pytest.Item) -> str:
    """Fully qualified class name of a test item.

    Module level test functions fall back to the module name.
    """
    module = getattr(item, "module", None)
    module_name = module.__name__ if module is not None else ""
    cls = getattr(item, "cls", None)
    if cls is None:
        return module_name
    return f"{module_name}.{cls.__qualname__}" if module_name else cls.__qualname__


def item_tags(item: pytest.Item) -> frozenset[str]:
    """Marker names (own and inherited) used as tags."""
    return frozenset(
        mark.name
        for mark in item.iter_markers()
        if mark.name not in ("parametrize", "usefixtures")
    )


class RequestFilterPlugin:
    """Deselects collected items rejected by the request's filters."""

    def __init__(self, discovery_request: DiscoveryRequest) -> None:
        self._request = discovery_request

    def engine_enabled(self) -> bool:
        return all(
            engine_filter.matches(ENGINE_ID)
            for engine_filter in self._request.filters_by_type(EngineFilter)
        )

    def accepts(self, item: pytest.Item) -> bool:
        class_name = item_class_name(item)
        for name_filter in self._request.filters_by_type(ClassNameFilter):
            if not name_filter.matches(class_name):
                return False
        tags = item_tags(item)
        return all(
            tag_filter.matches(tags)
            for tag_filter in self._request.filters_by_type(TagFilter)
        )

    @pytest.hookimpl(trylast=True)
    def pytest_collection_modifyitems(
        self, config: pytest.Config, items: list[pytest.Item],
    ) -> None:
        if not self._request.filters:
            return

        if self.engine_enabled():
            kept = [item for item in items if self.accepts(item)]
        else:
            logger.info(
                "[DISCOVERY] stage=execute event=engine_filtered engine=%s",
                ENGINE_ID,
            )
            kept = []

        kept_ids = {id(item) for item in kept}
        deselected = [item for item in items if id(item) not in kept_ids]
        if deselected:
            config.hook.pytest_deselected(items=deselected)
        items[:] = kept

        logger.info(
            "[DISCOVERY] stage=execute event=filtered kept=%d deselected=%d",
            len(kept),
            len(deselected),
        )
