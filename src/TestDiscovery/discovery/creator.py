"""Turns launcher options into a discovery request."""
from __future__ import annotations

import logging
from pathlib import Path

from TestDiscovery.discovery.filters import (
    exclude_engines,
    exclude_tags,
    include_classname_pattern,
    include_engines,
    include_tags,
)
from TestDiscovery.discovery.request import (
    DiscoveryRequest,
    DiscoveryRequestBuilder,
    request,
)
from TestDiscovery.discovery.resolver import SelectorResolver
from TestDiscovery.errors import ConfigurationError
from TestDiscovery.introspection.classpath_entries import (
    ClasspathEntriesParser,
    unique_paths,
)
from TestDiscovery.introspection.ports import ClasspathIntrospector
from TestDiscovery.shared.config import LauncherOptions
from TestDiscovery.shared.types import ClasspathRootSelector

logger = logging.getLogger(__name__)


class DiscoveryRequestCreator:
    """Builds a DiscoveryRequest from LauncherOptions.

    Either every test under a set of root directories is selected
    (``scan_classpath``) or each argument is resolved by name. Filters
    are attached the same way in both cases.
    """

    def __init__(
        self,
        introspector: ClasspathIntrospector,
        entries_parser: ClasspathEntriesParser | None = None,
    ) -> None:
        self._introspector = introspector
        self._entries_parser = entries_parser or ClasspathEntriesParser()
        self._resolver = SelectorResolver(introspector)

    def to_discovery_request(self, options: LauncherOptions) -> DiscoveryRequest:
        builder = self._create_request_builder(options)
        self._add_filters(builder, options)
        discovery_request = builder.build()
        logger.info(
            "[DISCOVERY] stage=build event=complete selectors=%d filters=%d",
            len(discovery_request.selectors),
            len(discovery_request.filters),
        )
        return discovery_request

    def _create_request_builder(
        self, options: LauncherOptions,
    ) -> DiscoveryRequestBuilder:
        if options.scan_classpath:
            return self._create_builder_for_all_tests(options)
        return self._create_name_based_builder(options)

    def _create_builder_for_all_tests(
        self, options: LauncherOptions,
    ) -> DiscoveryRequestBuilder:
        root_directories = self._determine_classpath_root_directories(options)
        logger.info(
            "[DISCOVERY] stage=build event=scan_classpath roots=%d",
            len(root_directories),
        )
        return request().selectors(
            *(ClasspathRootSelector(root) for root in root_directories)
        )

    def _determine_classpath_root_directories(
        self, options: LauncherOptions,
    ) -> tuple[Path, ...]:
        if options.arguments:
            # Explicit arguments narrow the scan to those paths.
            return unique_paths(Path(argument) for argument in options.arguments)

        root_directories = list(self._introspector.list_classpath_root_directories())
        if options.additional_classpath_entries:
            root_directories.extend(
                self._entries_parser.to_directories(
                    options.additional_classpath_entries,
                )
            )
        return unique_paths(root_directories)

    def _create_name_based_builder(
        self, options: LauncherOptions,
    ) -> DiscoveryRequestBuilder:
        if not options.arguments:
            raise ConfigurationError("No arguments were supplied to the launcher")
        return request().selectors(*self._resolver.select_names(options.arguments))

    @staticmethod
    def _add_filters(
        builder: DiscoveryRequestBuilder, options: LauncherOptions,
    ) -> None:
        if options.include_classname_pattern is not None:
            builder.filters(include_classname_pattern(options.include_classname_pattern))

        if options.included_tags:
            builder.filters(include_tags(options.included_tags))

        if options.excluded_tags:
            builder.filters(exclude_tags(options.excluded_tags))

        if options.included_engines:
            builder.filters(include_engines(options.included_engines))

        if options.excluded_engines:
            builder.filters(exclude_engines(options.excluded_engines))
