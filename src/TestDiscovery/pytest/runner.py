"""Programmatic pytest execution of a discovery request."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from TestDiscovery.discovery.request import DiscoveryRequest
from TestDiscovery.errors import EngineExecutionError
from TestDiscovery.introspection.ports import ClasspathIntrospector
from TestDiscovery.pytest.plugin import RequestFilterPlugin
from TestDiscovery.pytest.translate import to_pytest_args

logger = logging.getLogger(__name__)


def build_pytest_args(
    discovery_request: DiscoveryRequest,
    output_dir: str | Path | None = None,
    extra_args: list[str] | None = None,
    introspector: ClasspathIntrospector | None = None,
) -> list[str]:
    """Node ids for the selectors, then reporting options, then passthrough."""
    if not discovery_request.selectors:
        raise EngineExecutionError("The discovery request selects nothing")
    args = to_pytest_args(discovery_request, introspector)

    if output_dir is not None:
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)
        args.append(f"--junitxml={output_path / 'results.xml'}")
        if _has_pytest_html():
            args.append(f"--html={output_path / 'report.html'}")

    if extra_args:
        args.extend(extra_args)
    return args


def execute_request(
    discovery_request: DiscoveryRequest,
    output_dir: str | Path | None = "./results",
    extra_args: list[str] | None = None,
    introspector: ClasspathIntrospector | None = None,
) -> int:
    """Run pytest for the request and return its exit code."""
    args = build_pytest_args(
        discovery_request,
        output_dir=output_dir,
        extra_args=extra_args,
        introspector=introspector,
    )
    logger.info(
        "[DISCOVERY] stage=execute framework=pytest args=%s",
        " ".join(args),
    )
    return int(pytest.main(args, plugins=[RequestFilterPlugin(discovery_request)]))


def _has_pytest_html() -> bool:
    """Check if pytest-html is available."""
    try:
        import pytest_html  # noqa: F401
        return True
    except ImportError:
        return False
