"""CLI entry points for building and running discovery requests."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from TestDiscovery.errors import DiscoveryError
from TestDiscovery.shared.config import LauncherOptions

if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from TestDiscovery.discovery.request import DiscoveryRequest

logger = logging.getLogger("TestDiscovery")


def _setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
    )


def _split_pytest_passthrough(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split argv at the first ``--``; the tail goes to pytest untouched."""
    if "--" not in argv:
        return list(argv), []
    index = argv.index("--")
    return list(argv[:index]), list(argv[index + 1:])


def _add_selection_arguments(p: argparse.ArgumentParser) -> None:
    default_pattern = os.environ.get("DISCOVERY_INCLUDE_CLASSNAME") or None

    p.add_argument(
        "names", nargs="*",
        help="Packages, modules, classes or Class#method names to select",
    )
    p.add_argument(
        "--scan-classpath", action="store_true",
        help="Select every test under the import path roots "
        "(or under the given names, taken as paths)",
    )
    p.add_argument(
        "--classpath", "-cp", action="append", default=[],
        help="Additional import path entries, os.pathsep separated",
    )
    p.add_argument(
        "--include-classname", "-n", default=default_pattern,
        help="Regex the fully qualified class name must match",
    )
    p.add_argument(
        "--include-tag", "-t", action="append", default=[],
        help="Only run tests carrying this marker",
    )
    p.add_argument(
        "--exclude-tag", "-T", action="append", default=[],
        help="Skip tests carrying this marker",
    )
    p.add_argument(
        "--include-engine", "-e", action="append", default=[],
        help="Only run tests from this engine",
    )
    p.add_argument(
        "--exclude-engine", "-E", action="append", default=[],
        help="Skip tests from this engine",
    )


def _add_plan_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("plan", help="Build a discovery request as JSON")
    _add_selection_arguments(p)
    p.add_argument("--output", type=Path, help="Write the request to this file")
    p.set_defaults(func=_cmd_plan)


def _add_run_parser(subparsers: argparse._SubParsersAction) -> None:
    default_output = os.environ.get("DISCOVERY_OUTPUT_DIR", "./results")

    p = subparsers.add_parser("run", help="Build a request and run it with pytest")
    _add_selection_arguments(p)
    p.add_argument(
        "--output-dir", type=Path, default=Path(default_output),
        help="Directory for results.xml",
    )
    p.set_defaults(func=_cmd_run)


def _add_execute_parser(subparsers: argparse._SubParsersAction) -> None:
    default_output = os.environ.get("DISCOVERY_OUTPUT_DIR", "./results")

    p = subparsers.add_parser("execute", help="Run a request saved by 'plan'")
    p.add_argument("--request", required=True, type=Path, help="Request JSON file")
    p.add_argument(
        "--classpath", "-cp", action="append", default=[],
        help="Additional import path entries, os.pathsep separated",
    )
    p.add_argument(
        "--output-dir", type=Path, default=Path(default_output),
        help="Directory for results.xml",
    )
    p.set_defaults(func=_cmd_execute)


def options_from_args(args: argparse.Namespace) -> LauncherOptions:
    """Convert parsed arguments into launcher options."""
    return LauncherOptions(
        arguments=args.names,
        scan_classpath=args.scan_classpath,
        additional_classpath_entries=args.classpath,
        include_classname_pattern=args.include_classname,
        included_tags=args.include_tag,
        excluded_tags=args.exclude_tag,
        included_engines=args.include_engine,
        excluded_engines=args.exclude_engine,
    )


def _build_request(args: argparse.Namespace) -> DiscoveryRequest:
    from TestDiscovery.discovery.creator import DiscoveryRequestCreator
    from TestDiscovery.introspection.importlib_adapter import ImportlibIntrospector

    creator = DiscoveryRequestCreator(ImportlibIntrospector())
    return creator.to_discovery_request(options_from_args(args))


def _import_path(args: argparse.Namespace) -> AbstractContextManager[None]:
    from TestDiscovery.introspection.classpath_entries import (
        ClasspathEntriesParser,
        extended_import_path,
    )

    return extended_import_path(ClasspathEntriesParser().to_paths(args.classpath))


def _cmd_plan(args: argparse.Namespace) -> int:
    try:
        with _import_path(args):
            discovery_request = _build_request(args)
    except DiscoveryError as exc:
        logger.error("[DISCOVERY] Request creation failed: %s", exc)
        return 2

    if args.output:
        try:
            discovery_request.to_json(args.output)
        except OSError as exc:
            logger.error("[DISCOVERY] Writing the request failed: %s", exc)
            return 2
        logger.info("[DISCOVERY] Request written to %s", args.output)
    else:
        sys.stdout.write(json.dumps(discovery_request.to_dict(), indent=2) + "\n")
    return 0


def _cmd_run(args: argparse.Namespace) -> int:
    from TestDiscovery.pytest.runner import execute_request

    try:
        with _import_path(args):
            discovery_request = _build_request(args)
            return execute_request(
                discovery_request,
                output_dir=args.output_dir,
                extra_args=getattr(args, "pytest_passthrough", None),
            )
    except DiscoveryError as exc:
        logger.error("[DISCOVERY] Run failed: %s", exc)
        return 2


def _cmd_execute(args: argparse.Namespace) -> int:
    from TestDiscovery.discovery.request import DiscoveryRequest
    from TestDiscovery.pytest.runner import execute_request

    try:
        discovery_request = DiscoveryRequest.from_json(args.request)
        with _import_path(args):
            return execute_request(
                discovery_request,
                output_dir=args.output_dir,
                extra_args=getattr(args, "pytest_passthrough", None),
            )
    except (DiscoveryError, OSError, json.JSONDecodeError) as exc:
        logger.error("[DISCOVERY] Execution failed: %s", exc)
        return 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="discovery-launcher",
        description="Resolve test names into a discovery request and run it",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    _add_plan_parser(subparsers)
    _add_run_parser(subparsers)
    _add_execute_parser(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    ours, passthrough = _split_pytest_passthrough(
        sys.argv[1:] if argv is None else argv,
    )
    parser = build_parser()
    args = parser.parse_args(ours)
    args.pytest_passthrough = passthrough or None
    _setup_logging(getattr(args, "verbose", False))

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
