"""Entry point for dotnet-depgraph-mcp server."""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, TextIO

from .graph import (
    CycleDetectedError,
    ProjectRecord,
    build_graph,
    get_build_order,
    get_package_stats,
    get_parallel_build_groups,
    validate_graph,
)
from .server import create_server, reset_session
from .utils.project import configure_graph


def configure_logging() -> None:
    """Configure logging based on environment."""
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Dependency graph MCP Server - build order for .NET solutions via MCP"
    )
    parser.add_argument(
        "--plan",
        type=str,
        default=None,
        metavar="FILE",
        help="Print a build plan for a JSON array of project records and exit "
        "instead of starting the server. Use '-' to read from stdin.",
    )
    parser.add_argument(
        "--dedupe-references",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Record a repeated project/package reference only once "
        "(--no-dedupe-references keeps duplicates). Overrides DEPGRAPH_DEDUPE_REFERENCES.",
    )
    parser.add_argument(
        "--max-parallel",
        type=int,
        default=None,
        metavar="N",
        help="Maximum number of projects per parallel build group. "
        "Overrides DEPGRAPH_MAX_PARALLEL_BUILDS.",
    )
    return parser.parse_args(argv)


def load_records(source: TextIO) -> list[ProjectRecord]:
    """Read project records from a JSON array.

    Raises:
        ValueError: If the document is not a JSON array of project records
    """
    data = json.load(source)
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array of project records")
    return [ProjectRecord.from_dict(item) for item in data]


def build_plan(records: list[ProjectRecord]) -> dict[str, Any]:
    """Compute the build plan for a set of project records.

    Raises:
        CycleDetectedError: If the projects reference each other circularly
    """
    graph = build_graph(records)
    report = validate_graph(graph)
    return {
        "buildOrder": get_build_order(graph),
        "parallelGroups": get_parallel_build_groups(graph),
        "packages": {key: usage.to_dict() for key, usage in get_package_stats(graph).items()},
        "warnings": [
            f"{ref.source} references unknown project {ref.target}" for ref in report.dangling
        ],
    }


def run_plan(path: str, out: TextIO | None = None) -> int:
    """Print a JSON build plan. Returns the process exit code."""
    out = out or sys.stdout
    logger = logging.getLogger(__name__)
    try:
        if path == "-":
            records = load_records(sys.stdin)
        else:
            with open(path, encoding="utf-8") as f:
                records = load_records(f)
        plan = build_plan(records)
    except CycleDetectedError as e:
        json.dump({"success": False, **e.to_dict()}, out, indent=2)
        out.write("\n")
        return 1
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read project records from {path}: {e}")
        return 2

    json.dump({"success": True, **plan}, out, indent=2)
    out.write("\n")
    return 0


async def main() -> None:
    """Main entry point."""
    logger = logging.getLogger(__name__)
    logger.info("Starting dependency graph MCP Server...")

    mcp = create_server()

    try:
        await mcp.run_stdio_async()
    except Exception:
        logger.exception("Server error")
        raise
    finally:
        reset_session()
        logger.info("Server stopped")


def run() -> None:
    """Run the server."""
    configure_logging()
    args = parse_args()
    try:
        configure_graph(
            dedupe_references=args.dedupe_references,
            max_parallel_builds=args.max_parallel,
        )
    except ValueError as e:
        logging.getLogger(__name__).error(str(e))
        sys.exit(2)

    if args.plan is not None:
        sys.exit(run_plan(args.plan))

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
