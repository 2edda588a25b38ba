"""Dependency graph and build-order resolution for .NET solutions, served over MCP."""

from .graph import (
    CycleDetectedError,
    DependencyGraph,
    ProjectRecord,
    build_graph,
    get_build_order,
    get_parallel_build_groups,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CycleDetectedError",
    "DependencyGraph",
    "ProjectRecord",
    "build_graph",
    "get_build_order",
    "get_parallel_build_groups",
]
