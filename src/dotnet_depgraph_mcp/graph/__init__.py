"""Project dependency graph and build-order resolution.

Provides:
- Graph construction from parsed project records
- Cycle detection with full cycle enumeration
- Topological sort and dependency-first build order
- Partition of the build order into parallel-safe batches
- Package usage statistics
"""

from .builder import (
    add_project,
    add_project_dependencies,
    build_graph,
    create_graph,
    get_dependencies,
)
from .cycles import check_circular_dependencies
from .errors import CycleDetectedError, GraphError
from .model import (
    DependencyGraph,
    PackageNode,
    PackageReference,
    PackageUsage,
    ProjectNode,
    ProjectRecord,
    ProjectType,
)
from .packages import get_package_stats
from .planner import (
    get_all_dependencies,
    get_build_order,
    get_dependents,
    get_parallel_build_groups,
)
from .sort import topological_sort
from .validation import DanglingReference, GraphReport, find_dangling_references, validate_graph

__all__ = [
    "DependencyGraph",
    "ProjectNode",
    "PackageNode",
    "PackageReference",
    "PackageUsage",
    "ProjectRecord",
    "ProjectType",
    "GraphError",
    "CycleDetectedError",
    "DanglingReference",
    "GraphReport",
    "create_graph",
    "add_project",
    "add_project_dependencies",
    "build_graph",
    "get_dependencies",
    "check_circular_dependencies",
    "topological_sort",
    "get_build_order",
    "get_parallel_build_groups",
    "get_all_dependencies",
    "get_dependents",
    "get_package_stats",
    "find_dangling_references",
    "validate_graph",
]
