"""Topological sort of project nodes (Kahn's algorithm).

The order is dependents-first: a project appears before everything it
depends on. Reverse it for a build order.

In-degree counts only edges whose target is a known project, which is how
dangling references are tolerated: they never enter the queue and never
block a real project from reaching zero.
"""

from __future__ import annotations

import logging
from collections import deque

from .cycles import check_circular_dependencies
from .errors import CycleDetectedError
from .model import DependencyGraph

logger = logging.getLogger(__name__)


def topological_sort(graph: DependencyGraph) -> list[str]:
    """Order projects so that every project precedes its dependencies.

    Fails closed: a cyclic graph yields no partial order.

    Args:
        graph: Dependency graph

    Returns:
        Project ids, dependents first

    Raises:
        CycleDetectedError: If the graph contains any cycle
    """
    has_cycles, cycles = check_circular_dependencies(graph)
    if has_cycles:
        raise CycleDetectedError(cycles)

    project_ids = sorted(graph.projects)
    in_degree: dict[str, int] = {project_id: 0 for project_id in project_ids}

    for project_id in project_ids:
        for dep_id in graph.edges.get(project_id, []):
            if dep_id in in_degree:
                in_degree[dep_id] += 1

    # Nothing depends on these: top-level consumers such as executables
    queue: deque[str] = deque(pid for pid in project_ids if in_degree[pid] == 0)
    result: list[str] = []

    while queue:
        current = queue.popleft()
        result.append(current)

        for dep_id in graph.edges.get(current, []):
            if dep_id not in in_degree:
                continue
            in_degree[dep_id] -= 1
            if in_degree[dep_id] == 0:
                queue.append(dep_id)

    logger.debug(f"Topological sort complete: {len(result)} projects")
    return result
