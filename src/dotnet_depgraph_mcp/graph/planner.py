"""Build order planning.

Build order is the reversed topological sort: dependencies before
dependents. Parallel groups partition that order into batches whose
members have no dependency relation among them, directly or transitively:

    A → C, B → C    build order [C, B, A]    groups [[C], [A, B]]

Batches are built one after another; members of a batch may be built
concurrently.
"""

from __future__ import annotations

import logging
from collections import deque

from ..utils.project import get_config
from .model import DependencyGraph
from .sort import topological_sort

logger = logging.getLogger(__name__)


def get_build_order(graph: DependencyGraph) -> list[str]:
    """Sequential build order, dependencies first.

    Raises:
        CycleDetectedError: If the graph contains any cycle
    """
    order = topological_sort(graph)
    order.reverse()
    return order


def get_all_dependencies(graph: DependencyGraph, project_id: str) -> list[str]:
    """Transitive dependencies of a project, in discovery order.

    Dangling ids reachable through edges are included. The visited set keeps
    the walk finite on cyclic graphs.
    """
    visited: set[str] = {project_id}
    dependencies: list[str] = []
    queue: deque[str] = deque(graph.edges.get(project_id, []))

    while queue:
        current = queue.popleft()
        if current in visited:
            if current == project_id and current not in dependencies:
                # Cycle back to the start
                dependencies.append(current)
            continue
        visited.add(current)
        dependencies.append(current)
        queue.extend(graph.edges.get(current, []))

    return dependencies


def get_dependents(graph: DependencyGraph, project_id: str) -> list[str]:
    """Projects that directly depend on project_id, sorted."""
    return sorted(pid for pid, deps in graph.edges.items() if project_id in deps)


def get_parallel_build_groups(
    graph: DependencyGraph,
    *,
    max_parallel: int | None = None,
) -> list[list[str]]:
    """Partition the build order into batches safe to build concurrently.

    Walks the build order; each unplaced project seeds a new batch, then
    every later unplaced project joins it unless its transitive dependencies
    include a project already in the batch. Members of each batch are listed
    in sorted order.

    Args:
        graph: Dependency graph
        max_parallel: Split batches larger than this into consecutive
            sub-batches. Defaults to the configured max_parallel_builds

    Returns:
        Batches in build order

    Raises:
        CycleDetectedError: If the graph contains any cycle
        ValueError: If max_parallel is less than 1
    """
    if max_parallel is None:
        max_parallel = get_config().max_parallel_builds
    if max_parallel is not None and max_parallel < 1:
        raise ValueError(f"max_parallel must be a positive integer: {max_parallel}")

    build_order = get_build_order(graph)
    closure: dict[str, set[str]] = {
        pid: set(get_all_dependencies(graph, pid)) for pid in build_order
    }

    placed: set[str] = set()
    groups: list[list[str]] = []

    for project_id in build_order:
        if project_id in placed:
            continue

        group = [project_id]
        placed.add(project_id)

        for candidate in build_order:
            if candidate in placed:
                continue
            if closure[candidate].isdisjoint(group):
                group.append(candidate)
                placed.add(candidate)

        groups.append(sorted(group))

    if max_parallel is not None:
        groups = [
            group[i:i + max_parallel]
            for group in groups
            for i in range(0, len(group), max_parallel)
        ]

    logger.debug(f"Planned {len(groups)} parallel build groups for {len(build_order)} projects")
    return groups
