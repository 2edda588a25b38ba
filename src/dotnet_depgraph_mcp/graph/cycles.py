"""Circular dependency detection.

Depth-first traversal from every unvisited project, in sorted id order so
the reported cycles are reproducible. The traversal uses an explicit stack;
solution graphs can be deep enough to make recursion depth a concern.

A back edge to a node on the current path closes a cycle, reported as the
path slice starting at that node plus the node again:
    A → B → C → B  gives  [B, C, B]
    A → A          gives  [A, A]
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .errors import format_cycle
from .model import DependencyGraph

logger = logging.getLogger(__name__)


def check_circular_dependencies(graph: DependencyGraph) -> tuple[bool, list[list[str]]]:
    """Find every dependency cycle reachable in the graph.

    The check always runs to completion so callers can report all problems
    at once. Dangling targets are traversed as leaves.

    Args:
        graph: Dependency graph

    Returns:
        (has_cycles, cycles) where each cycle starts and ends with the same id
    """
    visited: set[str] = set()
    cycles: list[list[str]] = []

    for start in sorted(graph.projects):
        if start in visited:
            continue

        visited.add(start)
        path: list[str] = [start]
        on_stack: set[str] = {start}
        stack: list[tuple[str, Iterator[str]]] = [(start, iter(graph.edges.get(start, [])))]

        while stack:
            node, deps = stack[-1]
            dep = next(deps, None)

            if dep is None:
                # All dependencies explored
                stack.pop()
                path.pop()
                on_stack.discard(node)
                continue

            if dep in on_stack:
                cycle = path[path.index(dep):] + [dep]
                # Duplicate edges would otherwise report the same loop twice
                if cycle not in cycles:
                    cycles.append(cycle)
            elif dep not in visited:
                visited.add(dep)
                on_stack.add(dep)
                path.append(dep)
                stack.append((dep, iter(graph.edges.get(dep, []))))

    if cycles:
        logger.warning(
            "Circular dependencies detected: "
            + "; ".join(format_cycle(cycle) for cycle in cycles)
        )
    else:
        logger.debug("No circular dependencies detected")

    return bool(cycles), cycles
