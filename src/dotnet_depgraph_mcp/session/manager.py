"""Graph session - holder of the current dependency graph.

State machine:
EMPTY → READY | CYCLIC
  ↑_____________|

The graph is never updated incrementally. load() builds a fresh graph from
the full set of project records and swaps the reference in under a lock, so
readers always see either the old graph or the new one.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

from ..graph import (
    DependencyGraph,
    GraphReport,
    PackageUsage,
    ProjectRecord,
    build_graph,
    check_circular_dependencies,
    get_all_dependencies,
    get_build_order,
    get_dependencies,
    get_dependents,
    get_package_stats,
    get_parallel_build_groups,
    validate_graph,
)

logger = logging.getLogger(__name__)


class GraphState(str, Enum):
    """Graph session states."""

    EMPTY = "empty"  # No solution loaded
    READY = "ready"  # Loaded, acyclic
    CYCLIC = "cyclic"  # Loaded, contains cycles


class NoGraphLoadedError(Exception):
    """Raised when a query is made before any projects were loaded."""


class GraphSession:
    """Single-writer holder of the current dependency graph.

    Mutation goes through load()/clear() only. Queries are read-only
    traversals of the current graph reference.
    """

    def __init__(self, dedupe_references: bool | None = None):
        """Initialize graph session.

        Args:
            dedupe_references: Passed to graph construction (None = configured)
        """
        self._dedupe = dedupe_references
        self._graph: DependencyGraph | None = None
        self._state = GraphState.EMPTY
        self._lock = asyncio.Lock()
        self._state_listeners: list[Callable[[GraphState], None]] = []

    @property
    def state(self) -> GraphState:
        """Current graph state."""
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._graph is not None

    @property
    def graph(self) -> DependencyGraph:
        """Current graph.

        Raises:
            NoGraphLoadedError: If nothing was loaded yet
        """
        if self._graph is None:
            raise NoGraphLoadedError("No projects loaded. Call load_projects first.")
        return self._graph

    def on_state_change(self, listener: Callable[[GraphState], None]) -> None:
        """Register state change listener."""
        self._state_listeners.append(listener)

    def _set_state(self, new_state: GraphState) -> None:
        """Update state and notify listeners."""
        old_state = self._state
        self._state = new_state
        if old_state != new_state:
            logger.info(f"Graph state: {old_state.value} -> {new_state.value}")
            for listener in self._state_listeners:
                try:
                    listener(new_state)
                except Exception:
                    logger.exception("State listener error")

    async def load(self, records: Iterable[ProjectRecord | dict[str, Any]]) -> GraphReport:
        """Rebuild the graph from a complete set of project records.

        Args:
            records: ProjectRecord instances or their dict form

        Returns:
            Validation report for the new graph

        Raises:
            ValueError: If a record is malformed (the current graph is kept)
        """
        projects = [
            record if isinstance(record, ProjectRecord) else ProjectRecord.from_dict(record)
            for record in records
        ]

        async with self._lock:
            graph = build_graph(projects, dedupe=self._dedupe)
            report = validate_graph(graph)
            self._graph = graph
            self._set_state(GraphState.CYCLIC if report.has_cycles else GraphState.READY)

        if report.dangling:
            logger.warning(f"{len(report.dangling)} dangling project references in loaded graph")
        return report

    async def clear(self) -> None:
        """Discard the current graph."""
        async with self._lock:
            self._graph = None
            self._set_state(GraphState.EMPTY)

    def check_circular_dependencies(self) -> tuple[bool, list[list[str]]]:
        return check_circular_dependencies(self.graph)

    def get_build_order(self) -> list[str]:
        return get_build_order(self.graph)

    def get_parallel_build_groups(self, max_parallel: int | None = None) -> list[list[str]]:
        return get_parallel_build_groups(self.graph, max_parallel=max_parallel)

    def get_dependencies(self, project_id: str) -> list[str]:
        return get_dependencies(self.graph, project_id)

    def get_all_dependencies(self, project_id: str) -> list[str]:
        return get_all_dependencies(self.graph, project_id)

    def get_dependents(self, project_id: str) -> list[str]:
        return get_dependents(self.graph, project_id)

    def get_package_stats(self) -> dict[str, PackageUsage]:
        return get_package_stats(self.graph)

    def validate(self) -> GraphReport:
        return validate_graph(self.graph)
