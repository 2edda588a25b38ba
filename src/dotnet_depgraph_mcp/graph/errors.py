"""Dependency graph exceptions."""

from __future__ import annotations

from typing import Any


def format_cycle(cycle: list[str]) -> str:
    """Render a cycle as "A → B → A"."""
    return " → ".join(cycle)


class GraphError(Exception):
    """Base exception for dependency graph errors."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"error": str(self)}


class CycleDetectedError(GraphError):
    """Raised when an ordering is requested for a graph that is not a DAG.

    No partial order accompanies this error. Callers present the cycles and
    decline to build until they are resolved.
    """

    def __init__(self, cycles: list[list[str]]):
        self.cycles = [list(cycle) for cycle in cycles]
        rendered = "; ".join(format_cycle(cycle) for cycle in self.cycles)
        super().__init__(f"Circular dependencies detected: {rendered}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": str(self),
            "cycles": [list(cycle) for cycle in self.cycles],
        }
