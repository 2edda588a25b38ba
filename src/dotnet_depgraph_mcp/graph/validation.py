"""Graph validation report.

The ordering functions tolerate dangling references silently. Callers that
want stricter checking run validate_graph() and surface the dangling
references as warnings next to any cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .cycles import check_circular_dependencies
from .errors import format_cycle
from .model import DependencyGraph


@dataclass(frozen=True)
class DanglingReference:
    """Edge whose target is not a known project."""

    source: str
    target: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"source": self.source, "target": self.target}


@dataclass
class GraphReport:
    """Result of validating a dependency graph."""

    project_count: int
    package_count: int
    edge_count: int
    cycles: list[list[str]] = field(default_factory=list)
    dangling: list[DanglingReference] = field(default_factory=list)

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)

    @property
    def is_buildable(self) -> bool:
        """Dangling references do not block building, cycles do."""
        return not self.cycles

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "projectCount": self.project_count,
            "packageCount": self.package_count,
            "edgeCount": self.edge_count,
            "hasCycles": self.has_cycles,
            "cycles": [list(cycle) for cycle in self.cycles],
            "danglingReferences": [ref.to_dict() for ref in self.dangling],
        }

    def to_summary(self) -> str:
        """Generate human-readable summary."""
        status = "[OK] Graph is buildable" if self.is_buildable else "[FAILED] Graph has cycles"
        parts = [
            status,
            f"  Projects: {self.project_count}",
            f"  Packages: {self.package_count}",
            f"  Edges: {self.edge_count}",
        ]
        for cycle in self.cycles:
            parts.append(f"    circular reference: {format_cycle(cycle)}")
        for ref in self.dangling:
            parts.append(f"    warning: {ref.source} references unknown project {ref.target}")
        return "\n".join(parts)


def find_dangling_references(graph: DependencyGraph) -> list[DanglingReference]:
    """Edges pointing at ids that are not projects in the graph.

    Sorted by source id, then edge order; a repeated edge is reported once.
    """
    dangling: list[DanglingReference] = []
    for source in sorted(graph.edges):
        for target in graph.edges[source]:
            if target in graph.projects:
                continue
            ref = DanglingReference(source=source, target=target)
            if ref not in dangling:
                dangling.append(ref)
    return dangling


def validate_graph(graph: DependencyGraph) -> GraphReport:
    """Check the graph for cycles and dangling references."""
    _, cycles = check_circular_dependencies(graph)
    return GraphReport(
        project_count=len(graph.projects),
        package_count=len(graph.packages),
        edge_count=graph.edge_count,
        cycles=cycles,
        dangling=find_dangling_references(graph),
    )
