"""Dependency graph construction from parsed project records.

Population is two-pass: add every project, then add every project's
dependencies. No validation happens here; dangling project references and
duplicate edges are accepted as given.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..utils.project import get_config
from .model import DependencyGraph, PackageNode, ProjectNode, ProjectRecord

logger = logging.getLogger(__name__)


def create_graph() -> DependencyGraph:
    """Create an empty dependency graph."""
    return DependencyGraph()


def add_project(graph: DependencyGraph, project: ProjectRecord) -> None:
    """Add a project node, replacing any node with the same id.

    The replaced node's edges are discarded, not merged.
    """
    project_id = project.project_id
    if project_id in graph.projects:
        logger.debug(f"Replacing project in dependency graph: {project_id}")

    graph.projects[project_id] = ProjectNode(
        id=project_id,
        name=project.name,
        path=project.path,
        type=project.type,
        framework=project.framework,
    )
    graph.edges[project_id] = []

    logger.debug(f"Added project to dependency graph: {project_id} ({project.name})")


def add_project_dependencies(
    graph: DependencyGraph,
    project: ProjectRecord,
    *,
    dedupe: bool | None = None,
) -> None:
    """Record a project's project and package references.

    Args:
        graph: Graph the project was already added to
        project: Project record
        dedupe: Record a repeated reference once. Defaults to the
            configured dedupe_references (off: duplicates are preserved)
    """
    if dedupe is None:
        dedupe = get_config().dedupe_references

    project_id = project.project_id
    node = graph.projects.get(project_id)
    if node is None:
        logger.warning(f"Project not found in dependency graph: {project_id}")
        return

    edges = graph.edges.setdefault(project_id, [])
    for ref_id in project.reference_ids:
        if dedupe and ref_id in edges:
            continue
        edges.append(ref_id)
        node.dependencies.append(ref_id)
        logger.debug(f"Added project dependency: {project_id} -> {ref_id}")

    for pkg in project.package_references:
        package = graph.packages.get(pkg.key)
        if package is None:
            package = PackageNode(name=pkg.name, version=pkg.version)
            graph.packages[pkg.key] = package
        if dedupe and project_id in package.dependents:
            continue
        package.dependents.append(project_id)
        logger.debug(f"Added package dependency: {project_id} -> {pkg.key}")


def build_graph(
    projects: Iterable[ProjectRecord],
    *,
    dedupe: bool | None = None,
) -> DependencyGraph:
    """Build a complete graph from project records.

    Args:
        projects: Parsed project records
        dedupe: See add_project_dependencies

    Returns:
        Populated dependency graph
    """
    records = list(projects)
    graph = create_graph()
    for record in records:
        add_project(graph, record)
    for record in records:
        add_project_dependencies(graph, record, dedupe=dedupe)

    logger.info(
        f"Built dependency graph: {len(graph.projects)} projects, "
        f"{graph.edge_count} edges, {len(graph.packages)} packages"
    )
    return graph


def get_dependencies(graph: DependencyGraph, project_id: str) -> list[str]:
    """Direct dependencies of a project (empty if unknown)."""
    return list(graph.edges.get(project_id, []))
