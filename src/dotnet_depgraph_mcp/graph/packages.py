"""Package usage statistics."""

from __future__ import annotations

from .model import DependencyGraph, PackageUsage


def get_package_stats(graph: DependencyGraph) -> dict[str, PackageUsage]:
    """Usage of every package@version, keyed by "name@version".

    usage_count counts every recorded reference, so a project referencing
    the same package twice counts twice unless the graph was built with
    dedupe_references.
    """
    return {
        key: PackageUsage(
            name=node.name,
            version=node.version,
            usage_count=len(node.dependents),
            dependents=list(node.dependents),
        )
        for key, node in sorted(graph.packages.items())
    }
