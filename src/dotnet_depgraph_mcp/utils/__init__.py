"""Utility modules for dotnet-depgraph-mcp."""

from .project import GraphConfig, configure_graph, get_config, get_project_id

__all__ = [
    "get_project_id",
    "GraphConfig",
    "configure_graph",
    "get_config",
]
