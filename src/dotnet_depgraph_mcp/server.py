"""MCP Server for .NET project dependency graphs."""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import Context, FastMCP
from pydantic import AnyUrl

from .graph import CycleDetectedError
from .session import GraphSession

logger = logging.getLogger(__name__)

# Global graph session (single client mode)
_session: GraphSession | None = None


def get_session() -> GraphSession:
    """Get or create graph session.

    Note: Single client mode - one loaded solution at a time.
    """
    global _session
    if _session is None:
        _session = GraphSession()
    return _session


def reset_session() -> None:
    """Drop the global session (used on shutdown and in tests)."""
    global _session
    _session = None


def _error(e: Exception) -> dict[str, Any]:
    """Tool error payload; cycle errors carry the cycle list."""
    result: dict[str, Any] = {"success": False, "error": str(e)}
    if isinstance(e, CycleDetectedError):
        result["cycles"] = e.cycles
    return result


def create_server() -> FastMCP:
    """Create and configure the MCP server."""
    mcp = FastMCP("dotnet-depgraph-mcp")
    session = get_session()

    async def notify_graph_changed(ctx: Context) -> None:
        """Notify client that graph resources have changed."""
        try:
            if ctx.session:
                await ctx.session.send_resource_updated(AnyUrl("graph://projects"))
                await ctx.session.send_resource_updated(AnyUrl("graph://packages"))
        except Exception:
            pass  # Notification failure shouldn't break the tool

    # ============== Graph Loading Tools ==============

    @mcp.tool()
    async def load_projects(ctx: Context, projects: list[dict[str, Any]]) -> dict:
        """
        Load a solution's parsed projects and rebuild the dependency graph.

        Replaces any previously loaded graph. Call again with the full
        project list whenever a project or solution file changes.

        Each project record:
            path: Project file path (required; id is the file name without extension)
            name: Display name (defaults to the id)
            type: "library", "exe"/"executable", or an MSBuild OutputType
            framework: Target framework moniker (e.g., net8.0)
            project_references: Paths of referenced project files
            package_references: List of {"name": ..., "version": ...}

        Args:
            projects: Project records for the whole solution

        Returns:
            Validation report (counts, cycles, dangling references)
        """
        try:
            report = await session.load(projects)
            await notify_graph_changed(ctx)
            return {"success": True, "data": report.to_dict()}
        except Exception as e:
            return _error(e)

    @mcp.tool()
    async def clear_graph() -> dict:
        """
        Discard the loaded dependency graph.
        """
        try:
            await session.clear()
            return {"success": True, "data": {"state": session.state.value}}
        except Exception as e:
            return _error(e)

    # ============== Ordering Tools ==============

    @mcp.tool()
    async def get_build_order() -> dict:
        """
        Get the sequential build order: dependencies before dependents.

        Fails with the list of cycles if the graph has circular references.
        No partial order is returned in that case.
        """
        try:
            return {"success": True, "data": session.get_build_order()}
        except Exception as e:
            return _error(e)

    @mcp.tool()
    async def get_parallel_build_groups(max_parallel: int | None = None) -> dict:
        """
        Get batches of projects that can be built concurrently.

        Build the batches in order; projects inside one batch have no
        dependency relation to each other.

        Args:
            max_parallel: Maximum batch size (default: unbounded or configured)
        """
        try:
            return {
                "success": True,
                "data": session.get_parallel_build_groups(max_parallel=max_parallel),
            }
        except Exception as e:
            return _error(e)

    @mcp.tool()
    async def check_circular_dependencies() -> dict:
        """
        Check the graph for circular project references.

        Returns every cycle found, each as a list of ids starting and
        ending with the same project (e.g., ["A", "B", "A"]).
        """
        try:
            has_cycles, cycles = session.check_circular_dependencies()
            return {"success": True, "data": {"hasCycles": has_cycles, "cycles": cycles}}
        except Exception as e:
            return _error(e)

    # ============== Query Tools ==============

    @mcp.tool()
    async def get_dependencies(project_id: str) -> dict:
        """
        Get the projects a project directly depends on, in reference order.

        Args:
            project_id: Project id (project file name without extension)
        """
        try:
            return {"success": True, "data": session.get_dependencies(project_id)}
        except Exception as e:
            return _error(e)

    @mcp.tool()
    async def get_all_dependencies(project_id: str) -> dict:
        """
        Get all direct and indirect dependencies of a project.

        Args:
            project_id: Project id (project file name without extension)
        """
        try:
            return {"success": True, "data": session.get_all_dependencies(project_id)}
        except Exception as e:
            return _error(e)

    @mcp.tool()
    async def get_dependents(project_id: str) -> dict:
        """
        Get the projects that directly reference a project.

        Args:
            project_id: Project id (project file name without extension)
        """
        try:
            return {"success": True, "data": session.get_dependents(project_id)}
        except Exception as e:
            return _error(e)

    @mcp.tool()
    async def get_package_stats() -> dict:
        """
        Get NuGet package usage, keyed by "name@version".

        Each entry has name, version, usageCount and dependents.
        """
        try:
            stats = session.get_package_stats()
            return {
                "success": True,
                "data": {key: usage.to_dict() for key, usage in stats.items()},
            }
        except Exception as e:
            return _error(e)

    @mcp.tool()
    async def validate_graph() -> dict:
        """
        Validate the loaded graph.

        Reports cycles (which block building) and references to projects
        that are not part of the loaded solution (warnings only).
        """
        try:
            report = session.validate()
            return {
                "success": True,
                "data": report.to_dict(),
                "summary": report.to_summary(),
            }
        except Exception as e:
            return _error(e)

    # ============== Resources ==============

    @mcp.resource("graph://projects", mime_type="application/json")
    async def graph_projects_resource() -> str:
        """Loaded projects and their dependency edges (JSON).

        Updates when: load_projects is called.
        """
        if not session.is_loaded:
            return json.dumps({"state": session.state.value, "projects": {}}, indent=2)
        data = session.graph.to_dict()
        return json.dumps(
            {
                "state": session.state.value,
                "projects": data["projects"],
                "edges": data["edges"],
            },
            indent=2,
        )

    @mcp.resource("graph://packages", mime_type="application/json")
    async def graph_packages_resource() -> str:
        """Package usage statistics (JSON).

        Updates when: load_projects is called.
        """
        if not session.is_loaded:
            return json.dumps({}, indent=2)
        stats = session.get_package_stats()
        return json.dumps({key: usage.to_dict() for key, usage in stats.items()}, indent=2)

    logger.info("Dependency graph MCP Server initialized")
    return mcp
