"""Tests for MCP server wiring."""

from __future__ import annotations

import json

import pytest

from dotnet_depgraph_mcp.graph import CycleDetectedError
from dotnet_depgraph_mcp.server import _error, create_server, get_session, reset_session


DIAMOND_PROJECTS = [
    {
        "path": "src/A/A.csproj",
        "project_references": ["../C/C.csproj"],
        "package_references": [{"name": "Serilog", "version": "3.1.1"}],
    },
    {
        "path": "src/B/B.csproj",
        "project_references": ["../C/C.csproj"],
        "package_references": [{"name": "Serilog", "version": "3.1.1"}],
    },
    {"path": "src/C/C.csproj"},
]

CYCLIC_PROJECTS = [
    {"path": "A.csproj", "project_references": ["B.csproj"]},
    {"path": "B.csproj", "project_references": ["A.csproj"]},
]


def tool_payload(result) -> dict:
    """Decode a tool result; newer mcp releases return (content, structured)."""
    if isinstance(result, tuple):
        result = result[0]
    return json.loads(result[0].text)


async def read_json(mcp, uri: str):
    contents = list(await mcp.read_resource(uri))
    return json.loads(contents[0].content)


@pytest.fixture(autouse=True)
def fresh_session():
    """Each test gets its own global session."""
    reset_session()
    yield
    reset_session()


class TestCreateServer:
    """Tests for tool and resource registration."""

    @pytest.mark.asyncio
    async def test_tools_registered(self):
        """Test every graph operation is exposed as a tool."""
        mcp = create_server()

        names = {tool.name for tool in await mcp.list_tools()}

        assert names == {
            "load_projects",
            "clear_graph",
            "get_build_order",
            "get_parallel_build_groups",
            "check_circular_dependencies",
            "get_dependencies",
            "get_all_dependencies",
            "get_dependents",
            "get_package_stats",
            "validate_graph",
        }

    @pytest.mark.asyncio
    async def test_resources_registered(self):
        """Test graph resources are exposed."""
        mcp = create_server()

        uris = {str(resource.uri) for resource in await mcp.list_resources()}

        assert {"graph://projects", "graph://packages"} <= uris

    def test_server_uses_global_session(self):
        """Test create_server binds the global session."""
        create_server()
        assert get_session() is get_session()


class TestErrorPayload:
    """Tests for tool error payloads."""

    def test_plain_error(self):
        """Test generic exceptions become error payloads."""
        assert _error(ValueError("bad record")) == {"success": False, "error": "bad record"}

    def test_cycle_error_carries_cycles(self):
        """Test cycle errors include the cycle list."""
        payload = _error(CycleDetectedError([["A", "B", "A"]]))

        assert payload["success"] is False
        assert payload["cycles"] == [["A", "B", "A"]]
        assert "A → B → A" in payload["error"]


class TestTools:
    """Tests for tool calls through the server."""

    @pytest.mark.asyncio
    async def test_load_projects_report(self):
        """Test load_projects returns the validation report."""
        mcp = create_server()

        payload = tool_payload(await mcp.call_tool("load_projects", {"projects": DIAMOND_PROJECTS}))

        assert payload["success"] is True
        assert payload["data"]["projectCount"] == 3
        assert payload["data"]["edgeCount"] == 2
        assert payload["data"]["hasCycles"] is False

    @pytest.mark.asyncio
    async def test_build_order_and_groups(self):
        """Test ordering tools after a load."""
        mcp = create_server()
        await mcp.call_tool("load_projects", {"projects": DIAMOND_PROJECTS})

        order = tool_payload(await mcp.call_tool("get_build_order", {}))
        groups = tool_payload(await mcp.call_tool("get_parallel_build_groups", {}))
        limited = tool_payload(
            await mcp.call_tool("get_parallel_build_groups", {"max_parallel": 1})
        )

        assert order == {"success": True, "data": ["C", "A", "B"]}
        assert groups == {"success": True, "data": [["C"], ["A", "B"]]}
        assert limited["data"] == [["C"], ["A"], ["B"]]

    @pytest.mark.asyncio
    async def test_cycle_error_payloads(self):
        """Test cyclic graphs return error payloads carrying the cycles."""
        mcp = create_server()
        await mcp.call_tool("load_projects", {"projects": CYCLIC_PROJECTS})

        order = tool_payload(await mcp.call_tool("get_build_order", {}))
        groups = tool_payload(await mcp.call_tool("get_parallel_build_groups", {}))
        check = tool_payload(await mcp.call_tool("check_circular_dependencies", {}))

        assert order["success"] is False
        assert order["cycles"] == [["A", "B", "A"]]
        assert "data" not in order
        assert groups["success"] is False
        assert groups["cycles"] == [["A", "B", "A"]]
        assert check["data"] == {"hasCycles": True, "cycles": [["A", "B", "A"]]}

    @pytest.mark.asyncio
    async def test_dependency_queries(self):
        """Test dependency and dependent lookups."""
        mcp = create_server()
        await mcp.call_tool("load_projects", {"projects": DIAMOND_PROJECTS})

        deps = tool_payload(await mcp.call_tool("get_dependencies", {"project_id": "A"}))
        dependents = tool_payload(await mcp.call_tool("get_dependents", {"project_id": "C"}))

        assert deps["data"] == ["C"]
        assert dependents["data"] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_package_stats(self):
        """Test package usage counts through the tool."""
        mcp = create_server()
        await mcp.call_tool("load_projects", {"projects": DIAMOND_PROJECTS})

        payload = tool_payload(await mcp.call_tool("get_package_stats", {}))

        usage = payload["data"]["Serilog@3.1.1"]
        assert usage["usageCount"] == 2
        assert usage["dependents"] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_load_rejects_malformed_record(self):
        """Test a record with a string reference list is an error payload."""
        mcp = create_server()

        payload = tool_payload(
            await mcp.call_tool(
                "load_projects",
                {"projects": [{"path": "A.csproj", "project_references": "B.csproj"}]},
            )
        )

        assert payload["success"] is False
        assert "must be a list" in payload["error"]

    @pytest.mark.asyncio
    async def test_clear_graph(self):
        """Test clear_graph resets the session state."""
        mcp = create_server()
        await mcp.call_tool("load_projects", {"projects": DIAMOND_PROJECTS})

        payload = tool_payload(await mcp.call_tool("clear_graph", {}))

        assert payload == {"success": True, "data": {"state": "empty"}}
        assert get_session().is_loaded is False


class TestResources:
    """Tests for graph resources."""

    @pytest.mark.asyncio
    async def test_projects_before_load(self):
        """Test projects resource is empty before a load."""
        mcp = create_server()

        assert await read_json(mcp, "graph://projects") == {"state": "empty", "projects": {}}

    @pytest.mark.asyncio
    async def test_projects_after_load(self):
        """Test projects resource lists nodes and edges."""
        mcp = create_server()
        await mcp.call_tool("load_projects", {"projects": DIAMOND_PROJECTS})

        data = await read_json(mcp, "graph://projects")

        assert data["state"] == "ready"
        assert list(data["projects"]) == ["A", "B", "C"]
        assert data["edges"] == {"A": ["C"], "B": ["C"], "C": []}

    @pytest.mark.asyncio
    async def test_packages_before_and_after_load(self):
        """Test packages resource reflects the loaded graph."""
        mcp = create_server()

        assert await read_json(mcp, "graph://packages") == {}

        await mcp.call_tool("load_projects", {"projects": DIAMOND_PROJECTS})
        data = await read_json(mcp, "graph://packages")

        assert data["Serilog@3.1.1"]["usageCount"] == 2

    @pytest.mark.asyncio
    async def test_projects_after_clear(self):
        """Test projects resource is empty again after clear_graph."""
        mcp = create_server()
        await mcp.call_tool("load_projects", {"projects": DIAMOND_PROJECTS})
        await mcp.call_tool("clear_graph", {})

        assert await read_json(mcp, "graph://projects") == {"state": "empty", "projects": {}}
