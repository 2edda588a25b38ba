"""Pytest fixtures for dotnet-depgraph-mcp tests."""

import pytest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from dotnet_depgraph_mcp.graph import PackageReference, ProjectRecord  # noqa: E402
from dotnet_depgraph_mcp.utils import project as project_utils  # noqa: E402


def make_record(name, refs=(), packages=(), type="library", framework="net8.0"):
    """Build a project record at src/<name>/<name>.csproj."""
    return ProjectRecord(
        path=f"src/{name}/{name}.csproj",
        name=name,
        type=type,
        framework=framework,
        project_references=[f"..\\{ref}\\{ref}.csproj" for ref in refs],
        package_references=[PackageReference(n, v) for n, v in packages],
    )


@pytest.fixture(autouse=True)
def reset_graph_config(monkeypatch):
    """Isolate tests from DEPGRAPH_* environment and prior configure_graph calls."""
    monkeypatch.delenv("DEPGRAPH_DEDUPE_REFERENCES", raising=False)
    monkeypatch.delenv("DEPGRAPH_MAX_PARALLEL_BUILDS", raising=False)
    monkeypatch.setattr(project_utils, "_config", project_utils.GraphConfig())


@pytest.fixture
def chain_records():
    """App -> Services -> Core."""
    return [
        make_record("App", refs=["Services"], type="exe"),
        make_record("Services", refs=["Core"]),
        make_record("Core"),
    ]


@pytest.fixture
def diamond_records():
    """Api and Worker both depend on Core; Tests depends on Api and Worker."""
    return [
        make_record("Api", refs=["Core"], packages=[("Newtonsoft.Json", "13.0.1")], type="exe"),
        make_record("Worker", refs=["Core"], packages=[("Newtonsoft.Json", "13.0.1")], type="exe"),
        make_record("Core", packages=[("Microsoft.Extensions.Logging", "8.0.0")]),
        make_record("Tests", refs=["Api", "Worker"], packages=[("xunit", "2.6.1")]),
    ]


@pytest.fixture
def sample_record_dicts():
    """Project records as a parser would emit them in JSON."""
    return [
        {
            "path": "C:\\repo\\src\\Web\\Web.csproj",
            "name": "Web",
            "type": "Exe",
            "framework": "net8.0",
            "projectReferences": [{"path": "..\\Domain\\Domain.csproj"}],
            "packageReferences": [{"name": "Serilog", "version": "3.1.1"}],
        },
        {
            "path": "C:\\repo\\src\\Domain\\Domain.csproj",
            "name": "Domain",
            "type": "Library",
            "framework": "net8.0",
            "project_references": [],
            "package_references": [{"name": "Serilog", "version": "3.1.1"}],
        },
    ]
