"""Dependency graph data model.

All relationships are expressed by string id lookup:
- projects: project id → ProjectNode
- packages: "name@version" → PackageNode
- edges: project id → ids it depends on ("A → B" means A needs B built first)

edges is the authoritative adjacency list; ProjectNode.dependencies mirrors it.
Edge targets are not required to exist in projects (dangling references).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..utils.project import get_project_id


class ProjectType(str, Enum):
    """Kind of buildable unit."""

    LIBRARY = "library"
    EXECUTABLE = "executable"
    UNKNOWN = "unknown"

    @classmethod
    def from_value(cls, value: str | ProjectType | None) -> ProjectType:
        """Map a record type or MSBuild OutputType to a ProjectType.

        Exe and WinExe are executables, Library is a library.
        """
        if isinstance(value, ProjectType):
            return value
        if not value:
            return cls.UNKNOWN
        if not isinstance(value, str):
            raise ValueError(f"Project type must be a string: {value!r}")
        normalized = value.strip().lower()
        if normalized in ("exe", "winexe", "executable"):
            return cls.EXECUTABLE
        if normalized == "library":
            return cls.LIBRARY
        return cls.UNKNOWN


def package_key(name: str, version: str) -> str:
    """Key uniquely identifying a package at a version."""
    return f"{name}@{version}"


@dataclass(frozen=True)
class PackageReference:
    """NuGet package reference from a project record."""

    name: str
    version: str

    @property
    def key(self) -> str:
        return package_key(self.name, self.version)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PackageReference:
        if not isinstance(data, dict):
            raise ValueError(f"Package reference must be an object: {data!r}")
        name = data.get("name") or data.get("include")
        if not name:
            raise ValueError(f"Package reference without name: {data}")
        return cls(name=str(name), version=str(data.get("version") or ""))


@dataclass
class ProjectRecord:
    """Parsed project, as produced by a solution/project parser.

    Project references are paths to the referenced project files; their ids
    are derived the same way as this record's id.
    """

    path: str
    name: str = ""
    type: ProjectType = ProjectType.UNKNOWN
    framework: str = ""
    project_references: list[str] = field(default_factory=list)
    package_references: list[PackageReference] = field(default_factory=list)
    id: str | None = None

    def __post_init__(self) -> None:
        self.type = ProjectType.from_value(self.type)
        if not self.name:
            self.name = get_project_id(self.path)

    @property
    def project_id(self) -> str:
        """Explicit id if given, otherwise derived from the path."""
        return self.id or get_project_id(self.path)

    @property
    def reference_ids(self) -> list[str]:
        """Ids of referenced projects, in reference order."""
        return [get_project_id(ref) for ref in self.project_references]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectRecord:
        """Create a record from a JSON-like dict.

        Accepts snake_case or camelCase keys. Project references may be
        plain paths or objects with a "path" key.

        Raises:
            ValueError: If the record has no path or a field has the wrong shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"Project record must be an object: {data!r}")
        path = data.get("path")
        if not path:
            raise ValueError(f"Project record without path: {data}")

        raw_refs = data.get("project_references", data.get("projectReferences")) or []
        if not isinstance(raw_refs, list):
            raise ValueError(f"project_references must be a list in {path}")
        refs: list[str] = []
        for ref in raw_refs:
            if isinstance(ref, dict):
                ref_path = ref.get("path")
                if not ref_path:
                    raise ValueError(f"Project reference without path in {path}: {ref}")
                refs.append(str(ref_path))
            else:
                refs.append(str(ref))

        raw_pkgs = data.get("package_references", data.get("packageReferences")) or []
        if not isinstance(raw_pkgs, list):
            raise ValueError(f"package_references must be a list in {path}")
        packages = [PackageReference.from_dict(pkg) for pkg in raw_pkgs]

        return cls(
            path=str(path),
            name=str(data.get("name") or ""),
            type=data.get("type") or data.get("output_type") or data.get("outputType"),
            framework=str(data.get("framework") or ""),
            project_references=refs,
            package_references=packages,
            id=str(data["id"]) if data.get("id") is not None else None,
        )


@dataclass
class ProjectNode:
    """Project vertex in the dependency graph."""

    id: str
    name: str
    path: str
    type: ProjectType = ProjectType.UNKNOWN
    framework: str = ""
    dependencies: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "type": self.type.value,
            "framework": self.framework,
            "dependencies": list(self.dependencies),
        }


@dataclass
class PackageNode:
    """Package at a specific version and the projects referencing it."""

    name: str
    version: str
    dependents: list[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        return package_key(self.name, self.version)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "version": self.version,
            "dependents": list(self.dependents),
        }


@dataclass
class PackageUsage:
    """Usage statistics for one package@version."""

    name: str
    version: str
    usage_count: int
    dependents: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "version": self.version,
            "usageCount": self.usage_count,
            "dependents": list(self.dependents),
        }


@dataclass
class DependencyGraph:
    """Project/package dependency graph for one solution load."""

    projects: dict[str, ProjectNode] = field(default_factory=dict)
    packages: dict[str, PackageNode] = field(default_factory=dict)
    edges: dict[str, list[str]] = field(default_factory=dict)

    @property
    def project_ids(self) -> list[str]:
        """Sorted list of project ids."""
        return sorted(self.projects)

    @property
    def edge_count(self) -> int:
        return sum(len(deps) for deps in self.edges.values())

    def __len__(self) -> int:
        return len(self.projects)

    def __contains__(self, project_id: object) -> bool:
        return project_id in self.projects

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "projects": {pid: self.projects[pid].to_dict() for pid in self.project_ids},
            "packages": {key: self.packages[key].to_dict() for key in sorted(self.packages)},
            "edges": {pid: list(self.edges[pid]) for pid in sorted(self.edges)},
        }
