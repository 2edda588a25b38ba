"""Project identity and graph configuration utilities.

Provides:
1. Project id derivation from project file paths (POSIX or Windows style)
2. Graph configuration from environment variables (DEPGRAPH_DEDUPE_REFERENCES,
   DEPGRAPH_MAX_PARALLEL_BUILDS), overridable at startup
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import PureWindowsPath

logger = logging.getLogger(__name__)

TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def get_project_id(project_path: str) -> str:
    """Derive the stable project id from a project file path.

    The id is the file name without its extension. Both separators are
    accepted because MSBuild writes ProjectReference paths with backslashes:
    - src/Core/Core.csproj → Core
    - ..\\Core\\Core.csproj → Core
    - C:\\repo\\App\\App.fsproj → App

    Args:
        project_path: Path to a .csproj/.fsproj/.vbproj file

    Returns:
        Project id

    Raises:
        ValueError: If the path is empty
    """
    if not project_path or not project_path.strip():
        raise ValueError("Empty project path")

    # PureWindowsPath splits on both "/" and "\\"
    return PureWindowsPath(project_path.strip()).stem


@dataclass
class GraphConfig:
    """Configuration for dependency graph construction and planning."""

    dedupe_references: bool = False
    """Record a repeated project/package reference from one project only once."""

    max_parallel_builds: int | None = None
    """Upper bound on the size of a parallel build group (None = unbounded)."""

    env_var_names: tuple[str, str] = field(
        default=("DEPGRAPH_DEDUPE_REFERENCES", "DEPGRAPH_MAX_PARALLEL_BUILDS")
    )
    """Environment variable names for (dedupe_references, max_parallel_builds)."""

    def __post_init__(self) -> None:
        if self.max_parallel_builds is not None and self.max_parallel_builds < 1:
            raise ValueError(
                f"max_parallel_builds must be a positive integer: {self.max_parallel_builds}"
            )

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> GraphConfig:
        """Load configuration from environment variables.

        Invalid values are logged and ignored.
        """
        env = os.environ if environ is None else environ
        dedupe_var, parallel_var = cls().env_var_names

        dedupe = env.get(dedupe_var, "").strip().lower() in TRUE_VALUES

        max_parallel: int | None = None
        raw = env.get(parallel_var, "").strip()
        if raw:
            try:
                max_parallel = int(raw)
                if max_parallel < 1:
                    raise ValueError(raw)
            except ValueError:
                logger.warning(f"{parallel_var}={raw} - expected a positive integer, ignoring")
                max_parallel = None

        return cls(dedupe_references=dedupe, max_parallel_builds=max_parallel)


# Global configuration (set at startup)
_config: GraphConfig = GraphConfig()


def configure_graph(
    *,
    dedupe_references: bool | None = None,
    max_parallel_builds: int | None = None,
    use_env: bool = True,
) -> GraphConfig:
    """Configure graph construction and planning.

    Should be called once at startup. Explicit arguments override values
    read from the environment.

    Args:
        dedupe_references: Override for reference deduplication
        max_parallel_builds: Override for the parallel group size limit
        use_env: Whether to start from environment variables

    Returns:
        The active configuration
    """
    global _config
    base = GraphConfig.from_env() if use_env else GraphConfig()
    _config = GraphConfig(
        dedupe_references=(
            base.dedupe_references if dedupe_references is None else dedupe_references
        ),
        max_parallel_builds=(
            base.max_parallel_builds if max_parallel_builds is None else max_parallel_builds
        ),
    )
    logger.debug(
        f"Graph configured: dedupe_references={_config.dedupe_references}, "
        f"max_parallel_builds={_config.max_parallel_builds}"
    )
    return _config


def get_config() -> GraphConfig:
    """Get current graph configuration."""
    return _config
