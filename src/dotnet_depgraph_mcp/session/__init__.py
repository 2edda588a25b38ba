"""Graph session management."""

from .manager import GraphSession, GraphState, NoGraphLoadedError

__all__ = ["GraphSession", "GraphState", "NoGraphLoadedError"]
