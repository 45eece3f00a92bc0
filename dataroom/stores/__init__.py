"""Persistent stores for dataroom."""

from .project_store import ProjectStore

__all__ = ["ProjectStore"]
