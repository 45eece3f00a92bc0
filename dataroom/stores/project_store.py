"""On-disk store for project metadata and Drive manifests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import DataRoomConfig
from ..logging import get_logger
from ..models import DriveManifest, Project


class ProjectStore:
    """Reads and writes ``metadata.json`` and ``drive-manifest.json`` per project."""

    def __init__(self, config: DataRoomConfig) -> None:
        self.config = config
        self.logger = get_logger("stores.projects")

    def load(self, slug: str) -> Optional[Project]:
        """Return the stored project, or ``None`` when absent or unreadable."""
        payload = self._read(self.config.project_paths(slug).metadata_file)
        if payload is None:
            return None
        return Project.from_dict(payload, slug=slug)

    def save(self, project: Project) -> Path:
        path = self.config.project_paths(project.slug).metadata_file
        _write_json(path, project.to_dict())
        return path

    def save_manifest(self, slug: str, manifest: DriveManifest) -> Path:
        path = self.config.project_paths(slug).manifest_file
        _write_json(path, manifest.to_dict())
        return path

    def list_projects(self) -> List[Project]:
        """Re-scan the projects directory; every call reflects the current disk state."""
        projects_dir = self.config.projects_dir
        if not projects_dir.is_dir():
            return []
        projects: List[Project] = []
        for entry in sorted(projects_dir.iterdir(), key=lambda path: path.name):
            if not entry.is_dir():
                continue
            project = self.load(entry.name)
            if project is not None:
                projects.append(project)
        return projects

    # ------------------------------------------------------------------
    # Internal helpers

    def _read(self, path: Path) -> Optional[Dict[str, Any]]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as exc:
            self.logger.warning("Ignoring unreadable metadata at %s: %s", path, exc)
            return None
        if not isinstance(data, dict):
            self.logger.warning("Ignoring metadata at %s: expected a JSON object", path)
            return None
        return data


def _write_json(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


__all__ = ["ProjectStore"]
