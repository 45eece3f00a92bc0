"""Configuration loading for dataroom (.dataroom.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import DEFAULT_VISIBILITY, VISIBILITY_TIERS

CONFIG_FILENAME = ".dataroom.yml"
DEFAULT_INTERVAL = 300
DEFAULT_COMMIT_MESSAGE = "sync: update {slug} data room"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class PathsConfig:
    """Workspace-relative locations of project data and generated site content."""

    projects_dir: str = "content/projects"
    site_content_dir: str = "apps/docs-platform/src/content/projects"


@dataclass
class GenerateConfig:
    """Defaults for generation runs."""

    default_visibility: str = DEFAULT_VISIBILITY
    templates_dir: Optional[Path] = None


@dataclass
class WatchConfig:
    """Polling and commit behaviour of the sync watcher."""

    interval: int = DEFAULT_INTERVAL
    commit: bool = True
    commit_message: str = DEFAULT_COMMIT_MESSAGE


@dataclass
class ServiceConfig:
    """Bind address for service mode."""

    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class LoggingConfig:
    """Optional persistent log sink."""

    file: Optional[Path] = None


@dataclass(frozen=True)
class ProjectPaths:
    """Resolved on-disk locations for a single project."""

    data_dir: Path
    site_dir: Path

    @property
    def raw_dir(self) -> Path:
        return self.data_dir / "raw"

    @property
    def mdx_dir(self) -> Path:
        return self.data_dir / "mdx"

    @property
    def assets_dir(self) -> Path:
        return self.data_dir / "assets"

    @property
    def metadata_file(self) -> Path:
        return self.data_dir / "metadata.json"

    @property
    def manifest_file(self) -> Path:
        return self.data_dir / "drive-manifest.json"


@dataclass
class DataRoomConfig:
    """Represents the settings defined in .dataroom.yml."""

    root: Path
    paths: PathsConfig = field(default_factory=PathsConfig)
    generate: GenerateConfig = field(default_factory=GenerateConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def projects_dir(self) -> Path:
        return self.root / self.paths.projects_dir

    @property
    def site_content_dir(self) -> Path:
        return self.root / self.paths.site_content_dir

    def project_paths(self, slug: str) -> ProjectPaths:
        return ProjectPaths(
            data_dir=self.projects_dir / slug,
            site_dir=self.site_content_dir / slug,
        )


def load_config(config_path: Path) -> DataRoomConfig:
    """Load configuration from ``config_path`` (a file or the workspace root)."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DataRoomConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    paths = PathsConfig()
    paths_data = _as_dict(data.get("paths"))
    if paths_data:
        paths.projects_dir = _as_str(paths_data.get("projects_dir")) or paths.projects_dir
        paths.site_content_dir = (
            _as_str(paths_data.get("site_content_dir")) or paths.site_content_dir
        )

    generate = GenerateConfig()
    generate_data = _as_dict(data.get("generate"))
    if generate_data:
        visibility = _as_str(generate_data.get("default_visibility"))
        if visibility is not None:
            if visibility not in VISIBILITY_TIERS:
                raise ConfigError(
                    f"generate.default_visibility must be one of {', '.join(VISIBILITY_TIERS)}"
                )
            generate.default_visibility = visibility
        templates_dir = _as_str(generate_data.get("templates_dir"))
        if templates_dir:
            generate.templates_dir = root / templates_dir

    watch = WatchConfig()
    watch_data = _as_dict(data.get("watch"))
    if watch_data:
        if "interval" in watch_data:
            interval = _as_int(watch_data.get("interval"))
            if interval is None or interval <= 0:
                raise ConfigError("watch.interval must be a positive number of seconds")
            watch.interval = interval
        commit = _as_bool(watch_data.get("commit"))
        if commit is not None:
            watch.commit = commit
        watch.commit_message = _as_str(watch_data.get("commit_message")) or watch.commit_message

    service = ServiceConfig()
    service_data = _as_dict(data.get("service"))
    if service_data:
        service.host = _as_str(service_data.get("host")) or service.host
        port = _as_int(service_data.get("port"))
        if port is not None:
            service.port = port

    logging_config = LoggingConfig()
    logging_data = _as_dict(data.get("logging"))
    if logging_data:
        log_file = _as_str(logging_data.get("file"))
        if log_file:
            logging_config.file = root / log_file

    return DataRoomConfig(
        root=root,
        paths=paths,
        generate=generate,
        watch=watch,
        service=service,
        logging=logging_config,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DataRoomConfig",
    "GenerateConfig",
    "LoggingConfig",
    "PathsConfig",
    "ProjectPaths",
    "ServiceConfig",
    "WatchConfig",
    "load_config",
]
