"""Polling watcher that regenerates data rooms when raw files change."""

from __future__ import annotations

import subprocess
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import List, Optional

from .classifier import list_source_files
from .config import DataRoomConfig
from .git import Publisher
from .locks import ProjectLock, ProjectLockedError
from .logging import get_logger
from .models import Project, parse_timestamp
from .pipeline import Generator
from .stores import ProjectStore


@dataclass
class CycleReport:
    """Per-cycle summary of what the watcher did with each project."""

    started_at: datetime
    synced: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def project_count(self) -> int:
        return len(self.synced) + len(self.unchanged) + len(self.skipped) + len(self.failed)


class SyncWatcher:
    """Re-scans projects on a fixed interval and syncs the ones with newer raw files."""

    def __init__(
        self,
        config: DataRoomConfig,
        *,
        generator: Generator | None = None,
        publisher: Publisher | None = None,
        store: ProjectStore | None = None,
    ) -> None:
        self.config = config
        self.store = store or ProjectStore(config)
        self.generator = generator or Generator(config, store=self.store)
        self.publisher = publisher or Publisher()
        self.logger = get_logger("watcher")
        self._stop = threading.Event()

    def discover_projects(self) -> List[Project]:
        """Projects on disk that declare a Drive folder; recomputed on every call."""
        return [project for project in self.store.list_projects() if project.drive_folder]

    def has_changes(self, project: Project) -> bool:
        """Return ``True`` when any raw file is strictly newer than the last sync."""
        last_sync = parse_timestamp(project.updated_at)
        raw_files = list_source_files(self.config.project_paths(project.slug).raw_dir)
        if last_sync is None:
            if raw_files:
                self.logger.debug("%s has no usable updatedAt; treating as changed", project.slug)
            return bool(raw_files)
        for path in raw_files:
            modified = datetime.fromtimestamp(path.stat().st_mtime, UTC)
            if modified > last_sync:
                self.logger.debug("%s changed: %s modified at %s", project.slug, path.name, modified)
                return True
        return False

    def sync_project(self, project: Project) -> None:
        """Regenerate ``project`` and commit the result; commit failures are ignored."""
        self.logger.info("Syncing %s", project.slug)
        self.generator.run(project.drive_folder, project.slug, project.visibility)
        if self.config.watch.commit:
            self._commit(project)
        self.logger.info("%s synced successfully", project.slug)

    def run_cycle(self) -> CycleReport:
        report = CycleReport(started_at=datetime.now(UTC))
        self.logger.info("Sync cycle at %s", report.started_at.isoformat())
        projects = self.discover_projects()
        self.logger.info("Found %d projects with Drive links", len(projects))

        for project in projects:
            lock = ProjectLock(self.config.project_paths(project.slug).data_dir, project.slug)
            if lock.is_held():
                self.logger.info("%s: sync already in progress, skipping", project.slug)
                report.skipped.append(project.slug)
                continue
            try:
                if not self.has_changes(project):
                    self.logger.info("%s: no changes", project.slug)
                    report.unchanged.append(project.slug)
                    continue
                self.sync_project(project)
            except ProjectLockedError:
                self.logger.info("%s: sync already in progress, skipping", project.slug)
                report.skipped.append(project.slug)
            except Exception as exc:
                self.logger.error("Failed to sync %s: %s", project.slug, exc)
                self.logger.debug("Sync failure details for %s", project.slug, exc_info=True)
                report.failed.append(project.slug)
            else:
                report.synced.append(project.slug)
        return report

    def run_forever(self, interval: Optional[int] = None, *, max_cycles: Optional[int] = None) -> int:
        """Run a cycle now and then every ``interval`` seconds until stopped.

        Returns the number of cycles executed.
        """
        period = interval if interval is not None else self.config.watch.interval
        if period <= 0:
            raise ValueError("interval must be a positive number of seconds")
        self.logger.info(
            "Drive sync watcher started (interval %ss, projects dir %s)",
            period,
            self.config.projects_dir,
        )
        cycles = 0
        while not self._stop.is_set():
            self.run_cycle()
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            if self._stop.wait(period):
                break
        return cycles

    def stop(self) -> None:
        self._stop.set()

    def _commit(self, project: Project) -> None:
        message = self.config.watch.commit_message.format(slug=project.slug)
        try:
            committed = self.publisher.commit_all(self.config.root, message=message)
        except (subprocess.CalledProcessError, OSError) as exc:
            self.logger.debug("Commit for %s skipped: %s", project.slug, exc)
            return
        if not committed:
            self.logger.debug("Nothing to commit for %s", project.slug)


__all__ = ["CycleReport", "SyncWatcher"]
