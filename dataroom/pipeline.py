"""Generation pipeline: raw files -> classification -> metadata + pages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from .classifier import FileClassifier
from .config import DataRoomConfig, ProjectPaths
from .locks import ProjectLock
from .logging import get_logger
from .metadata import build_manifest, build_project
from .models import VISIBILITY_TIERS, Project, SourceFile, utc_now
from .naming import extract_drive_id, sanitize_slug
from .pages import PageRenderer
from .stores import ProjectStore


@dataclass
class GenerationResult:
    """Outcome of a single generation run."""

    project: Project
    files: List[SourceFile]
    paths: ProjectPaths
    written: List[Path] = field(default_factory=list)
    revision_changed: bool = False


class Generator:
    """Runs the ingestion pipeline for one project at a time."""

    def __init__(
        self,
        config: DataRoomConfig,
        *,
        classifier: FileClassifier | None = None,
        renderer: PageRenderer | None = None,
        store: ProjectStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.classifier = classifier or FileClassifier()
        self.renderer = renderer or PageRenderer(config.generate.templates_dir)
        self.store = store or ProjectStore(config)
        self._clock = clock or utc_now
        self.logger = get_logger("pipeline")

    def run(self, drive: str, slug: str, visibility: Optional[str] = None) -> GenerationResult:
        """Regenerate every output of the project identified by ``slug``.

        Raises :class:`ValueError` for blank identifiers or an unknown
        visibility and :class:`~dataroom.locks.ProjectLockedError` when another
        run holds the project.
        """
        if not drive or not drive.strip():
            raise ValueError("A Drive folder id or URL is required")
        if not slug or not slug.strip():
            raise ValueError("A project slug is required")
        resolved_visibility = visibility or self.config.generate.default_visibility
        if resolved_visibility not in VISIBILITY_TIERS:
            raise ValueError(
                f"Unknown visibility '{resolved_visibility}'; expected one of {', '.join(VISIBILITY_TIERS)}"
            )

        project_slug = sanitize_slug(slug.strip())
        drive_id = extract_drive_id(drive.strip())
        paths = self.config.project_paths(project_slug)

        self.logger.info(
            "Generating data room %s (drive folder %s, visibility %s)",
            project_slug,
            drive_id,
            resolved_visibility,
        )
        with ProjectLock(paths.data_dir, project_slug):
            return self._generate(paths, project_slug, drive_id, resolved_visibility)

    def _generate(
        self,
        paths: ProjectPaths,
        slug: str,
        drive_id: str,
        visibility: str,
    ) -> GenerationResult:
        now = self._clock()
        written: List[Path] = []

        self.logger.debug("Setting up directories under %s", paths.data_dir)
        for directory in (paths.raw_dir, paths.mdx_dir, paths.assets_dir, paths.site_dir):
            directory.mkdir(parents=True, exist_ok=True)

        self.logger.debug("Writing Drive manifest placeholder")
        written.append(self.store.save_manifest(slug, build_manifest(drive_id, now=now)))

        files = self.classifier.classify_directory(paths.raw_dir)
        self.logger.info("Classified %d files in %s", len(files), paths.raw_dir)
        if not files:
            self.logger.info("No source files yet; place exported Drive files in %s", paths.raw_dir)

        previous = self.store.load(slug)
        project = build_project(
            slug,
            visibility,
            drive_id,
            files,
            previous=previous,
            now=now,
        )
        written.append(self.store.save(project))
        revision_changed = previous is None or previous.revision != project.revision
        self.logger.debug("Metadata written for %s at v%s", slug, project.version)

        pages = self.renderer.render(project, files)
        for name, content in pages.items():
            target = paths.site_dir / name
            target.write_text(content, encoding="utf-8")
            written.append(target)
        self.logger.info("Wrote %d pages to %s", len(pages.pages), paths.site_dir)

        return GenerationResult(
            project=project,
            files=files,
            paths=paths,
            written=written,
            revision_changed=revision_changed,
        )


__all__ = ["GenerationResult", "Generator"]
