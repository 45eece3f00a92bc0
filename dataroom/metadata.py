"""Project metadata derivation."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from .models import DEFAULT_STATUS, DriveManifest, Project, SourceFile, format_timestamp
from .naming import display_name


def distinct_categories(files: Sequence[SourceFile]) -> List[str]:
    """Categories in first-seen order."""
    seen: List[str] = []
    for record in files:
        if record.category not in seen:
            seen.append(record.category)
    return seen


def file_set(files: Sequence[SourceFile]) -> List[str]:
    return sorted(record.filename for record in files)


def next_revision(previous: Optional[Project], files: Sequence[SourceFile]) -> int:
    """Revision for this run: bumped only when the set of source files changed."""
    if previous is None:
        return 0
    if previous.source_files is not None and previous.source_files == file_set(files):
        return previous.revision
    return previous.revision + 1


def build_project(
    slug: str,
    visibility: str,
    drive_id: str,
    files: Sequence[SourceFile],
    *,
    previous: Optional[Project] = None,
    now: datetime,
) -> Project:
    """Derive the project record for a generation run.

    ``createdAt``, ``status`` and ``tags`` are carried forward from ``previous``
    so that regeneration keeps first-seen history and manual curation.
    """
    timestamp = format_timestamp(now)
    created_at = previous.created_at if previous and previous.created_at else timestamp
    return Project(
        slug=slug,
        name=display_name(slug),
        visibility=visibility,
        status=previous.status if previous else DEFAULT_STATUS,
        tags=list(previous.tags) if previous else [],
        created_at=created_at,
        updated_at=timestamp,
        drive_folder=drive_id,
        revision=next_revision(previous, files),
        file_count=len(files),
        categories=distinct_categories(files),
        source_files=file_set(files),
    )


def build_manifest(drive_id: str, *, now: datetime) -> DriveManifest:
    return DriveManifest(folder_id=drive_id, scanned_at=format_timestamp(now))


__all__ = [
    "build_manifest",
    "build_project",
    "distinct_categories",
    "file_set",
    "next_revision",
]
