"""Core data models shared across dataroom components."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional

VISIBILITY_TIERS = ("public", "investor", "internal")
DEFAULT_VISIBILITY = "investor"
DEFAULT_STATUS = "active"
VERSION_SEED = "1"

FILE_TYPES = (
    "markdown",
    "document",
    "spreadsheet",
    "presentation",
    "pdf",
    "image",
    "unknown",
)

CATEGORIES = (
    "overview",
    "financials",
    "team",
    "product",
    "market",
    "legal",
    "pitch",
    "appendix",
)

MANIFEST_INSTRUCTIONS = (
    "Place exported Google Drive files in the /raw directory. "
    "Supported: .docx, .pdf, .xlsx, .csv, .pptx, .md, .txt"
)


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: object) -> Optional[datetime]:
    """Parse a stored timestamp, returning ``None`` when it is missing or malformed."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True)
class SourceFile:
    """A classified file found in a project's raw directory."""

    filename: str
    extension: str
    file_type: str
    category: str


@dataclass
class Project:
    """Project record persisted as ``metadata.json``."""

    slug: str
    name: str
    visibility: str
    created_at: str
    updated_at: str
    drive_folder: str
    status: str = DEFAULT_STATUS
    tags: List[str] = field(default_factory=list)
    revision: int = 0
    file_count: int = 0
    categories: List[str] = field(default_factory=list)
    source_files: Optional[List[str]] = None

    @property
    def version(self) -> str:
        return f"{VERSION_SEED}.{self.revision}"

    @property
    def updated_date(self) -> str:
        """Calendar date (``YYYY-MM-DD``) of the last update."""
        return self.updated_at.split("T", 1)[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slug": self.slug,
            "name": self.name,
            "visibility": self.visibility,
            "status": self.status,
            "tags": list(self.tags),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "version": self.version,
            "fileCount": self.file_count,
            "categories": list(self.categories),
            "driveFolder": self.drive_folder,
            "revision": self.revision,
            "sourceFiles": list(self.source_files) if self.source_files is not None else None,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any], *, slug: str | None = None) -> "Project":
        """Build a project from stored metadata, tolerating older or partial records."""
        resolved_slug = slug or _as_str(payload.get("slug")) or ""
        tags = payload.get("tags")
        categories = payload.get("categories")
        source_files = payload.get("sourceFiles")
        return cls(
            slug=resolved_slug,
            name=_as_str(payload.get("name")) or resolved_slug,
            visibility=_as_str(payload.get("visibility")) or DEFAULT_VISIBILITY,
            status=_as_str(payload.get("status")) or DEFAULT_STATUS,
            tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
            created_at=_as_str(payload.get("createdAt")) or "",
            updated_at=_as_str(payload.get("updatedAt")) or "",
            drive_folder=_as_str(payload.get("driveFolder")) or "",
            revision=_revision_from(payload),
            file_count=_as_int(payload.get("fileCount")),
            categories=[str(item) for item in categories] if isinstance(categories, list) else [],
            source_files=(
                [str(item) for item in source_files] if isinstance(source_files, list) else None
            ),
        )


@dataclass
class DriveManifest:
    """Placeholder record of a Drive folder scan."""

    folder_id: str
    scanned_at: str
    files: List[Dict[str, Any]] = field(default_factory=list)
    instructions: str = MANIFEST_INSTRUCTIONS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "folderId": self.folder_id,
            "scannedAt": self.scanned_at,
            "files": list(self.files),
            "instructions": self.instructions,
        }


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    return 0


def _revision_from(payload: Dict[str, Any]) -> int:
    revision = payload.get("revision")
    if isinstance(revision, int) and not isinstance(revision, bool) and revision >= 0:
        return revision
    # Records written before revisions were tracked only carry a version string.
    version = payload.get("version")
    if isinstance(version, str) and "." in version:
        minor = version.split(".", 1)[1]
        if minor.isdigit():
            return int(minor)
    return 0
