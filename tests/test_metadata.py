"""Tests for dataroom.metadata."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from dataroom.classifier import FileClassifier
from dataroom.metadata import build_manifest, build_project, distinct_categories
from dataroom.models import Project

NOW = datetime(2026, 3, 1, 9, 0, 0, tzinfo=UTC)


def _files(*names: str):
    classifier = FileClassifier()
    return [classifier.classify_file(name) for name in names]


def test_build_project_first_generation() -> None:
    files = _files("Executive-Summary.pdf", "Financial-Model.xlsx", "random-notes.txt")

    project = build_project("x-labs-alpha", "investor", "ABC123", files, now=NOW)

    assert project.name == "X Labs Alpha"
    assert project.created_at == "2026-03-01T09:00:00.000Z"
    assert project.updated_at == project.created_at
    assert project.version == "1.0"
    assert project.revision == 0
    assert project.file_count == 3
    assert project.categories == ["overview", "financials", "appendix"]
    assert project.status == "active"
    assert project.tags == []
    assert project.source_files == [
        "Executive-Summary.pdf",
        "Financial-Model.xlsx",
        "random-notes.txt",
    ]


def test_categories_keep_first_seen_order() -> None:
    files = _files("deck.pptx", "notes.txt", "pitch-v2.pdf", "legal.pdf")
    assert distinct_categories(files) == ["pitch", "appendix", "legal"]


def test_regeneration_preserves_created_at_and_curation() -> None:
    files = _files("deck.pptx")
    first = build_project("acme", "investor", "F1", files, now=NOW)
    first.status = "archived"
    first.tags = ["seed"]

    later = NOW + timedelta(days=2)
    second = build_project("acme", "public", "F1", files, previous=first, now=later)

    assert second.created_at == first.created_at
    assert second.updated_at == "2026-03-03T09:00:00.000Z"
    assert second.status == "archived"
    assert second.tags == ["seed"]
    assert second.visibility == "public"


def test_revision_only_increments_when_file_set_changes() -> None:
    first = build_project("acme", "investor", "F1", _files("deck.pptx"), now=NOW)
    same = build_project("acme", "investor", "F1", _files("deck.pptx"), previous=first, now=NOW)
    changed = build_project(
        "acme", "investor", "F1", _files("deck.pptx", "team.md"), previous=same, now=NOW
    )

    assert same.revision == 0
    assert same.version == "1.0"
    assert changed.revision == 1
    assert changed.version == "1.1"


def test_legacy_metadata_without_file_list_counts_as_changed() -> None:
    legacy = Project.from_dict(
        {
            "slug": "acme",
            "createdAt": "2025-01-01T00:00:00.000Z",
            "updatedAt": "2025-01-01T00:00:00.000Z",
            "version": "1.0",
            "driveFolder": "F1",
        }
    )

    project = build_project("acme", "investor", "F1", _files("deck.pptx"), previous=legacy, now=NOW)

    assert project.created_at == "2025-01-01T00:00:00.000Z"
    assert project.revision == 1


def test_to_dict_matches_metadata_schema() -> None:
    project = build_project("acme", "internal", "F1", _files("deck.pptx"), now=NOW)

    payload = project.to_dict()

    assert list(payload) == [
        "slug",
        "name",
        "visibility",
        "status",
        "tags",
        "createdAt",
        "updatedAt",
        "version",
        "fileCount",
        "categories",
        "driveFolder",
        "revision",
        "sourceFiles",
    ]
    assert payload["version"] == "1.0"
    assert Project.from_dict(payload) == project


def test_build_manifest_placeholder() -> None:
    manifest = build_manifest("F1", now=NOW).to_dict()

    assert manifest["folderId"] == "F1"
    assert manifest["scannedAt"] == "2026-03-01T09:00:00.000Z"
    assert manifest["files"] == []
    assert "/raw" in manifest["instructions"]
