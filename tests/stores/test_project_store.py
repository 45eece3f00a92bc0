"""Tests for the project metadata store."""

from __future__ import annotations

from dataroom.models import DriveManifest, Project
from dataroom.stores import ProjectStore


def _project(slug: str) -> Project:
    return Project(
        slug=slug,
        name=slug.title(),
        visibility="investor",
        created_at="2026-01-01T00:00:00.000Z",
        updated_at="2026-01-02T00:00:00.000Z",
        drive_folder="F1",
        file_count=2,
        categories=["pitch"],
        source_files=["a.pdf", "b.pdf"],
    )


def test_store_round_trip(workspace) -> None:
    store = ProjectStore(workspace.config())
    project = _project("acme")

    path = store.save(project)

    assert path == workspace.config().project_paths("acme").metadata_file
    assert path.read_text(encoding="utf-8").startswith('{\n  "slug": "acme",')
    assert store.load("acme") == project


def test_store_load_missing_returns_none(workspace) -> None:
    assert ProjectStore(workspace.config()).load("nope") is None


def test_store_ignores_corrupt_metadata(workspace) -> None:
    path = workspace.config().project_paths("acme").metadata_file
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")

    assert ProjectStore(workspace.config()).load("acme") is None


def test_store_ignores_non_object_metadata(workspace) -> None:
    workspace.config().project_paths("acme").data_dir.mkdir(parents=True)
    workspace.config().project_paths("acme").metadata_file.write_text("[]", encoding="utf-8")

    assert ProjectStore(workspace.config()).load("acme") is None


def test_list_projects_rescans_disk(workspace) -> None:
    store = ProjectStore(workspace.config())
    assert store.list_projects() == []

    store.save(_project("beta"))
    store.save(_project("alpha"))

    assert [project.slug for project in store.list_projects()] == ["alpha", "beta"]


def test_save_manifest(workspace) -> None:
    store = ProjectStore(workspace.config())

    path = store.save_manifest("acme", DriveManifest(folder_id="F1", scanned_at="now"))

    assert path.name == "drive-manifest.json"
    assert '"folderId": "F1"' in path.read_text(encoding="utf-8")
