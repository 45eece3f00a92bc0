"""FastAPI application entrypoint for dataroom service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .. import __version__
from ..config import DataRoomConfig
from ..locks import ProjectLockedError
from ..models import Project
from ..pipeline import Generator
from ..stores import ProjectStore
from ..watcher import SyncWatcher


class GenerateRequest(BaseModel):
    drive: str
    slug: str
    visibility: Optional[str] = None


class ProjectSummary(BaseModel):
    slug: str
    name: str
    visibility: str
    status: str
    version: str
    fileCount: int
    categories: List[str]
    updatedAt: str
    driveFolder: str


class GenerateResponse(BaseModel):
    project: ProjectSummary
    written: List[str]


class SyncResponse(BaseModel):
    synced: List[str]
    unchanged: List[str]
    skipped: List[str]
    failed: List[str]


class HealthResponse(BaseModel):
    status: str


def create_app(
    config: DataRoomConfig,
    *,
    generator_factory: Callable[[], Generator] | None = None,
    watcher_factory: Callable[[], SyncWatcher] | None = None,
) -> FastAPI:
    """Create the FastAPI application exposing dataroom operations."""

    app = FastAPI(title="Data Room Service", version=__version__)
    store = ProjectStore(config)

    async def get_generator() -> Generator:
        if generator_factory is not None:
            return generator_factory()
        return Generator(config, store=store)

    async def get_watcher() -> SyncWatcher:
        if watcher_factory is not None:
            return watcher_factory()
        return SyncWatcher(config, store=store)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/projects", response_model=List[ProjectSummary])
    async def list_projects() -> List[ProjectSummary]:
        return [_summarise(project) for project in store.list_projects()]

    @app.post("/projects", response_model=GenerateResponse)
    async def generate_project(
        payload: GenerateRequest,
        generator: Generator = Depends(get_generator),
    ) -> GenerateResponse:
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(
            None,
            lambda: generator.run(payload.drive, payload.slug, payload.visibility),
        )
        return GenerateResponse(
            project=_summarise(result.project),
            written=[str(path) for path in result.written],
        )

    @app.post("/sync", response_model=SyncResponse)
    async def sync(watcher: SyncWatcher = Depends(get_watcher)) -> SyncResponse:
        loop = asyncio.get_running_loop()
        report = await loop.run_in_executor(None, watcher.run_cycle)
        return SyncResponse(
            synced=report.synced,
            unchanged=report.unchanged,
            skipped=report.skipped,
            failed=report.failed,
        )

    @app.exception_handler(ProjectLockedError)
    async def locked_handler(_: Any, exc: ProjectLockedError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def _summarise(project: Project) -> ProjectSummary:
    return ProjectSummary(
        slug=project.slug,
        name=project.name,
        visibility=project.visibility,
        status=project.status,
        version=project.version,
        fileCount=project.file_count,
        categories=list(project.categories),
        updatedAt=project.updated_at,
        driveFolder=project.drive_folder,
    )


def run_service(
    config: DataRoomConfig, host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    app = create_app(config)
    uvicorn.run(app, host=host, port=port)
