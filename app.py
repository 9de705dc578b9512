"""
app.py: FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It loads the static roster and transliteration assets, wires all services,
registers routers, and warms the directory on startup.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from guest_directory.controllers.admin_controller import router as admin_router
from guest_directory.controllers.directory_controller import router as directory_router
from guest_directory.domain.layout import build_hotel_layout
from guest_directory.repository.assignment_repository import AssignmentRepository
from guest_directory.repository.static_data import load_roster, load_transliteration_table
from guest_directory.services.admin_service import RoomAdminService
from guest_directory.services.allocation_service import AllocationService
from guest_directory.services.directory_service import GuestDirectoryService
from guest_directory.utils.config import Settings, get_settings
from guest_directory.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Every service is constructed here and exposed through app.state, so the
    assignment cache and directory index are owned by this app instance
    rather than by module globals.
    """
    settings = settings or get_settings()

    # --- Static data (roster, room catalog, transliteration table) ---
    roster = load_roster(settings.roster_path)
    layout = build_hotel_layout(settings.hotel_floors)
    table = load_transliteration_table(settings.transliteration_path)

    # --- Repository (SQLite overrides) ---
    repository = AssignmentRepository(settings)

    # --- Services ---
    allocation_service = AllocationService(roster=roster, layout=layout, settings=settings)
    directory_service = GuestDirectoryService(
        allocation_service=allocation_service,
        repository=repository,
        table=table,
        settings=settings,
    )
    admin_service = RoomAdminService(
        allocation_service=allocation_service,
        directory_service=directory_service,
        repository=repository,
        settings=settings,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run startup initialization before accepting requests."""
        _startup(app)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # --- Routers ---
    app.include_router(directory_router)
    app.include_router(admin_router)

    # --- Inject services into app.state for dependency resolution ---
    app.state.settings = settings
    app.state.repository = repository
    app.state.allocation_service = allocation_service
    app.state.directory_service = directory_service
    app.state.admin_service = admin_service

    return app


def _startup(app: FastAPI) -> None:
    """
    Idempotent startup sequence. Safe to re-run on server restarts.

    Order matters:
      1. Schema must exist before overrides are read.
      2. The directory refresh populates the allocator cache and the index.
    """
    repository: AssignmentRepository = app.state.repository
    directory_service: GuestDirectoryService = app.state.directory_service

    logger.info("Startup: initializing database schema")
    repository.initialize_database()

    logger.info("Startup: building assignments and directory index")
    snapshot = directory_service.refresh()

    logger.info("Startup complete | placements=%s", len(snapshot.placements))


# Module-level app object for uvicorn
app = create_app()
