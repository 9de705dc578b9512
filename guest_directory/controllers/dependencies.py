"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from guest_directory.services.admin_service import RoomAdminService
from guest_directory.services.directory_service import GuestDirectoryService


def get_directory_service(request: Request) -> GuestDirectoryService:
    service = getattr(request.app.state, "directory_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Directory service is not initialized",
        )
    return service


def get_admin_service(request: Request) -> RoomAdminService:
    service = getattr(request.app.state, "admin_service", None)
    if service is None:
        directory_service = getattr(request.app.state, "directory_service", None)
        allocation_service = getattr(request.app.state, "allocation_service", None)
        repository = getattr(request.app.state, "repository", None)
        if (
            directory_service is not None
            and allocation_service is not None
            and repository is not None
        ):
            service = RoomAdminService(
                allocation_service=allocation_service,
                directory_service=directory_service,
                repository=repository,
                settings=getattr(request.app.state, "settings", None),
            )
            request.app.state.admin_service = service
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Room admin service is not initialized",
        )
    return service
