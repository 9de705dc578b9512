"""Controller layer for administrative room management endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from guest_directory.controllers.dependencies import get_admin_service
from guest_directory.controllers.directory_controller import AssignmentResponse
from guest_directory.domain.models import AssignmentRecord, ViewCategory
from guest_directory.services.admin_service import (
    AdminValidationError,
    GuestNotFoundError,
    RoomAdminService,
    UnknownRoomError,
)
from guest_directory.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(prefix="/admin/rooms", tags=["admin"])


class ResetResponse(BaseModel):
    status: str
    assignments_count: int = Field(ge=0)


class MoveGuestRequest(BaseModel):
    person_name: str = Field(min_length=1)
    floor: int = Field(gt=0)
    room_code: str = Field(min_length=1)

    @field_validator("person_name", "room_code")
    @classmethod
    def strip_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("value must be non-empty")
        return stripped


class ImportRecord(BaseModel):
    person_name: str = Field(min_length=1)
    floor: int = Field(gt=0)
    room_code: str = Field(min_length=1)
    bed_label: str = Field(min_length=1)
    view_category: Optional[ViewCategory] = None


class ImportRequest(BaseModel):
    records: list[ImportRecord]


class ImportResponse(BaseModel):
    status: str
    imported_count: int = Field(ge=0)


class CapacityViolationResponse(BaseModel):
    floor: int
    room_code: str
    bed_capacity: Optional[int] = None
    occupants: list[str]
    excess: int = Field(ge=0)


class AuditResponse(BaseModel):
    violations: list[CapacityViolationResponse]
    unassigned: list[str]
    placed_fillers: list[str]


@router.post(
    "/reset",
    response_model=ResetResponse,
    status_code=status.HTTP_200_OK,
)
async def reset_assignments(
    service: RoomAdminService = Depends(get_admin_service),
) -> ResetResponse:
    """Discard every override and re-run the deterministic allocator."""
    try:
        count = service.reset_assignments()
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected reset failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to reset assignments",
        ) from exc
    return ResetResponse(status="reset", assignments_count=count)


@router.post(
    "/move",
    response_model=AssignmentResponse,
    status_code=status.HTTP_200_OK,
)
async def move_guest(
    payload: MoveGuestRequest,
    service: RoomAdminService = Depends(get_admin_service),
) -> AssignmentResponse:
    try:
        record = service.move_guest(
            person_name=payload.person_name,
            floor=payload.floor,
            room_code=payload.room_code,
        )
        return AssignmentResponse.from_placement(record)
    except AdminValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except (GuestNotFoundError, UnknownRoomError) as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected move failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to move guest",
        ) from exc


@router.post(
    "/import",
    response_model=ImportResponse,
    status_code=status.HTTP_200_OK,
)
async def import_assignments(
    payload: ImportRequest,
    service: RoomAdminService = Depends(get_admin_service),
) -> ImportResponse:
    """Load historical assignments as overrides; over-full rooms are accepted."""
    try:
        count = service.import_assignments(
            AssignmentRecord(
                person_name=item.person_name.strip(),
                floor=item.floor,
                room_code=item.room_code.strip(),
                bed_label=item.bed_label,
                view_category=item.view_category,
            )
            for item in payload.records
        )
    except AdminValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return ImportResponse(status="imported", imported_count=count)


@router.get(
    "/audit",
    response_model=AuditResponse,
    status_code=status.HTTP_200_OK,
)
async def audit_rooms(
    service: RoomAdminService = Depends(get_admin_service),
) -> AuditResponse:
    audit = service.audit()
    return AuditResponse(
        violations=[
            CapacityViolationResponse(
                floor=violation.floor,
                room_code=violation.room_code,
                bed_capacity=violation.bed_capacity,
                occupants=violation.occupants,
                excess=violation.excess,
            )
            for violation in audit.violations
        ],
        unassigned=audit.unassigned,
        placed_fillers=audit.placed_fillers,
    )
