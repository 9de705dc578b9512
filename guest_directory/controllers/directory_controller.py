"""HTTP controller layer for guest search and room lookup."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from guest_directory.controllers.dependencies import get_directory_service
from guest_directory.domain.layout import floor_label
from guest_directory.domain.models import Placement, ViewCategory
from guest_directory.services.directory_service import GuestDirectoryService
from guest_directory.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(prefix="/directory", tags=["directory"])


class AssignmentResponse(BaseModel):
    person_name: str = Field(min_length=1)
    floor: int
    room_code: str = Field(min_length=1)
    bed_label: str
    view_category: Optional[ViewCategory] = None
    floor_label: str

    @classmethod
    def from_placement(cls, placement: Placement) -> "AssignmentResponse":
        return cls(
            person_name=placement.person_name,
            floor=placement.floor,
            room_code=placement.room_code,
            bed_label=placement.bed_label,
            view_category=placement.view_category,
            floor_label=floor_label(placement.floor),
        )


class SearchResponse(BaseModel):
    names: list[str]


class FindGuestRequest(BaseModel):
    """Raw user keystrokes; normalization happens in the service layer."""

    query: str = Field(max_length=200)


class FindGuestResponse(BaseModel):
    found: bool
    assignment: Optional[AssignmentResponse] = None
    candidates: Optional[list[str]] = None
    roommates: Optional[list[str]] = None


class RoommatesResponse(BaseModel):
    person_name: str
    roommates: list[str]


@router.get(
    "/search",
    response_model=SearchResponse,
    status_code=status.HTTP_200_OK,
)
async def search_guests(
    q: str = Query(default="", max_length=200),
    service: GuestDirectoryService = Depends(get_directory_service),
) -> SearchResponse:
    return SearchResponse(names=service.search(q))


@router.post(
    "/find",
    response_model=FindGuestResponse,
    status_code=status.HTTP_200_OK,
)
async def find_guest(
    payload: FindGuestRequest,
    service: GuestDirectoryService = Depends(get_directory_service),
) -> FindGuestResponse:
    """Resolve a typed name to a single placement or a disambiguation list."""
    try:
        result = service.find_guest(payload.query)
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected guest lookup failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to look up guest",
        ) from exc

    if result.found and result.assignment is not None:
        return FindGuestResponse(
            found=True,
            assignment=AssignmentResponse.from_placement(result.assignment),
            roommates=service.get_roommates(result.assignment),
        )
    return FindGuestResponse(found=False, candidates=result.candidates)


@router.get(
    "/guests/{person_name}/roommates",
    response_model=RoommatesResponse,
    status_code=status.HTTP_200_OK,
)
async def get_roommates(
    person_name: str,
    service: GuestDirectoryService = Depends(get_directory_service),
) -> RoommatesResponse:
    roommates = service.roommates_of(person_name)
    if roommates is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No room assignment for {person_name}",
        )
    return RoommatesResponse(person_name=person_name, roommates=roommates)
