"""Administrative room operations: reset, single moves, bulk import and audit."""

from __future__ import annotations

from typing import Iterable, Optional

from guest_directory.domain.constraints import audit_capacity
from guest_directory.domain.layout import bed_label, index_layout
from guest_directory.domain.models import AssignmentRecord, CapacityAudit, Placement
from guest_directory.repository.assignment_repository import AssignmentRepository
from guest_directory.services.allocation_service import AllocationService
from guest_directory.services.directory_service import GuestDirectoryService
from guest_directory.utils.config import Settings, get_settings
from guest_directory.utils.logger import get_logger


logger = get_logger(__name__)


class RoomAdminError(Exception):
    """Base exception for administrative room operations."""


class AdminValidationError(RoomAdminError):
    """Raised when an administrative request is malformed."""


class GuestNotFoundError(RoomAdminError):
    """Raised when the named person is not on the roster or in the directory."""


class UnknownRoomError(RoomAdminError):
    """Raised when a floor/room pair is not part of the room catalog."""


class RoomAdminService:
    def __init__(
        self,
        allocation_service: AllocationService,
        directory_service: GuestDirectoryService,
        repository: AssignmentRepository,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._allocation_service = allocation_service
        self._directory_service = directory_service
        self._repository = repository
        self._rooms = index_layout(allocation_service.layout)

    def _known_people(self) -> set[str]:
        names = {person.display_name for person in self._allocation_service.roster}
        names.update(placement.person_name for placement in self._directory_service.assignments())
        return names

    def reset_assignments(self) -> int:
        """Drop every override and re-run the allocator from scratch."""
        cleared = self._repository.clear_overrides()
        regenerated = self._allocation_service.cache.rebuild()
        self._directory_service.refresh()
        logger.info(
            "Assignments reset | overrides_cleared=%s | assignments=%s",
            cleared,
            len(regenerated),
        )
        return len(regenerated)

    def move_guest(self, person_name: str, floor: int, room_code: str) -> AssignmentRecord:
        name = person_name.strip()
        if not name:
            raise AdminValidationError("person_name must be non-empty")
        if name not in self._known_people():
            raise GuestNotFoundError(f"Unknown guest: {name}")
        room = self._rooms.get((floor, room_code))
        if room is None:
            raise UnknownRoomError(f"Room {room_code} does not exist on floor {floor}")

        taken = {
            placement.bed_label
            for placement in self._directory_service.assignments()
            if placement.room_key == room.key and placement.person_name != name
        }
        label = next(
            (
                bed_label(room, slot)
                for slot in range(1, room.bed_capacity + 1)
                if bed_label(room, slot) not in taken
            ),
            None,
        )
        if label is None:
            label = self._settings.unassigned_bed_label
            logger.warning(
                "Moving guest into a full room | name=%s | floor=%s | room=%s | capacity=%s",
                name,
                floor,
                room_code,
                room.bed_capacity,
            )

        record = AssignmentRecord(
            person_name=name,
            floor=room.floor,
            room_code=room.room_code,
            bed_label=label,
            view_category=room.view_category,
        )
        self._repository.upsert_override(record, source="manual")
        self._directory_service.refresh()
        logger.info(
            "Guest moved | name=%s | floor=%s | room=%s | bed=%s",
            name,
            floor,
            room_code,
            label,
        )
        return record

    def import_assignments(self, records: Iterable[AssignmentRecord]) -> int:
        """Persist historical records as overrides; capacity is reported, not enforced."""
        incoming = list(records)
        for record in incoming:
            if not record.person_name.strip():
                raise AdminValidationError("imported records must name a person")
        stored = self._repository.replace_overrides(incoming, source="import")
        self._directory_service.refresh()
        logger.info("Assignments imported | records=%s", stored)
        return stored

    def audit(self) -> CapacityAudit:
        placements: tuple[Placement, ...] = self._directory_service.assignments()
        placed = {placement.person_name for placement in placements}
        roster = self._allocation_service.roster
        return CapacityAudit(
            violations=audit_capacity(placements, self._allocation_service.layout),
            unassigned=[
                person.display_name for person in roster if person.display_name not in placed
            ],
            placed_fillers=[
                person.display_name
                for person in roster
                if person.is_filler and person.display_name in placed
            ],
        )
