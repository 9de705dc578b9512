"""Guest lookup facade over the effective assignments and the search index."""

from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Optional, Sequence

from guest_directory.domain.constraints import audit_capacity
from guest_directory.domain.models import GuestLookupResult, Placement, RoomSpec
from guest_directory.repository.assignment_repository import AssignmentRepository
from guest_directory.services.allocation_service import AllocationService
from guest_directory.services.search_service import DirectoryIndex, build_index, query
from guest_directory.services.transliteration import TransliterationTable
from guest_directory.utils.config import Settings, get_settings
from guest_directory.utils.logger import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class DirectorySnapshot:
    placements: tuple[Placement, ...]
    index: DirectoryIndex
    by_name: dict[str, Placement]


def merge_overrides(
    generated: Sequence[Placement],
    overrides: Sequence[Placement],
) -> list[Placement]:
    """Replace generated placements by person name; unknown people are appended."""
    override_by_name = {record.person_name: record for record in overrides}
    merged: list[Placement] = []
    used: set[str] = set()
    for assignment in generated:
        record = override_by_name.get(assignment.person_name)
        if record is None:
            merged.append(assignment)
            continue
        if assignment.person_name not in used:
            merged.append(record)
            used.add(assignment.person_name)
    for record in overrides:
        if record.person_name not in used:
            merged.append(record)
            used.add(record.person_name)
    return merged


def build_snapshot(placements: Sequence[Placement]) -> DirectorySnapshot:
    by_name: dict[str, Placement] = {}
    for placement in placements:
        by_name.setdefault(placement.person_name, placement)
    return DirectorySnapshot(
        placements=tuple(placements),
        index=build_index(placement.person_name for placement in placements),
        by_name=by_name,
    )


class GuestDirectoryService:
    """Answers "where is this guest staying" and "who shares their room"."""

    def __init__(
        self,
        allocation_service: AllocationService,
        repository: AssignmentRepository,
        table: TransliterationTable,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._allocation_service = allocation_service
        self._repository = repository
        self._table = table
        self._rebuild_lock = Lock()
        self._snapshot: Optional[DirectorySnapshot] = None

    @property
    def layout(self) -> tuple[RoomSpec, ...]:
        return self._allocation_service.layout

    def refresh(self) -> DirectorySnapshot:
        """Rebuild from the cache plus persisted overrides and swap it in whole."""
        with self._rebuild_lock:
            generated = self._allocation_service.assignments()
            overrides = self._repository.list_overrides()
            snapshot = build_snapshot(merge_overrides(generated, overrides))

            if overrides:
                for violation in audit_capacity(snapshot.placements, self.layout):
                    logger.warning(
                        "Override exceeds room capacity | floor=%s | room=%s | capacity=%s | occupants=%s",
                        violation.floor,
                        violation.room_code,
                        violation.bed_capacity,
                        len(violation.occupants),
                    )

            self._snapshot = snapshot
        logger.info(
            "Directory index rebuilt | placements=%s | overrides=%s",
            len(snapshot.placements),
            len(overrides),
        )
        return snapshot

    def _current(self) -> DirectorySnapshot:
        snapshot = self._snapshot
        if snapshot is None:
            snapshot = self.refresh()
        return snapshot

    def assignments(self) -> tuple[Placement, ...]:
        return self._current().placements

    def search(self, query_text: str) -> list[str]:
        return query(
            query_text,
            self._current().index,
            self._table,
            min_length=self._settings.search_min_query_length,
        )

    def assignment_for(self, person_name: str) -> Optional[Placement]:
        return self._current().by_name.get(person_name)

    def find_guest(self, query_text: str) -> GuestLookupResult:
        if not query_text or not query_text.strip():
            return GuestLookupResult(found=False)

        snapshot = self._current()
        candidates = query(
            query_text,
            snapshot.index,
            self._table,
            min_length=self._settings.search_min_query_length,
        )

        if len(candidates) == 1:
            assignment = snapshot.by_name.get(candidates[0])
            if assignment is not None:
                return GuestLookupResult(found=True, assignment=assignment)
            logger.info("Guest matched without placement | name=%s", candidates[0])

        if len(candidates) > 1:
            return GuestLookupResult(found=False, candidates=candidates)

        return GuestLookupResult(found=False)

    def get_roommates(self, assignment: Placement) -> list[str]:
        return [
            placement.person_name
            for placement in self._current().placements
            if placement.room_key == assignment.room_key
            and placement.person_name != assignment.person_name
        ]

    def roommates_of(self, person_name: str) -> Optional[list[str]]:
        assignment = self.assignment_for(person_name)
        if assignment is None:
            return None
        return self.get_roommates(assignment)
