"""Domain models for room allocation and the guest directory."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Cohort(str, Enum):
    GROUP_A = "group_a"
    GROUP_B = "group_b"


class BedCategory(str, Enum):
    SHARED = "shared"
    INDIVIDUAL = "individual"


class ViewCategory(str, Enum):
    PRIMARY_VIEW = "primary_view"
    SECONDARY_VIEW = "secondary_view"


@dataclass(frozen=True)
class Person:
    display_name: str
    cohort: Cohort
    is_filler: bool = False


@dataclass(frozen=True)
class RoomSpec:
    floor: int
    room_code: str
    bed_capacity: int
    bed_category: BedCategory
    view_category: ViewCategory

    @property
    def key(self) -> tuple[int, str]:
        return (self.floor, self.room_code)


@dataclass(frozen=True)
class Placement:
    """Person-to-bed placement shared by generated and ingested assignments."""

    person_name: str
    floor: int
    room_code: str
    bed_label: str
    view_category: Optional[ViewCategory]

    @property
    def room_key(self) -> tuple[int, str]:
        return (self.floor, self.room_code)


@dataclass(frozen=True)
class Assignment(Placement):
    """Placement produced by the allocator; always within room capacity."""


@dataclass(frozen=True)
class AssignmentRecord(Placement):
    """Placement ingested from persisted overrides; trusted as-is."""


@dataclass(frozen=True)
class DirectoryEntry:
    original_name: str
    normalized_arabic: str


@dataclass(frozen=True)
class GuestLookupResult:
    found: bool
    assignment: Optional[Placement] = None
    candidates: Optional[list[str]] = None


@dataclass(frozen=True)
class CapacityViolation:
    floor: int
    room_code: str
    bed_capacity: Optional[int]
    occupants: list[str]

    @property
    def excess(self) -> int:
        if self.bed_capacity is None:
            return len(self.occupants)
        return max(0, len(self.occupants) - self.bed_capacity)


@dataclass(frozen=True)
class CapacityAudit:
    violations: list[CapacityViolation]
    unassigned: list[str]
    placed_fillers: list[str]
