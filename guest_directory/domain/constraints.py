"""Domain-level validation rules for room allocation."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Mapping

from guest_directory.domain.layout import index_layout
from guest_directory.domain.models import CapacityViolation, Cohort, Placement, RoomSpec


MAX_SEED = 2**64


@dataclass(frozen=True)
class AllocationConfig:
    seed_a: int
    seed_b: int
    cohort_floors: Mapping[Cohort, tuple[int, ...]]

    def seed_for(self, cohort: Cohort) -> int:
        return self.seed_a if cohort is Cohort.GROUP_A else self.seed_b


def validate_allocation_config(config: AllocationConfig) -> None:
    if not 0 <= config.seed_a < MAX_SEED:
        raise ValueError("seed_a must be an unsigned 64-bit integer")
    if not 0 <= config.seed_b < MAX_SEED:
        raise ValueError("seed_b must be an unsigned 64-bit integer")

    owners: dict[int, Cohort] = {}
    for cohort in Cohort:
        floors = config.cohort_floors.get(cohort, ())
        if not floors:
            raise ValueError(f"cohort {cohort.value} must be assigned at least one floor")
        for floor in floors:
            owner = owners.setdefault(floor, cohort)
            if owner is not cohort:
                raise ValueError(
                    f"floor {floor} is assigned to both {owner.value} and {cohort.value}"
                )


def audit_capacity(
    placements: Iterable[Placement],
    layout: Iterable[RoomSpec],
) -> list[CapacityViolation]:
    """Report rooms holding more people than their beds, and unknown rooms."""
    rooms = index_layout(layout)
    occupants: dict[tuple[int, str], list[str]] = defaultdict(list)
    for placement in placements:
        occupants[placement.room_key].append(placement.person_name)

    violations: list[CapacityViolation] = []
    for key, names in occupants.items():
        room = rooms.get(key)
        if room is not None and len(names) <= room.bed_capacity:
            continue
        violations.append(
            CapacityViolation(
                floor=key[0],
                room_code=key[1],
                bed_capacity=room.bed_capacity if room is not None else None,
                occupants=list(names),
            )
        )
    return violations
