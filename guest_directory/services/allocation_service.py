"""Deterministic room allocation and the process-level assignment cache."""

from __future__ import annotations

import math
from threading import Lock
from typing import Callable, Iterable, Mapping, Optional, Sequence, TypeVar

from guest_directory.domain.constraints import AllocationConfig, validate_allocation_config
from guest_directory.domain.layout import bed_label
from guest_directory.domain.models import Assignment, Cohort, Person, RoomSpec
from guest_directory.utils.config import Settings, get_settings
from guest_directory.utils.logger import get_logger


logger = get_logger(__name__)

T = TypeVar("T")

SEED_INCREMENT = 1
# Floats lose integer precision above 2**53; sin() only ever sees the low 32 bits.
SEED_MODULUS = 2**32


class SeededRandom:
    """Sine-hash generator: one draw per call, seed advances by a fixed step."""

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def next(self) -> float:
        x = math.sin(self._seed % SEED_MODULUS) * 10000
        self._seed += SEED_INCREMENT
        return x - math.floor(x)


def seeded_shuffle(items: Sequence[T], seed: int) -> list[T]:
    """Fisher-Yates permutation driven by ``SeededRandom``; input is not mutated."""
    shuffled = list(items)
    rng = SeededRandom(seed)
    for i in range(len(shuffled) - 1, 0, -1):
        j = min(i, math.floor(rng.next() * (i + 1)))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def fill_rooms(people: Sequence[Person], rooms: Iterable[RoomSpec]) -> list[Assignment]:
    """Fill rooms in catalog order, one bed slot per person, never beyond capacity."""
    assignments: list[Assignment] = []
    cursor = 0
    for room in rooms:
        if cursor >= len(people):
            break
        for slot in range(1, room.bed_capacity + 1):
            if cursor >= len(people):
                break
            assignments.append(
                Assignment(
                    person_name=people[cursor].display_name,
                    floor=room.floor,
                    room_code=room.room_code,
                    bed_label=bed_label(room, slot),
                    view_category=room.view_category,
                )
            )
            cursor += 1
    return assignments


def allocate(
    roster: Sequence[Person],
    layout: Sequence[RoomSpec],
    seed_a: int,
    seed_b: int,
    *,
    cohort_floors: Mapping[Cohort, tuple[int, ...]],
) -> list[Assignment]:
    """Partition, shuffle and bin-pack the roster into its cohorts' rooms.

    People beyond a cohort's total bed capacity are left out of the result
    and a warning is logged; an empty roster yields an empty list.
    """
    config = AllocationConfig(seed_a=seed_a, seed_b=seed_b, cohort_floors=cohort_floors)
    validate_allocation_config(config)

    assignments: list[Assignment] = []
    for cohort in Cohort:
        members = [person for person in roster if person.cohort is cohort]
        if not members:
            continue
        floors = set(config.cohort_floors[cohort])
        rooms = [room for room in layout if room.floor in floors]
        shuffled = seeded_shuffle(members, config.seed_for(cohort))
        placed = fill_rooms(shuffled, rooms)

        capacity = sum(room.bed_capacity for room in rooms)
        overflow = len(members) - len(placed)
        if overflow > 0:
            logger.warning(
                "Cohort exceeds bed capacity | cohort=%s | members=%s | capacity=%s | unassigned=%s",
                cohort.value,
                len(members),
                capacity,
                overflow,
            )
        logger.debug(
            "Cohort allocated | cohort=%s | placed=%s | rooms=%s",
            cohort.value,
            len(placed),
            len(rooms),
        )
        assignments.extend(placed)
    return assignments


class AssignmentCache:
    """Computes the canonical assignments at most once until invalidated."""

    def __init__(self, loader: Callable[[], list[Assignment]]) -> None:
        self._loader = loader
        self._lock = Lock()
        self._assignments: Optional[tuple[Assignment, ...]] = None

    @property
    def is_populated(self) -> bool:
        return self._assignments is not None

    def get(self) -> tuple[Assignment, ...]:
        cached = self._assignments
        if cached is not None:
            return cached
        with self._lock:
            if self._assignments is None:
                self._assignments = tuple(self._loader())
                logger.info("Assignment cache populated | assignments=%s", len(self._assignments))
            return self._assignments

    def invalidate(self) -> None:
        with self._lock:
            self._assignments = None
        logger.info("Assignment cache invalidated")

    def rebuild(self) -> tuple[Assignment, ...]:
        with self._lock:
            self._assignments = tuple(self._loader())
            logger.info("Assignment cache rebuilt | assignments=%s", len(self._assignments))
            return self._assignments


class AllocationService:
    """Owns the roster, room catalog and seeds behind the canonical allocation."""

    def __init__(
        self,
        roster: Sequence[Person],
        layout: Sequence[RoomSpec],
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._roster = tuple(roster)
        self._layout = tuple(layout)
        self._config = AllocationConfig(
            seed_a=self._settings.allocation_seed_a,
            seed_b=self._settings.allocation_seed_b,
            cohort_floors={
                Cohort.GROUP_A: tuple(self._settings.group_a_floors),
                Cohort.GROUP_B: tuple(self._settings.group_b_floors),
            },
        )
        validate_allocation_config(self._config)
        self.cache = AssignmentCache(self.generate)

    @property
    def roster(self) -> tuple[Person, ...]:
        return self._roster

    @property
    def layout(self) -> tuple[RoomSpec, ...]:
        return self._layout

    def generate(self) -> list[Assignment]:
        return allocate(
            self._roster,
            self._layout,
            self._config.seed_a,
            self._config.seed_b,
            cohort_floors=self._config.cohort_floors,
        )

    def assignments(self) -> tuple[Assignment, ...]:
        return self.cache.get()
