"""Hotel room catalog derived from the per-floor room template."""

from __future__ import annotations

from typing import Iterable

from guest_directory.domain.models import BedCategory, RoomSpec, ViewCategory


ROOMS_PER_FLOOR = 10
ROOM_CAPACITIES = (4, 3, 4, 3, 4, 3, 4, 3, 3, 3)
KING_BED_ROOMS = frozenset({3, 5})
LAST_PRIMARY_VIEW_ROOM = 7

KING_BED_LABEL = "King Bed"

FLOOR_LABELS = {
    1: "الدور الأول",
    2: "الدور الثاني",
    3: "الدور الثالث",
}


def room_code(floor: int, room_number: int) -> str:
    return f"R{floor}-{room_number}"


def build_floor_layout(floor: int) -> list[RoomSpec]:
    """Return the rooms of one floor in catalog order (room 1 first)."""
    rooms: list[RoomSpec] = []
    for index in range(ROOMS_PER_FLOOR):
        number = index + 1
        rooms.append(
            RoomSpec(
                floor=floor,
                room_code=room_code(floor, number),
                bed_capacity=ROOM_CAPACITIES[index],
                bed_category=(
                    BedCategory.SHARED if number in KING_BED_ROOMS else BedCategory.INDIVIDUAL
                ),
                view_category=(
                    ViewCategory.PRIMARY_VIEW
                    if number <= LAST_PRIMARY_VIEW_ROOM
                    else ViewCategory.SECONDARY_VIEW
                ),
            )
        )
    return rooms


def build_hotel_layout(floors: Iterable[int]) -> list[RoomSpec]:
    layout: list[RoomSpec] = []
    for floor in floors:
        layout.extend(build_floor_layout(floor))
    return layout


def bed_label(room: RoomSpec, slot: int) -> str:
    """Label the 1-based ``slot`` of ``room``; a shared room's first slot is the king bed."""
    if room.bed_category is BedCategory.SHARED and slot == 1:
        return KING_BED_LABEL
    return f"Bed {slot}"


def floor_label(floor: int) -> str:
    return FLOOR_LABELS.get(floor, f"الدور {floor}")


def index_layout(layout: Iterable[RoomSpec]) -> dict[tuple[int, str], RoomSpec]:
    return {room.key: room for room in layout}
