from __future__ import annotations

import logging
from dataclasses import replace

import pytest

from guest_directory.domain.constraints import audit_capacity
from guest_directory.domain.layout import build_hotel_layout
from guest_directory.domain.models import (
    Assignment,
    AssignmentRecord,
    BedCategory,
    Cohort,
    Person,
    RoomSpec,
    ViewCategory,
)
from guest_directory.repository.assignment_repository import AssignmentRepository
from guest_directory.repository.static_data import load_roster, load_transliteration_table
from guest_directory.services.admin_service import (
    AdminValidationError,
    GuestNotFoundError,
    RoomAdminService,
    UnknownRoomError,
)
from guest_directory.services.allocation_service import AllocationService
from guest_directory.services.directory_service import GuestDirectoryService, merge_overrides
from guest_directory.utils.config import get_settings


def _build_test_settings(tmp_path, filename: str, **overrides):
    get_settings.cache_clear()
    base = get_settings()
    values = {
        "database_path": tmp_path / filename,
        "group_a_floors": (1,),
        "group_b_floors": (2,),
    }
    values.update(overrides)
    return replace(base, **values)


def _room(floor: int, number: int, capacity: int, shared: bool = False) -> RoomSpec:
    return RoomSpec(
        floor=floor,
        room_code=f"R{floor}-{number}",
        bed_capacity=capacity,
        bed_category=BedCategory.SHARED if shared else BedCategory.INDIVIDUAL,
        view_category=ViewCategory.PRIMARY_VIEW if number <= 7 else ViewCategory.SECONDARY_VIEW,
    )


def _build_services(
    tmp_path,
    filename: str,
    roster: list[Person],
    layout: list[RoomSpec],
    **overrides,
):
    settings = _build_test_settings(tmp_path, filename, **overrides)
    repository = AssignmentRepository(settings)
    repository.initialize_database()
    allocation_service = AllocationService(roster=roster, layout=layout, settings=settings)
    directory_service = GuestDirectoryService(
        allocation_service=allocation_service,
        repository=repository,
        table=load_transliteration_table(settings.transliteration_path),
        settings=settings,
    )
    admin_service = RoomAdminService(
        allocation_service=allocation_service,
        directory_service=directory_service,
        repository=repository,
        settings=settings,
    )
    return directory_service, admin_service, repository


SMALL_ROSTER = [
    Person(display_name="Mina Fayek", cohort=Cohort.GROUP_A),
    Person(display_name="Mina Shawky", cohort=Cohort.GROUP_A),
    Person(display_name="George Magdy", cohort=Cohort.GROUP_A),
    Person(display_name="Sara Maher", cohort=Cohort.GROUP_B),
    Person(display_name="Mary Nabil", cohort=Cohort.GROUP_B, is_filler=True),
]

SMALL_LAYOUT = [
    _room(1, 1, 2),
    _room(1, 3, 2, shared=True),
    _room(2, 1, 3),
]


# --- Example scenario ---

def test_two_minas_sharing_one_room(tmp_path):
    roster = SMALL_ROSTER[:2]
    directory, _, _ = _build_services(tmp_path, "example.db", roster, [_room(1, 1, 2), _room(2, 1, 2)])

    placements = directory.assignments()
    assert sorted(item.person_name for item in placements) == ["Mina Fayek", "Mina Shawky"]
    assert {item.room_code for item in placements} == {"R1-1"}
    assert sorted(item.bed_label for item in placements) == ["Bed 1", "Bed 2"]

    ambiguous = directory.find_guest("مينا")
    assert ambiguous.found is False
    assert ambiguous.assignment is None
    assert sorted(ambiguous.candidates) == ["Mina Fayek", "Mina Shawky"]

    exact = directory.find_guest("Mina Fayek")
    assert exact.found is True
    assert exact.assignment == directory.assignment_for("Mina Fayek")
    assert directory.get_roommates(exact.assignment) == ["Mina Shawky"]

    other = directory.assignment_for("Mina Shawky")
    assert directory.get_roommates(other) == ["Mina Fayek"]


# --- Lookup outcomes ---

def test_find_guest_without_matches_returns_no_candidates(tmp_path):
    directory, _, _ = _build_services(tmp_path, "none.db", SMALL_ROSTER, SMALL_LAYOUT)

    result = directory.find_guest("zzzz")
    assert result.found is False
    assert result.candidates is None


def test_find_guest_blank_and_short_queries(tmp_path):
    directory, _, _ = _build_services(tmp_path, "blank.db", SMALL_ROSTER, SMALL_LAYOUT)

    assert directory.find_guest("").found is False
    assert directory.find_guest("   ").candidates is None
    assert directory.find_guest("M").candidates is None


def test_search_returns_names_in_allocator_order(tmp_path):
    directory, _, _ = _build_services(tmp_path, "order.db", SMALL_ROSTER, SMALL_LAYOUT)

    order = [item.person_name for item in directory.assignments()]
    found = directory.search("mina")
    assert found == [name for name in order if name.startswith("Mina")]


def test_roommates_never_include_self_on_bundled_data(tmp_path):
    roster = load_roster(_build_test_settings(tmp_path, "unused.db").roster_path)
    directory, _, _ = _build_services(
        tmp_path,
        "bundled.db",
        roster,
        build_hotel_layout((1, 2, 3)),
        group_a_floors=(2, 3),
        group_b_floors=(1,),
    )

    for placement in directory.assignments():
        roommates = directory.get_roommates(placement)
        assert placement.person_name not in roommates
        assert len(roommates) <= 3


def test_empty_layout_leaves_everyone_unassigned(tmp_path):
    roster = load_roster(_build_test_settings(tmp_path, "unused.db").roster_path)
    directory, admin, _ = _build_services(tmp_path, "bundled_lookup.db", roster, [])

    # Nobody is placed without rooms; the index is built from placements only.
    assert directory.assignments() == ()
    assert directory.find_guest("مينا").found is False
    assert len(admin.audit().unassigned) == len(roster)


def test_roommates_of_unknown_person_is_none(tmp_path):
    directory, _, _ = _build_services(tmp_path, "unknown.db", SMALL_ROSTER, SMALL_LAYOUT)
    assert directory.roommates_of("Nobody") is None


# --- Overrides ---

def test_merge_overrides_replaces_in_place_and_appends_unknown():
    generated = [
        Assignment("A", 1, "R1-1", "Bed 1", None),
        Assignment("B", 1, "R1-1", "Bed 2", None),
    ]
    overrides = [
        AssignmentRecord("C", 2, "R2-1", "Bed 1", None),
        AssignmentRecord("A", 2, "R2-1", "Bed 2", None),
    ]

    merged = merge_overrides(generated, overrides)

    assert [item.person_name for item in merged] == ["A", "B", "C"]
    assert isinstance(merged[0], AssignmentRecord)
    assert isinstance(merged[1], Assignment)


def test_move_guest_is_reflected_in_next_lookup(tmp_path):
    directory, admin, repository = _build_services(tmp_path, "move.db", SMALL_ROSTER, SMALL_LAYOUT)
    before = directory.find_guest("George Magdy").assignment
    assert before.floor == 1

    record = admin.move_guest("George Magdy", 2, "R2-1")

    assert record.bed_label == "Bed 3"
    assert record.view_category is ViewCategory.PRIMARY_VIEW
    assert repository.count_overrides() == 1

    after = directory.find_guest("George Magdy")
    assert after.found is True
    assert after.assignment == record
    assert sorted(directory.get_roommates(after.assignment)) == ["Mary Nabil", "Sara Maher"]


def test_move_into_full_room_uses_placeholder_bed(tmp_path, caplog):
    directory, admin, _ = _build_services(tmp_path, "full.db", SMALL_ROSTER, SMALL_LAYOUT)
    admin.move_guest("George Magdy", 2, "R2-1")

    with caplog.at_level(logging.WARNING):
        record = admin.move_guest("Mina Fayek", 2, "R2-1")

    assert record.bed_label == "Unassigned Bed"
    assert "Moving guest into a full room" in caplog.text
    assert len([item for item in directory.assignments() if item.room_code == "R2-1"]) == 4


def test_move_validation_errors(tmp_path):
    _, admin, _ = _build_services(tmp_path, "errors.db", SMALL_ROSTER, SMALL_LAYOUT)

    with pytest.raises(UnknownRoomError):
        admin.move_guest("George Magdy", 1, "R1-9")
    with pytest.raises(GuestNotFoundError):
        admin.move_guest("Nobody", 1, "R1-1")
    with pytest.raises(AdminValidationError):
        admin.move_guest("  ", 1, "R1-1")


def test_imported_records_may_exceed_capacity(tmp_path, caplog):
    directory, admin, _ = _build_services(tmp_path, "import.db", SMALL_ROSTER, SMALL_LAYOUT)
    assert audit_capacity(directory.assignments(), SMALL_LAYOUT) == []

    records = [
        AssignmentRecord(name, 1, "R1-1", f"Bed {position}", ViewCategory.PRIMARY_VIEW)
        for position, name in enumerate(
            ["Mina Fayek", "Mina Shawky", "George Magdy", "Sara Maher"],
            start=1,
        )
    ]
    with caplog.at_level(logging.WARNING):
        stored = admin.import_assignments(records)

    assert stored == 4
    assert "Override exceeds room capacity" in caplog.text

    audit = admin.audit()
    over = [violation for violation in audit.violations if violation.room_code == "R1-1"]
    assert len(over) == 1
    assert over[0].excess == 2

    result = directory.find_guest("Sara Maher")
    assert result.found is True
    assert isinstance(result.assignment, AssignmentRecord)
    assert result.assignment.room_code == "R1-1"


def test_override_places_person_left_out_by_allocator(tmp_path):
    roster = SMALL_ROSTER + [
        Person(display_name="Extra Guest", cohort=Cohort.GROUP_A),
        Person(display_name="Late Guest", cohort=Cohort.GROUP_A),
    ]
    directory, admin, _ = _build_services(tmp_path, "overflow.db", roster, SMALL_LAYOUT)

    unassigned = admin.audit().unassigned
    assert len(unassigned) == 1
    left_out = unassigned[0]
    assert directory.assignment_for(left_out) is None

    admin.move_guest(left_out, 2, "R2-1")

    assert directory.assignment_for(left_out) is not None
    assert directory.assignments()[-1].person_name == left_out
    assert admin.audit().unassigned == []


def test_reset_discards_overrides(tmp_path):
    directory, admin, repository = _build_services(tmp_path, "reset.db", SMALL_ROSTER, SMALL_LAYOUT)
    original = directory.assignments()
    admin.move_guest("George Magdy", 2, "R2-1")
    assert directory.assignments() != original

    count = admin.reset_assignments()

    assert count == len(original)
    assert repository.count_overrides() == 0
    assert directory.assignments() == original


def test_audit_lists_placed_fillers(tmp_path):
    _, admin, _ = _build_services(tmp_path, "fillers.db", SMALL_ROSTER, SMALL_LAYOUT)

    audit = admin.audit()
    assert audit.placed_fillers == ["Mary Nabil"]
    assert audit.violations == []
    assert audit.unassigned == []
