"""Tests for room, bed and locker allocation."""

import pytest

from hostel_rules.allocation import AllocationResolver
from hostel_rules.exceptions import AllocationConflictError, ResolutionError
from hostel_rules.models import AllocationSelection, OccupantAssignment, Room
from hostel_rules.repository import InMemoryRepository, bed_ids, locker_ids


@pytest.fixture
def resolver(repository):
    return AllocationResolver(repository)


class TestAvailabilityFor:
    """Tests for room availability queries."""

    def test_counts_active_occupants_only(self, resolver):
        rooms = {r.room_number: r for r in resolver.availability_for("Male", "A+")}

        assert rooms["309"].student_count == 2
        assert rooms["309"].available_beds == 1
        assert rooms["309"].occupancy_rate == pytest.approx(2 / 3)

    def test_full_room(self, resolver):
        rooms = {r.room_number: r for r in resolver.availability_for("Male", "A+")}

        assert rooms["310"].available_beds == 0
        assert rooms["310"].occupancy_rate == 1.0

    def test_empty_room(self, resolver):
        rooms = {r.room_number: r for r in resolver.availability_for("Male", "A+")}

        assert rooms["302"].student_count == 0
        assert rooms["302"].available_beds == 4
        assert rooms["302"].occupancy_rate == 0.0

    def test_sorted_and_filtered(self, resolver):
        numbers = [r.room_number for r in resolver.availability_for("m", "a+")]
        assert numbers == ["302", "309", "310"]

    def test_hostel_filter(self, resolver):
        numbers = [r.room_number for r in resolver.availability_for("Male", "A+", hostel="Main")]
        assert numbers == ["309", "310"]

    def test_unknown_gender_or_category(self, resolver):
        assert resolver.availability_for("X", "A+") == []
        assert resolver.availability_for("Male", "Z") == []

    def test_overbooked_room_never_negative(self):
        room = Room(room_number="1", gender="Male", category="A", bed_count=1)
        repository = InMemoryRepository(
            rooms=[room],
            assignments=[OccupantAssignment("a", "1"), OccupantAssignment("b", "1")],
        )

        availability = AllocationResolver(repository).availability_for("Male", "A")

        assert availability[0].available_beds == 0
        assert availability[0].student_count == 2

    def test_reads_fresh_occupancy(self, repository, resolver):
        """Test availability reflects assignments made after the resolver was built."""
        repository.assign("new", "302")

        rooms = {r.room_number: r for r in resolver.availability_for("Male", "A+")}
        assert rooms["302"].student_count == 1

    def test_to_dict(self, resolver):
        data = resolver.availability_for("Male", "A+")[0].to_dict()
        assert data["roomNumber"] == "302"
        assert data["availableBeds"] == 4


class TestBedLockerAvailability:
    """Tests for free bed and locker identifiers."""

    def test_complement_of_active_assignments(self, resolver):
        availability = resolver.bed_locker_availability("309")

        # B2/L3 are held by an inactive occupant
        assert availability.available_beds == ["B2"]
        assert availability.available_lockers == ["L3"]

    def test_unknown_room(self, resolver):
        with pytest.raises(ResolutionError):
            resolver.bed_locker_availability("999")

    def test_separate_locker_count(self):
        room = Room(room_number="5", gender="Female", category="A", bed_count=2, locker_count=3)
        assert bed_ids(room) == ["B1", "B2"]
        assert locker_ids(room) == ["L1", "L2", "L3"]


class TestSelection:
    """Tests for selecting and confirming allocations."""

    def test_room_change_clears_bed_and_locker(self, resolver):
        selection = AllocationSelection("302", "B1", "L1")

        changed = resolver.select_room(selection, "309")

        assert changed.room_number == "309"
        assert changed.bed_number is None
        assert changed.locker_number is None

    def test_select_unknown_room(self, resolver):
        with pytest.raises(ResolutionError):
            resolver.select_room(AllocationSelection(), "999")

    def test_auto_select_first_free(self, resolver):
        selection = resolver.auto_select("302")

        assert selection == AllocationSelection("302", "B1", "L1")
        assert selection.is_complete

    def test_auto_select_full_room(self, resolver):
        selection = resolver.auto_select("310")

        assert selection.bed_number is None
        assert selection.locker_number is None
        assert not selection.is_complete

    def test_resolve_free_bed(self, resolver):
        selection = resolver.resolve_selection(AllocationSelection("309"), "B2", "L3")
        assert selection == AllocationSelection("309", "B2", "L3")

    def test_resolve_taken_bed(self, resolver):
        with pytest.raises(AllocationConflictError) as exc_info:
            resolver.resolve_selection(AllocationSelection("309"), bed_number="B1")
        assert exc_info.value.bed_number == "B1"

    def test_resolve_taken_locker(self, resolver):
        with pytest.raises(AllocationConflictError):
            resolver.resolve_selection(AllocationSelection("309"), locker_number="L2")

    def test_resolve_nonexistent_bed(self, resolver):
        with pytest.raises(ResolutionError):
            resolver.resolve_selection(AllocationSelection("309"), bed_number="B9")

    def test_resolve_without_room(self, resolver):
        with pytest.raises(ResolutionError):
            resolver.resolve_selection(AllocationSelection(), bed_number="B1")


class TestInMemoryRepository:
    """Tests for the in-memory repository."""

    def test_assign_first_free_bed(self, repository):
        assignment = repository.assign("x", "309")
        assert assignment.bed_number == "B2"

    def test_assign_taken_bed(self, repository):
        with pytest.raises(AllocationConflictError):
            repository.assign("x", "302", bed_number="B1")
            repository.assign("y", "302", bed_number="B1")

    def test_assign_taken_locker(self, repository):
        with pytest.raises(AllocationConflictError):
            repository.assign("x", "309", bed_number="B2", locker_number="L1")

    def test_assign_full_room(self, repository):
        with pytest.raises(AllocationConflictError) as exc_info:
            repository.assign("x", "310")
        assert exc_info.value.reason == "room is full"

    def test_assign_unknown_room(self, repository):
        with pytest.raises(ResolutionError):
            repository.assign("x", "999")

    def test_list_rooms_by_hostel(self, repository):
        rooms = repository.list_rooms("Male", "A+", hostel="Annex")
        assert [r.room_number for r in rooms] == ["302"]
