"""Tests for reference data."""

from datetime import date

import pytest

from hostel_rules.constants import DEFAULT_ROOM_MAPPING
from hostel_rules.exceptions import ConfigurationError
from hostel_rules.models import Course
from hostel_rules.reference import ReferenceData, academic_year_window


class TestCategories:
    """Tests for categories_for_gender."""

    def test_male(self, reference):
        assert reference.categories_for_gender("Male") == ["A+", "A", "B+", "B"]

    def test_female(self, reference):
        assert reference.categories_for_gender("girl") == ["A+", "A", "B", "C"]

    def test_unknown_gender_gets_union(self, reference):
        categories = reference.categories_for_gender(None)
        assert set(categories) == {"A+", "A", "B+", "B", "C"}


class TestRoomsFor:
    """Tests for rooms_for."""

    def test_male_a_plus(self, reference):
        assert "309" in reference.rooms_for("Male", "A+")

    def test_aliases_accepted(self, reference):
        assert reference.rooms_for("m", "a+") == reference.rooms_for("Male", "A+")

    def test_unmapped_pair(self, reference):
        assert reference.rooms_for("Male", "C") == []

    def test_room_gender_exclusive(self, reference):
        """No room number is mapped under both genders."""
        male_rooms = {r for c in reference.room_mapping["Male"].values() for r in c}
        female_rooms = {r for c in reference.room_mapping["Female"].values() for r in c}
        assert male_rooms.isdisjoint(female_rooms)

    def test_gender_for_room(self, reference):
        assert reference.gender_for_room("117") == "Female"
        assert reference.gender_for_room("999") is None

    def test_injected_mapping(self):
        reference = ReferenceData(room_mapping={"Male": {"A": ["1"]}, "Female": {"A": ["2"]}})
        assert reference.rooms_for("Male", "A") == ["1"]
        assert reference.rooms_for("Male", "A+") == []

    def test_conflicting_mapping_rejected(self):
        """A room assigned to two genders is a configuration error."""
        with pytest.raises(ConfigurationError):
            ReferenceData(room_mapping={"Male": {"A": ["1"]}, "Female": {"B": ["1"]}})

    def test_default_mapping_not_mutated(self):
        reference = ReferenceData()
        reference.room_mapping["Male"]["A+"].append("999")
        assert "999" not in DEFAULT_ROOM_MAPPING["Male"]["A+"]


class TestCourses:
    """Tests for course resolution and durations."""

    def test_resolve_by_alias(self, reference):
        course = reference.resolve_course("BTECH")
        assert course.name == "B.Tech"

    def test_resolve_by_id(self):
        courses = [Course(id="c-42", name="MBA", code="MBA", duration=2)]
        reference = ReferenceData(courses=courses)
        assert reference.resolve_course("c-42").name == "MBA"

    def test_duration(self, reference):
        assert reference.duration_for_course("Diploma") == 3
        assert reference.duration_for_course("b tech") == 4

    def test_unknown_course_defaults_to_four(self, reference):
        assert reference.duration_for_course("Astronomy") == 4

    def test_explicit_course_list_overrides(self, reference):
        courses = [Course(id="x", name="B.Tech", code="BT", duration=5)]
        assert reference.duration_for_course("BTECH", courses) == 5

    def test_batches_for_course(self, reference):
        batches = reference.batches_for_course("Diploma")
        assert batches[0] == "2022-2025"
        assert len(batches) == 10
        assert batches[-1] == "2031-2034"

    def test_branches_for_course(self, reference):
        course = reference.resolve_course("B.Tech")
        names = [b.name for b in reference.branches_for_course(course)]
        assert "CSE" in names


class TestAcademicYearWindow:
    """Tests for academic_year_window."""

    def test_default_window(self):
        years = academic_year_window(date(2024, 8, 1))
        assert years == [
            "2021-2022",
            "2022-2023",
            "2023-2024",
            "2024-2025",
            "2025-2026",
            "2026-2027",
            "2027-2028",
        ]

    def test_custom_window(self):
        assert academic_year_window(date(2024, 1, 1), before=0, after=1) == [
            "2024-2025",
            "2025-2026",
        ]
