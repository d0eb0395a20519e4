"""Test fixtures for hostel rules engine tests."""

from datetime import date

import pytest

from hostel_rules.models import (
    OccupantAssignment,
    RateSettings,
    Room,
    StudentRow,
)
from hostel_rules.reference import ReferenceData
from hostel_rules.repository import InMemoryRepository
from hostel_rules.validators import RowValidator


@pytest.fixture
def valid_row_data():
    """A fully populated, valid spreadsheet row."""
    return {
        "Name": "Arjun Rao",
        "RollNumber": "R1",
        "Gender": "Male",
        "Course": "B.Tech",
        "Branch": "CSE",
        "Year": "2",
        "Category": "A+",
        "RoomNumber": "309",
        "StudentPhone": "9123456780",
        "ParentPhone": "9876543210",
        "Email": "arjun@example.com",
        "Batch": "2022-2026",
        "AcademicYear": "2023-2024",
    }


@pytest.fixture
def valid_row(valid_row_data):
    return StudentRow.from_mapping(valid_row_data)


@pytest.fixture
def female_row_data():
    """A valid row for a female student in a C category room."""
    return {
        "Name": "Meena K",
        "RollNumber": "R2",
        "Gender": "F",
        "Course": "Diploma",
        "Branch": "DCSE",
        "Category": "C",
        "RoomNumber": "117",
        "ParentPhone": "9000000001",
        "Batch": "2023-2026",
        "AcademicYear": "2024-2025",
    }


@pytest.fixture
def reference():
    return ReferenceData()


@pytest.fixture
def validator(reference):
    return RowValidator(reference)


@pytest.fixture
def sample_rooms():
    """Rooms across genders, categories and hostels."""
    return [
        Room(room_number="309", gender="Male", category="A+", bed_count=3, hostel="Main"),
        Room(room_number="310", gender="Male", category="A+", bed_count=2, hostel="Main"),
        Room(room_number="302", gender="Male", category="A+", bed_count=4, hostel="Annex"),
        Room(room_number="303", gender="Male", category="A", bed_count=2, hostel="Main"),
        Room(room_number="117", gender="Female", category="C", bed_count=2, hostel="Main"),
    ]


@pytest.fixture
def repository(sample_rooms):
    """Repository with room 309 partly occupied and room 310 full."""
    return InMemoryRepository(
        rooms=sample_rooms,
        assignments=[
            OccupantAssignment("s1", "309", bed_number="B1", locker_number="L1"),
            OccupantAssignment("s2", "309", bed_number="B3", locker_number="L2"),
            OccupantAssignment("s3", "309", bed_number="B2", locker_number="L3", active=False),
            OccupantAssignment("s4", "310", bed_number="B1", locker_number="L1"),
            OccupantAssignment("s5", "310", bed_number="B2", locker_number="L2"),
        ],
    )


@pytest.fixture
def rate_settings():
    return RateSettings(staff_daily_rate=100, monthly_fixed_amount=3500)


@pytest.fixture
def today():
    return date(2024, 6, 15)
