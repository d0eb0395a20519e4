"""Hostel rules engine - validation, allocation and billing rules for hostel administration.

This package validates bulk student admission rows against gender, category,
room, course and batch rules; resolves room/bed/locker availability; computes
charges for staff and guest occupants; and manages the monthly validity and
renewal of staff stays.

Example usage:
    from hostel_rules import BatchValidationCoordinator, StudentRow

    rows = [StudentRow.from_mapping(record) for record in records]
    batch = BatchValidationCoordinator(rows)

    for invalid in batch.partition().invalid_rows:
        print(invalid.index, invalid.errors)

    result = batch.commit(repository)
    print(f"Saved {result.succeeded_count}, rejected {result.failed_count}")
"""

from .allocation import AllocationResolver
from .batch import BatchValidationCoordinator
from .charges import ChargeCalculator, compute_charge, days_in_month
from .exceptions import (
    AllocationConflictError,
    ConfigurationError,
    FieldValidationError,
    InputFileError,
    InvalidOperationError,
    ResolutionError,
    RulesEngineError,
)
from .lifecycle import OccupancyLifecycle, check_in, check_out, is_checked_in, is_checked_out
from .models import (
    AllocationSelection,
    BedLockerAvailability,
    ChargeResult,
    ChargeType,
    Course,
    ErrorMap,
    OccupantType,
    RateSettings,
    Room,
    RoomAvailability,
    StaffGuestOccupant,
    StayType,
    StudentRow,
    ValidationMode,
    ValidityState,
)
from .normalization import (
    normalize_batch,
    normalize_category,
    normalize_course_name,
    normalize_gender,
    normalize_phone,
)
from .reference import ReferenceData, academic_year_window
from .repository import InMemoryRepository, OccupancyRepository, StudentRepository
from .validators import RowValidator, ValidationContext

__version__ = "0.1.0"

__all__ = [
    # Engine components
    "ReferenceData",
    "RowValidator",
    "ValidationContext",
    "BatchValidationCoordinator",
    "AllocationResolver",
    "ChargeCalculator",
    "OccupancyLifecycle",
    # Functions
    "academic_year_window",
    "compute_charge",
    "days_in_month",
    "check_in",
    "check_out",
    "is_checked_in",
    "is_checked_out",
    "normalize_gender",
    "normalize_category",
    "normalize_course_name",
    "normalize_phone",
    "normalize_batch",
    # Repositories
    "StudentRepository",
    "OccupancyRepository",
    "InMemoryRepository",
    # Models
    "AllocationSelection",
    "BedLockerAvailability",
    "ChargeResult",
    "ChargeType",
    "Course",
    "ErrorMap",
    "OccupantType",
    "RateSettings",
    "Room",
    "RoomAvailability",
    "StaffGuestOccupant",
    "StayType",
    "StudentRow",
    "ValidationMode",
    "ValidityState",
    # Exceptions
    "RulesEngineError",
    "FieldValidationError",
    "ResolutionError",
    "AllocationConflictError",
    "InvalidOperationError",
    "ConfigurationError",
    "InputFileError",
]
