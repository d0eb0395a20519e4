"""Data models for the hostel rules engine."""

from dataclasses import asdict, dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Self

from .constants import (
    DEFAULT_MONTHLY_FIXED_AMOUNT,
    DEFAULT_STAFF_DAILY_RATE,
    FIELD_ACADEMIC_YEAR,
    FIELD_BATCH,
    FIELD_BRANCH,
    FIELD_CATEGORY,
    FIELD_COURSE,
    FIELD_EMAIL,
    FIELD_GENDER,
    FIELD_NAME,
    FIELD_PARENT_PHONE,
    FIELD_ROLL_NUMBER,
    FIELD_ROOM_NUMBER,
    FIELD_STUDENT_PHONE,
    FIELD_YEAR,
)
from .normalization import clean_cell, normalize_gender, parse_date

# Field name -> single error message. Empty means the row is valid.
ErrorMap = dict[str, str]

_TRUE_STRINGS = {"true", "1", "yes", "y"}
_FALSE_STRINGS = {"false", "0", "no", "n"}


def _to_amount(value, key: str) -> float | None:
    """Convert a numeric field from loosely typed input; blank means unset.

    Raises:
        ValueError: If the value is not a number
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{key} must be a number, got {value!r}") from e


def _to_flag(value, key: str, default: bool = True) -> bool:
    """Convert a boolean field that may arrive as a string or 0/1.

    Raises:
        ValueError: If the value is not recognisable as a boolean
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ValueError(f"{key} must be true or false, got {value!r}")


class OccupantType(str, Enum):
    """Kind of hostel occupant."""

    STAFF = "staff"
    GUEST = "guest"
    STUDENT = "student"
    WARDEN = "warden"


class StayType(str, Enum):
    """Stay basis: billed per elapsed day or per calendar month."""

    DAILY = "daily"
    MONTHLY = "monthly"


class ChargeType(str, Enum):
    """Tariff for monthly-basis staff."""

    PER_DAY = "per_day"
    MONTHLY_FIXED = "monthly_fixed"


class ValidityState(str, Enum):
    """Validity of a staff/guest occupant."""

    ACTIVE = "active"
    EXPIRED = "expired"


class ValidationMode(str, Enum):
    """Strictness of row validation.

    CREATE is used for new bulk-upload rows; UPDATE for edits of existing
    students, where a batch/course duration mismatch is only logged.
    """

    CREATE = "create"
    UPDATE = "update"


# Spreadsheet column -> StudentRow attribute
ROW_ATTRIBUTES = {
    FIELD_NAME: "name",
    FIELD_ROLL_NUMBER: "roll_number",
    FIELD_GENDER: "gender",
    FIELD_COURSE: "course",
    FIELD_BRANCH: "branch",
    FIELD_YEAR: "year",
    FIELD_CATEGORY: "category",
    FIELD_ROOM_NUMBER: "room_number",
    FIELD_STUDENT_PHONE: "student_phone",
    FIELD_PARENT_PHONE: "parent_phone",
    FIELD_EMAIL: "email",
    FIELD_BATCH: "batch",
    FIELD_ACADEMIC_YEAR: "academic_year",
}


def _header_key(header: str) -> str:
    return "".join(ch for ch in str(header).lower() if ch.isalnum())


_HEADER_LOOKUP = {_header_key(column): column for column in ROW_ATTRIBUTES}


@dataclass
class StudentRow:
    """One bulk-upload input row.

    Every field is an optional string at this boundary; numeric columns such
    as Year are parsed by the validator. Use ``from_mapping`` to build a row
    from loosely-shaped spreadsheet data.
    """

    name: str | None = None
    roll_number: str | None = None
    gender: str | None = None
    course: str | None = None
    branch: str | None = None
    year: str | None = None
    category: str | None = None
    room_number: str | None = None
    student_phone: str | None = None
    parent_phone: str | None = None
    email: str | None = None
    batch: str | None = None
    academic_year: str | None = None

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> Self:
        """Build a row from a mapping keyed by spreadsheet column names.

        Header matching ignores case, spaces and punctuation, so "Roll Number",
        "roll_number" and "RollNumber" all land in ``roll_number``. Unknown
        columns are ignored and empty cells become None.
        """
        values: dict[str, str | None] = {}
        for header, value in data.items():
            column = _HEADER_LOOKUP.get(_header_key(header))
            if column is None:
                continue
            values[ROW_ATTRIBUTES[column]] = clean_cell(value)
        return cls(**values)

    def get(self, column: str) -> str | None:
        """Get a value by spreadsheet column name."""
        return getattr(self, ROW_ATTRIBUTES[column])

    def with_field(self, column: str, value: str | None) -> Self:
        """Return a copy with one column replaced."""
        return replace(self, **{ROW_ATTRIBUTES[column]: value})

    def to_dict(self) -> dict[str, str | None]:
        """Convert to a dictionary keyed by spreadsheet column names."""
        return {column: getattr(self, attr) for column, attr in ROW_ATTRIBUTES.items()}


@dataclass(frozen=True)
class Course:
    """A course offered by the institution.

    Attributes:
        id: Identifier used by the persistence layer
        name: Canonical display name (e.g. "B.Tech")
        code: Short code (e.g. "BTECH")
        duration: Length of the course in years
    """

    id: str
    name: str
    code: str
    duration: int


@dataclass(frozen=True)
class Branch:
    """A branch (specialisation) of a course."""

    id: str
    name: str
    code: str
    course_id: str


@dataclass(frozen=True)
class Room:
    """A hostel room.

    Attributes:
        room_number: Room number, unique across the hostel
        gender: Gender the room is reserved for
        category: Room tier (A+, A, B+, B, C)
        bed_count: Number of beds
        hostel: Optional hostel/block name
        locker_count: Number of lockers; defaults to bed_count
    """

    room_number: str
    gender: str
    category: str
    bed_count: int
    hostel: str | None = None
    locker_count: int | None = None

    @property
    def lockers(self) -> int:
        return self.bed_count if self.locker_count is None else self.locker_count


@dataclass(frozen=True)
class OccupantAssignment:
    """A bed/locker held by an occupant of a room."""

    occupant_id: str
    room_number: str
    bed_number: str | None = None
    locker_number: str | None = None
    active: bool = True


@dataclass
class RoomAvailability:
    """Occupancy figures for a room at the time of the query."""

    room_number: str
    gender: str
    category: str
    bed_count: int
    student_count: int
    available_beds: int
    occupancy_rate: float

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "roomNumber": self.room_number,
            "gender": self.gender,
            "category": self.category,
            "bedCount": self.bed_count,
            "studentCount": self.student_count,
            "availableBeds": self.available_beds,
            "occupancyRate": self.occupancy_rate,
        }


@dataclass
class BedLockerAvailability:
    """Free bed and locker identifiers within one room."""

    room_number: str
    available_beds: list[str] = field(default_factory=list)
    available_lockers: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "roomNumber": self.room_number,
            "availableBeds": list(self.available_beds),
            "availableLockers": list(self.available_lockers),
        }


@dataclass(frozen=True)
class AllocationSelection:
    """A caller's in-progress choice of room, bed and locker.

    Bed and locker identifiers are room-scoped, so changing the room always
    clears them. Use ``with_room`` rather than ``dataclasses.replace``.
    """

    room_number: str | None = None
    bed_number: str | None = None
    locker_number: str | None = None

    def with_room(self, room_number: str | None) -> Self:
        return type(self)(room_number=room_number)

    @property
    def is_complete(self) -> bool:
        return bool(self.room_number and self.bed_number and self.locker_number)


@dataclass(frozen=True)
class RateSettings:
    """Process-wide default tariffs.

    Passed explicitly to every charge computation so that a historical
    computation can be reproduced with the settings that applied at the time.
    """

    staff_daily_rate: float = DEFAULT_STAFF_DAILY_RATE
    monthly_fixed_amount: float = DEFAULT_MONTHLY_FIXED_AMOUNT
    last_updated: datetime | None = None
    updated_by: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Build settings from a camelCase mapping (as stored by the admin UI)."""
        last_updated = data.get("lastUpdated")
        if isinstance(last_updated, str) and last_updated:
            last_updated = datetime.fromisoformat(last_updated)
        return cls(
            staff_daily_rate=data.get("staffDailyRate", DEFAULT_STAFF_DAILY_RATE),
            monthly_fixed_amount=data.get("monthlyFixedAmount", DEFAULT_MONTHLY_FIXED_AMOUNT),
            last_updated=last_updated or None,
            updated_by=data.get("updatedBy"),
        )

    def to_dict(self) -> dict:
        return {
            "staffDailyRate": self.staff_daily_rate,
            "monthlyFixedAmount": self.monthly_fixed_amount,
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
            "updatedBy": self.updated_by,
        }


@dataclass
class StaffGuestOccupant:
    """A staff member, guest or other tracked occupant.

    Attributes:
        type: Occupant kind
        gender: Canonical gender
        stay_type: Stay basis (meaningful for staff only)
        charge_type: Tariff (meaningful for monthly staff only)
        daily_rate: Per-occupant override of the default daily rate
        monthly_fixed_amount: Per-occupant override of the default monthly amount
        selected_month: Billed month "YYYY-MM" (monthly staff)
        checkin_date: Start of stay (daily staff and non-staff)
        checkout_date: End of stay, None while still checked in
        room_number: Assigned room
        bed_number: Assigned bed within the room
        is_active: Explicit activity flag carried by staff records
        calculated_charges: Stored amount, possibly overridden by an administrator
    """

    type: OccupantType
    id: str | None = None
    name: str | None = None
    gender: str | None = None
    stay_type: StayType | None = None
    charge_type: ChargeType | None = None
    daily_rate: float | None = None
    monthly_fixed_amount: float | None = None
    selected_month: str | None = None
    checkin_date: date | datetime | None = None
    checkout_date: date | datetime | None = None
    room_number: str | None = None
    bed_number: str | None = None
    is_active: bool = True
    calculated_charges: float | None = None

    @property
    def is_monthly_staff(self) -> bool:
        return self.type == OccupantType.STAFF and self.stay_type == StayType.MONTHLY

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Build an occupant from a camelCase mapping.

        Rates and stored charges are converted to numbers and ``isActive`` to
        a bool, so string values from JSON forms are accepted.

        Raises:
            KeyError: If ``type`` is missing
            ValueError: If an enum, number, flag or date field is malformed
        """

        def _enum(enum_cls, key):
            value = data.get(key)
            return enum_cls(value) if value else None

        return cls(
            type=OccupantType(data["type"]),
            id=data.get("id") or data.get("_id"),
            name=data.get("name"),
            gender=normalize_gender(data.get("gender")),
            stay_type=_enum(StayType, "stayType"),
            charge_type=_enum(ChargeType, "chargeType"),
            daily_rate=_to_amount(data.get("dailyRate"), "dailyRate"),
            monthly_fixed_amount=_to_amount(data.get("monthlyFixedAmount"), "monthlyFixedAmount"),
            selected_month=data.get("selectedMonth"),
            checkin_date=parse_date(data.get("checkinDate")),
            checkout_date=parse_date(data.get("checkoutDate")),
            room_number=data.get("roomNumber"),
            bed_number=data.get("bedNumber"),
            is_active=_to_flag(data.get("isActive"), "isActive"),
            calculated_charges=_to_amount(data.get("calculatedCharges"), "calculatedCharges"),
        )

    def to_dict(self) -> dict:
        """Convert to a camelCase dictionary for JSON serialization."""

        def _iso(value):
            return value.isoformat() if value else None

        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "gender": self.gender,
            "stayType": self.stay_type.value if self.stay_type else None,
            "chargeType": self.charge_type.value if self.charge_type else None,
            "dailyRate": self.daily_rate,
            "monthlyFixedAmount": self.monthly_fixed_amount,
            "selectedMonth": self.selected_month,
            "checkinDate": _iso(self.checkin_date),
            "checkoutDate": _iso(self.checkout_date),
            "roomNumber": self.room_number,
            "bedNumber": self.bed_number,
            "isActive": self.is_active,
            "calculatedCharges": self.calculated_charges,
        }


@dataclass(frozen=True)
class ChargeResult:
    """Outcome of a charge computation.

    ``amount`` is always the formulaic total. ``override_amount`` surfaces a
    manually entered figure separately and is never folded into ``amount``.
    """

    amount: float
    breakdown_text: str
    day_count: int | None = None
    rate: float | None = None
    override_amount: float | None = None

    @property
    def is_overridden(self) -> bool:
        return self.override_amount is not None and self.override_amount != self.amount

    def to_dict(self) -> dict:
        data = asdict(self)
        data["is_overridden"] = self.is_overridden
        return data


@dataclass
class RenewalResult:
    """A renewed occupant and the charge for its new period."""

    occupant: StaffGuestOccupant
    charge: ChargeResult
    previous_month: str | None = None


@dataclass
class InvalidRow:
    """A row that failed validation, with its position in the batch."""

    index: int
    row: StudentRow
    errors: ErrorMap


@dataclass
class ValidationPartition:
    """Rows split into valid and invalid sets."""

    valid_rows: list[StudentRow] = field(default_factory=list)
    invalid_rows: list[InvalidRow] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.valid_rows) + len(self.invalid_rows)


@dataclass
class CommitFailure:
    """A valid row the persistence collaborator rejected."""

    row: StudentRow
    reason: str


@dataclass
class CommitResult:
    """Outcome of committing valid rows: each row is persisted or rejected."""

    succeeded: list[StudentRow] = field(default_factory=list)
    failed: list[CommitFailure] = field(default_factory=list)

    @property
    def succeeded_count(self) -> int:
        return len(self.succeeded)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    def to_dict(self) -> dict:
        return {
            "succeeded": self.succeeded_count,
            "failed": self.failed_count,
            "failures": [
                {"rollNumber": f.row.roll_number, "reason": f.reason} for f in self.failed
            ],
        }


@dataclass
class BatchSummary:
    """Summary of a validated batch.

    Attributes:
        total_rows: Number of rows in the batch
        valid_rows: Rows with an empty ErrorMap
        invalid_rows: Rows with at least one error
        errors_by_field: Number of rows with an error on each field
    """

    total_rows: int
    valid_rows: int
    invalid_rows: int
    errors_by_field: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "total_rows": self.total_rows,
            "valid_rows": self.valid_rows,
            "invalid_rows": self.invalid_rows,
            "errors_by_field": dict(self.errors_by_field),
        }

