"""Validation logic for student admission rows."""

import logging
import re
from dataclasses import dataclass

from .constants import (
    ACADEMIC_YEAR_PATTERN,
    BARE_BATCH_MAX_YEAR,
    BARE_BATCH_MIN_YEAR,
    BATCH_START_MAX_YEAR,
    BATCH_START_MIN_YEAR,
    EMAIL_PATTERN,
    FALLBACK_BATCH_DURATIONS,
    FIELD_ACADEMIC_YEAR,
    FIELD_BATCH,
    FIELD_BRANCH,
    FIELD_CATEGORY,
    FIELD_COURSE,
    FIELD_EMAIL,
    FIELD_GENDER,
    FIELD_PARENT_PHONE,
    FIELD_ROOM_NUMBER,
    FIELD_STUDENT_PHONE,
    FIELD_YEAR,
    FORBIDDEN_CATEGORIES,
    MAX_YEAR_OF_STUDY,
    MIN_YEAR_OF_STUDY,
    PHONE_PATTERN,
    REQUIRED_FIELDS,
    ROW_FIELDS,
)
from .exceptions import FieldValidationError
from .models import Course, ErrorMap, StudentRow, ValidationMode
from .normalization import (
    normalize_batch,
    normalize_category,
    normalize_gender,
    normalize_phone,
)
from .reference import ReferenceData

logger = logging.getLogger(__name__)


def validate_phone(phone: str | None, label: str = "Phone number") -> tuple[bool, str | None]:
    """Validate a phone number: exactly 10 digits after separators are stripped.

    Returns:
        Tuple of (is_valid, error_message)
    """
    normalized = normalize_phone(phone)
    if not normalized or not re.match(PHONE_PATTERN, normalized):
        return False, f"{label} must be exactly 10 digits"
    return True, None


def validate_email(email: str | None) -> tuple[bool, str | None]:
    """Validate an email address shape."""
    if not email or not re.match(EMAIL_PATTERN, email.strip()):
        return False, f"Invalid email address: '{email}'"
    return True, None


def validate_year(year: str | None, course: Course | None = None) -> tuple[bool, str | None]:
    """Validate year of study.

    Must be an integer in [1, 10]; when the course is known it must also not
    exceed the course duration.
    """
    try:
        value = int(str(year).strip())
    except (ValueError, TypeError):
        return False, f"Year must be a whole number, got '{year}'"

    if not MIN_YEAR_OF_STUDY <= value <= MAX_YEAR_OF_STUDY:
        return False, f"Year must be between {MIN_YEAR_OF_STUDY} and {MAX_YEAR_OF_STUDY}"

    if course is not None and value > course.duration:
        return False, f"Year {value} exceeds the {course.duration}-year duration of {course.name}"

    return True, None


def validate_academic_year(academic_year: str | None) -> tuple[bool, str | None]:
    """Validate an academic year: "YYYY-YYYY" with consecutive years."""
    match = re.match(ACADEMIC_YEAR_PATTERN, (academic_year or "").strip())
    if not match:
        return False, "Academic year must be in YYYY-YYYY format"

    start, end = int(match.group(1)), int(match.group(2))
    if end != start + 1:
        return False, f"Academic year must span consecutive years (e.g. {start}-{start + 1})"

    return True, None


def validate_batch(
    batch: str | None,
    course: Course | None = None,
    mode: ValidationMode = ValidationMode.CREATE,
) -> tuple[bool, str | None]:
    """Validate a batch string against the course duration.

    A bare start year is checked only for a plausible range. A "YYYY-YYYY"
    batch must have start < end, a start year in [2000, 2030], and a duration
    equal to the course duration. If the course is unknown, a duration of 3 or
    4 years is accepted. In UPDATE mode a duration mismatch is logged instead
    of reported.

    Returns:
        Tuple of (is_valid, error_message)
    """
    span = normalize_batch(batch)
    if span is None:
        return False, "Batch must be YYYY-YYYY (e.g. 2022-2026) or a start year YYYY"

    if span.is_bare:
        if not BARE_BATCH_MIN_YEAR <= span.start_year <= BARE_BATCH_MAX_YEAR:
            return False, (
                f"Batch year must be between {BARE_BATCH_MIN_YEAR} and {BARE_BATCH_MAX_YEAR}"
            )
        return True, None

    if span.start_year >= span.end_year:
        return False, "Batch start year must be before end year"

    if not BATCH_START_MIN_YEAR <= span.start_year <= BATCH_START_MAX_YEAR:
        return False, (
            f"Batch start year must be between {BATCH_START_MIN_YEAR} and {BATCH_START_MAX_YEAR}"
        )

    duration = span.duration
    if course is None:
        if duration not in FALLBACK_BATCH_DURATIONS:
            allowed = " or ".join(str(d) for d in sorted(FALLBACK_BATCH_DURATIONS))
            return False, f"Batch duration must be {allowed} years, got {duration}"
        return True, None

    if duration != course.duration:
        message = (
            f"Batch duration ({duration} years) does not match "
            f"{course.name} duration ({course.duration} years)"
        )
        if mode == ValidationMode.UPDATE:
            logger.warning(f"{message}; accepted for update of batch {span}")
            return True, None
        return False, message

    return True, None


@dataclass
class ValidationContext:
    """Per-call inputs to row validation.

    Attributes:
        courses: Resolved course list used for duration lookups; None uses the
                 reference data's configured courses
        mode: CREATE for new rows, UPDATE for edits of existing students
        require_branch: Report a missing Branch; otherwise branch presence is
                        left to the persistence collaborator
    """

    courses: list[Course] | None = None
    mode: ValidationMode = ValidationMode.CREATE
    require_branch: bool = False


class RowValidator:
    """Validates a single student row against reference data and cross-field rules.

    Every check runs even after an earlier one fails, so the returned
    ErrorMap lists every failing field (one message per field).
    """

    def __init__(self, reference: ReferenceData | None = None):
        self.reference = reference or ReferenceData()

    def validate(self, row: StudentRow, context: ValidationContext | None = None) -> ErrorMap:
        """Run all validations on a row.

        Args:
            row: Row to validate
            context: Course list and validation mode

        Returns:
            ErrorMap of field -> message; empty if the row is valid
        """
        context = context or ValidationContext()
        errors: ErrorMap = {}

        def add(field: str, message: str | None) -> None:
            if message:
                errors.setdefault(field, message)

        # Required fields
        for column in REQUIRED_FIELDS:
            if not row.get(column):
                add(column, f"{column} is required")
        if context.require_branch and not row.branch:
            add(FIELD_BRANCH, f"{FIELD_BRANCH} is required")

        # Gender
        gender = normalize_gender(row.gender)
        if row.gender and gender is None:
            add(FIELD_GENDER, f"Invalid gender: '{row.gender}'. Expected Male or Female")

        # Course (branch presence only; existence is checked on persistence)
        course = self.reference.resolve_course(row.course, context.courses)
        if row.course and course is None:
            add(FIELD_COURSE, f"Unknown course: '{row.course}'")

        # Year
        if row.year:
            _, msg = validate_year(row.year, course)
            add(FIELD_YEAR, msg)

        # Category
        category = self._check_category(row, gender, add)

        # Room number
        if row.room_number and gender and category:
            valid_rooms = self.reference.rooms_for(gender, category)
            if row.room_number.strip() not in valid_rooms:
                add(
                    FIELD_ROOM_NUMBER,
                    f"Room {row.room_number} is not a {gender} {category} room",
                )

        # Phones
        if row.student_phone:
            _, msg = validate_phone(row.student_phone, "Student phone")
            add(FIELD_STUDENT_PHONE, msg)
        if row.parent_phone:
            _, msg = validate_phone(row.parent_phone, "Parent phone")
            add(FIELD_PARENT_PHONE, msg)

        # Email
        if row.email:
            _, msg = validate_email(row.email)
            add(FIELD_EMAIL, msg)

        # Batch
        if row.batch:
            _, msg = validate_batch(row.batch, course, context.mode)
            add(FIELD_BATCH, msg)

        # Academic year
        if row.academic_year:
            _, msg = validate_academic_year(row.academic_year)
            add(FIELD_ACADEMIC_YEAR, msg)

        if errors:
            logger.debug(f"Row {row.roll_number or '?'}: {len(errors)} error(s): {sorted(errors)}")
        return errors

    def _check_category(self, row: StudentRow, gender: str | None, add) -> str | None:
        """Check the category against the gender; return it if usable for room lookup."""
        if not row.category:
            return None

        category = normalize_category(row.category)
        if category is None:
            add(FIELD_CATEGORY, f"Invalid category: '{row.category}'")
            return None

        if gender is not None and category in FORBIDDEN_CATEGORIES[gender]:
            add(FIELD_CATEGORY, f"Category {category} is not available for {gender} students")
            return None

        allowed = self.reference.categories_for_gender(gender)
        if category not in allowed:
            add(
                FIELD_CATEGORY,
                f"Category {category} is not valid for {gender or 'this gender'}. "
                f"Expected one of: {', '.join(allowed)}",
            )
            return None

        return category

    def check(self, row: StudentRow, context: ValidationContext | None = None) -> None:
        """Validate a single record, raising on the first failing field.

        Used for one-off create/update of a student where the caller wants an
        exception rather than an ErrorMap.

        Raises:
            FieldValidationError: For the first failing field in column order
        """
        errors = self.validate(row, context)
        for column in ROW_FIELDS:
            if column in errors:
                raise FieldValidationError(column, errors[column])

    def validate_all(
        self, rows: list[StudentRow], context: ValidationContext | None = None
    ) -> list[ErrorMap]:
        """Validate rows; the result is index-aligned with the input."""
        return [self.validate(row, context) for row in rows]
