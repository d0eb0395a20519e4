"""Reference data: room mapping, categories, course registry and year windows."""

import logging
from datetime import date, datetime

from .constants import (
    ACADEMIC_YEARS_AFTER,
    ACADEMIC_YEARS_BEFORE,
    ALL_CATEGORIES,
    BATCH_LIST_COUNT,
    BATCH_LIST_START_YEAR,
    CATEGORIES_BY_GENDER,
    DEFAULT_BRANCHES,
    DEFAULT_COURSE_DURATION,
    DEFAULT_COURSES,
    DEFAULT_ROOM_MAPPING,
)
from .exceptions import ConfigurationError
from .models import Branch, Course
from .normalization import clean_cell, normalize_category, normalize_course_name, normalize_gender

logger = logging.getLogger(__name__)


def default_courses() -> list[Course]:
    """Build the built-in course registry."""
    return [
        Course(id=code, name=name, code=code, duration=duration)
        for name, (code, duration) in DEFAULT_COURSES.items()
    ]


def default_branches() -> list[Branch]:
    """Build the built-in branch list."""
    branches = []
    for course_name, names in DEFAULT_BRANCHES.items():
        course_code = DEFAULT_COURSES[course_name][0]
        for name in names:
            branches.append(
                Branch(id=f"{course_code}:{name}", name=name, code=name, course_id=course_code)
            )
    return branches


def academic_year_window(
    now: date | datetime | None = None,
    before: int = ACADEMIC_YEARS_BEFORE,
    after: int = ACADEMIC_YEARS_AFTER,
) -> list[str]:
    """List academic years centred on the current year.

    Args:
        now: Reference date (defaults to today)
        before: Number of academic years before the current one
        after: Number of academic years after the current one

    Returns:
        List of "YYYY-YYYY" strings in ascending order
    """
    current_year = (now or date.today()).year
    return [f"{year}-{year + 1}" for year in range(current_year - before, current_year + after + 1)]


def check_room_mapping(mapping: dict[str, dict[str, list[str]]], source=None) -> None:
    """Check that no room number is assigned to more than one gender.

    Raises:
        ConfigurationError: If a room appears under two genders
    """
    owner: dict[str, str] = {}
    for gender, categories in mapping.items():
        for rooms in categories.values():
            for room in rooms:
                previous = owner.setdefault(room, gender)
                if previous != gender:
                    raise ConfigurationError(
                        source, f"Room '{room}' is assigned to both {previous} and {gender}"
                    )


class ReferenceData:
    """Static lookup tables for validation and allocation.

    The room mapping and course list are configuration: pass your own to
    replace the built-in defaults.
    """

    def __init__(
        self,
        room_mapping: dict[str, dict[str, list[str]]] | None = None,
        courses: list[Course] | None = None,
        branches: list[Branch] | None = None,
    ) -> None:
        """Initialize reference data.

        Args:
            room_mapping: gender -> category -> list of room numbers
            courses: Configured courses (defaults to the built-in registry)
            branches: Configured branches (defaults to the built-in list)

        Raises:
            ConfigurationError: If a room is mapped to two genders
        """
        mapping = room_mapping if room_mapping is not None else DEFAULT_ROOM_MAPPING
        check_room_mapping(mapping)
        self.room_mapping = {
            gender: {category: [str(room) for room in rooms] for category, rooms in categories.items()}
            for gender, categories in mapping.items()
        }
        self.courses = list(courses) if courses is not None else default_courses()
        self.branches = list(branches) if branches is not None else default_branches()
        self._room_gender = {
            room: gender
            for gender, categories in self.room_mapping.items()
            for rooms in categories.values()
            for room in rooms
        }

    def categories_for_gender(self, gender: str | None) -> list[str]:
        """Get the ordered categories allowed for a gender.

        An unknown gender yields the union of all categories.
        """
        canonical = normalize_gender(gender)
        if canonical is None:
            return list(ALL_CATEGORIES)
        return list(CATEGORIES_BY_GENDER[canonical])

    def rooms_for(self, gender: str | None, category: str | None) -> list[str]:
        """Get room numbers mapped to a gender and category."""
        canonical_gender = normalize_gender(gender)
        canonical_category = normalize_category(category)
        if canonical_gender is None or canonical_category is None:
            return []
        return list(self.room_mapping.get(canonical_gender, {}).get(canonical_category, []))

    def gender_for_room(self, room_number: str) -> str | None:
        """Get the gender a room is reserved for."""
        return self._room_gender.get(str(room_number).strip())

    def resolve_course(self, value: str | None, courses: list[Course] | None = None) -> Course | None:
        """Resolve a course by id, code or (normalized) name.

        Args:
            value: Raw course reference from input
            courses: Course list to search instead of the configured one

        Returns:
            Matching Course, or None if unresolved
        """
        text = clean_cell(value)
        if text is None:
            return None

        candidates = courses if courses is not None else self.courses
        canonical = normalize_course_name(text)
        for course in candidates:
            if course.id == text:
                return course
        for course in candidates:
            if course.code.upper() == text.upper():
                return course
        for course in candidates:
            if normalize_course_name(course.name) == canonical or course.name.lower() == text.lower():
                return course
        return None

    def duration_for_course(self, value: str | None, courses: list[Course] | None = None) -> int:
        """Get a course duration in years, defaulting to 4 when unresolved."""
        course = self.resolve_course(value, courses)
        if course is None:
            logger.warning(
                f"Course '{value}' not found, using default duration {DEFAULT_COURSE_DURATION}"
            )
            return DEFAULT_COURSE_DURATION
        return course.duration

    def branches_for_course(self, course: Course) -> list[Branch]:
        """Get configured branches of a course."""
        return [b for b in self.branches if b.course_id in (course.id, course.code)]

    def batches_for_course(
        self,
        value: str | None,
        start_year: int = BATCH_LIST_START_YEAR,
        count: int = BATCH_LIST_COUNT,
    ) -> list[str]:
        """Generate selectable batches for a course.

        Example: B.Tech (4 years) from 2022 gives "2022-2026", "2023-2027", ...
        """
        duration = self.duration_for_course(value)
        return [f"{year}-{year + duration}" for year in range(start_year, start_year + count)]
