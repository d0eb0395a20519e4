"""Course configuration loader."""

import csv
import logging
from pathlib import Path

from ..exceptions import ConfigurationError
from ..models import Branch, Course
from ..reference import default_branches, default_courses

logger = logging.getLogger(__name__)


class CourseConfig:
    """Loader for courses.csv (id,name,code,duration) and branches.csv (id,name,code,course)."""

    def __init__(self, courses_path: Path | None = None, branches_path: Path | None = None):
        self.courses: list[Course] = default_courses()
        self.branches: list[Branch] = default_branches()

        if courses_path and courses_path.exists():
            self.courses = self._load_courses(courses_path)
            # Built-in branches refer to built-in course ids
            self.branches = []
        if branches_path and branches_path.exists():
            self.branches = self._load_branches(branches_path)

    def _load_courses(self, path: Path) -> list[Course]:
        """Load courses from CSV."""
        courses = []
        with open(path, encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for line, row in enumerate(reader, start=2):
                name = row.get("name", "").strip()
                if not name:
                    continue
                try:
                    duration = int(row.get("duration", "").strip())
                except ValueError as e:
                    raise ConfigurationError(path, f"Bad duration at line {line}") from e
                if duration <= 0:
                    raise ConfigurationError(path, f"Non-positive duration at line {line}")

                code = row.get("code", "").strip() or name.upper()
                courses.append(
                    Course(
                        id=row.get("id", "").strip() or code,
                        name=name,
                        code=code,
                        duration=duration,
                    )
                )
        logger.info(f"Loaded {len(courses)} courses from {path}")
        return courses

    def _load_branches(self, path: Path) -> list[Branch]:
        """Load branches from CSV."""
        branches = []
        with open(path, encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for row in reader:
                name = row.get("name", "").strip()
                course_id = row.get("course", "").strip()
                if not name or not course_id:
                    continue
                branches.append(
                    Branch(
                        id=row.get("id", "").strip() or f"{course_id}:{name}",
                        name=name,
                        code=row.get("code", "").strip() or name,
                        course_id=course_id,
                    )
                )
        logger.info(f"Loaded {len(branches)} branches from {path}")
        return branches
