"""Unified configuration loader."""

from pathlib import Path

from ..reference import ReferenceData
from ..repository import InMemoryRepository
from .courses import CourseConfig
from .rates import RateConfig
from .rooms import RoomConfig


class ConfigLoader:
    """Unified loader for all rules engine configuration files."""

    def __init__(self, config_dir: Path | None = None):
        """
        Initialize configuration loader.

        Args:
            config_dir: Path to directory containing configuration files.
                       Expected files (all optional, built-in defaults otherwise):
                       - room-mapping.json
                       - rooms.csv
                       - assignments.csv
                       - courses.csv
                       - branches.csv
                       - rate-settings.json
        """
        if config_dir is None:
            config_dir = Path("reference")

        self.config_dir = Path(config_dir)

        self.rooms = RoomConfig(
            mapping_path=self._get_path("room-mapping.json"),
            inventory_path=self._get_path("rooms.csv"),
            assignments_path=self._get_path("assignments.csv"),
        )
        self.courses = CourseConfig(
            courses_path=self._get_path("courses.csv"),
            branches_path=self._get_path("branches.csv"),
        )
        self.rates = RateConfig(self._get_path("rate-settings.json"))

    def _get_path(self, filename: str) -> Path | None:
        """Get path to config file if it exists."""
        path = self.config_dir / filename
        return path if path.exists() else None

    def reference_data(self) -> ReferenceData:
        """Build ReferenceData from the loaded configuration."""
        return ReferenceData(
            room_mapping=self.rooms.mapping,
            courses=self.courses.courses,
            branches=self.courses.branches,
        )

    def repository(self) -> InMemoryRepository:
        """Build an in-memory repository from the room inventory and assignments."""
        return InMemoryRepository(rooms=self.rooms.rooms, assignments=self.rooms.assignments)
