"""Room configuration loader."""

import csv
import json
import logging
from pathlib import Path

from ..constants import DEFAULT_ROOM_MAPPING
from ..exceptions import ConfigurationError
from ..models import OccupantAssignment, Room
from ..normalization import normalize_category, normalize_gender
from ..reference import check_room_mapping

logger = logging.getLogger(__name__)


class RoomConfig:
    """Loader for the gender/category room mapping and the room inventory.

    room-mapping.json: {"Male": {"A+": ["302", ...], ...}, "Female": {...}}
    rooms.csv: room_number,gender,category,bed_count[,hostel,locker_count]
    assignments.csv: occupant_id,room_number[,bed_number,locker_number,active]
    """

    def __init__(
        self,
        mapping_path: Path | None = None,
        inventory_path: Path | None = None,
        assignments_path: Path | None = None,
    ):
        self.mapping: dict[str, dict[str, list[str]]] = DEFAULT_ROOM_MAPPING
        self.rooms: list[Room] = []
        self.assignments: list[OccupantAssignment] = []

        if mapping_path and mapping_path.exists():
            self._load_mapping(mapping_path)
        if inventory_path and inventory_path.exists():
            self._load_inventory(inventory_path)
        if assignments_path and assignments_path.exists():
            self._load_assignments(assignments_path)

    def _load_mapping(self, path: Path) -> None:
        """Load the room mapping from JSON."""
        with open(path, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(path, f"Invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(path, "Expected an object of gender -> category -> rooms")

        mapping: dict[str, dict[str, list[str]]] = {}
        for raw_gender, categories in data.items():
            gender = normalize_gender(raw_gender)
            if gender is None:
                raise ConfigurationError(path, f"Unknown gender '{raw_gender}'")
            if not isinstance(categories, dict):
                raise ConfigurationError(path, f"Expected an object of categories for {raw_gender}")

            mapping[gender] = {}
            for raw_category, rooms in categories.items():
                category = normalize_category(raw_category)
                if category is None:
                    raise ConfigurationError(path, f"Unknown category '{raw_category}'")
                if not isinstance(rooms, list):
                    raise ConfigurationError(
                        path, f"Expected a list of rooms for {raw_gender} {raw_category}"
                    )
                mapping[gender][category] = [str(room).strip() for room in rooms]

        check_room_mapping(mapping, path)
        self.mapping = mapping
        logger.info(f"Loaded room mapping for {len(mapping)} genders from {path}")

    def _load_inventory(self, path: Path) -> None:
        """Load the room inventory from CSV."""
        with open(path, encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for line, row in enumerate(reader, start=2):
                room_number = row.get("room_number", "").strip()
                if not room_number:
                    continue

                gender = normalize_gender(row.get("gender"))
                category = normalize_category(row.get("category"))
                if gender is None or category is None:
                    raise ConfigurationError(path, f"Bad gender/category at line {line}")

                try:
                    bed_count = int(row.get("bed_count", "0").strip() or 0)
                    locker_str = (row.get("locker_count") or "").strip()
                    locker_count = int(locker_str) if locker_str else None
                except ValueError as e:
                    raise ConfigurationError(path, f"Bad count at line {line}: {e}") from e

                self.rooms.append(
                    Room(
                        room_number=room_number,
                        gender=gender,
                        category=category,
                        bed_count=bed_count,
                        hostel=(row.get("hostel") or "").strip() or None,
                        locker_count=locker_count,
                    )
                )
        logger.info(f"Loaded {len(self.rooms)} rooms from {path}")

    def _load_assignments(self, path: Path) -> None:
        """Load current bed/locker assignments from CSV."""
        with open(path, encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for line, row in enumerate(reader, start=2):
                occupant_id = (row.get("occupant_id") or "").strip()
                room_number = (row.get("room_number") or "").strip()
                if not occupant_id or not room_number:
                    raise ConfigurationError(path, f"Missing occupant_id or room_number at line {line}")

                active = (row.get("active") or "true").strip().lower() not in ("false", "0", "no")
                self.assignments.append(
                    OccupantAssignment(
                        occupant_id=occupant_id,
                        room_number=room_number,
                        bed_number=(row.get("bed_number") or "").strip() or None,
                        locker_number=(row.get("locker_number") or "").strip() or None,
                        active=active,
                    )
                )
        logger.info(f"Loaded {len(self.assignments)} assignments from {path}")

    def get_room(self, room_number: str) -> Room | None:
        """Get a room by number."""
        for room in self.rooms:
            if room.room_number == room_number:
                return room
        return None
