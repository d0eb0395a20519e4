"""Persistence collaborator interfaces and an in-memory implementation."""

import logging
from abc import ABC, abstractmethod

from .constants import BED_PREFIX, LOCKER_PREFIX
from .exceptions import AllocationConflictError, ResolutionError
from .models import OccupantAssignment, Room, StudentRow
from .normalization import normalize_category, normalize_gender

logger = logging.getLogger(__name__)


def bed_ids(room: Room) -> list[str]:
    """Bed identifiers of a room, in order ("B1", "B2", ...)."""
    return [f"{BED_PREFIX}{i}" for i in range(1, room.bed_count + 1)]


def locker_ids(room: Room) -> list[str]:
    """Locker identifiers of a room, in order ("L1", "L2", ...)."""
    return [f"{LOCKER_PREFIX}{i}" for i in range(1, room.lockers + 1)]


class StudentRepository(ABC):
    """Persists validated student rows."""

    @abstractmethod
    def save_student(self, row: StudentRow) -> None:
        """Persist one row.

        Raises:
            AllocationConflictError: If the row would overbook its room
        """
        pass


class OccupancyRepository(ABC):
    """Supplies current rooms and their occupants.

    Implementations must return fresh data on every call and enforce at most
    one occupant per bed when writing.
    """

    @abstractmethod
    def list_rooms(
        self, gender: str, category: str, hostel: str | None = None
    ) -> list[Room]:
        """List rooms for a gender and category, optionally within one hostel."""
        pass

    @abstractmethod
    def get_room(self, room_number: str) -> Room | None:
        """Get a room by number."""
        pass

    @abstractmethod
    def list_assignments(self, room_number: str) -> list[OccupantAssignment]:
        """List bed/locker assignments in a room (active and inactive)."""
        pass


class InMemoryRepository(StudentRepository, OccupancyRepository):
    """Dictionary-backed repository used by the CLI and tests."""

    def __init__(
        self,
        rooms: list[Room] | None = None,
        assignments: list[OccupantAssignment] | None = None,
    ) -> None:
        self.rooms: dict[str, Room] = {room.room_number: room for room in rooms or []}
        self.assignments: list[OccupantAssignment] = list(assignments or [])
        self.students: list[StudentRow] = []
        self.save_calls = 0

    def list_rooms(self, gender: str, category: str, hostel: str | None = None) -> list[Room]:
        gender = normalize_gender(gender)
        category = normalize_category(category)
        return [
            room
            for room in self.rooms.values()
            if room.gender == gender
            and room.category == category
            and (hostel is None or room.hostel == hostel)
        ]

    def get_room(self, room_number: str) -> Room | None:
        return self.rooms.get(room_number)

    def list_assignments(self, room_number: str) -> list[OccupantAssignment]:
        return [a for a in self.assignments if a.room_number == room_number]

    def assign(
        self,
        occupant_id: str,
        room_number: str,
        bed_number: str | None = None,
        locker_number: str | None = None,
    ) -> OccupantAssignment:
        """Record an assignment, rejecting an already-taken bed or locker.

        When no bed is given the first free bed is used.

        Raises:
            ResolutionError: If the room does not exist
            AllocationConflictError: If the bed/locker is taken or the room is full
        """
        room = self.rooms.get(room_number)
        if room is None:
            raise ResolutionError("room", room_number)

        active = [a for a in self.list_assignments(room_number) if a.active]
        taken_beds = {a.bed_number for a in active if a.bed_number}
        taken_lockers = {a.locker_number for a in active if a.locker_number}

        if len(active) >= room.bed_count:
            raise AllocationConflictError(room_number, reason="room is full")

        if bed_number is None:
            bed_number = next(b for b in bed_ids(room) if b not in taken_beds)
        elif bed_number in taken_beds:
            raise AllocationConflictError(room_number, bed_number=bed_number, reason="bed taken")

        if locker_number is not None and locker_number in taken_lockers:
            raise AllocationConflictError(
                room_number, locker_number=locker_number, reason="locker taken"
            )

        assignment = OccupantAssignment(
            occupant_id=occupant_id,
            room_number=room_number,
            bed_number=bed_number,
            locker_number=locker_number,
        )
        self.assignments.append(assignment)
        return assignment

    def save_student(self, row: StudentRow) -> None:
        self.save_calls += 1
        if row.room_number in self.rooms:
            self.assign(row.roll_number or f"row-{len(self.students)}", row.room_number)
        self.students.append(row)
        logger.debug(f"Saved student {row.roll_number} in room {row.room_number}")
