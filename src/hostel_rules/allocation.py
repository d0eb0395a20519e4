"""Room, bed and locker availability for allocation."""

import logging

from .exceptions import AllocationConflictError, ResolutionError
from .models import (
    AllocationSelection,
    BedLockerAvailability,
    OccupantAssignment,
    Room,
    RoomAvailability,
)
from .normalization import normalize_category, normalize_gender
from .repository import OccupancyRepository, bed_ids, locker_ids

logger = logging.getLogger(__name__)


class AllocationResolver:
    """Computes availability from occupancy read fresh on every call.

    Nothing is cached between calls; the repository is the single source of
    occupancy and enforces one occupant per bed at write time.
    """

    def __init__(self, repository: OccupancyRepository) -> None:
        self.repository = repository

    def _active_assignments(self, room_number: str) -> list[OccupantAssignment]:
        return [a for a in self.repository.list_assignments(room_number) if a.active]

    def _room_availability(self, room: Room) -> RoomAvailability:
        occupied = len(self._active_assignments(room.room_number))
        if occupied > room.bed_count:
            logger.warning(
                f"Room {room.room_number} has {occupied} occupants for {room.bed_count} beds"
            )

        return RoomAvailability(
            room_number=room.room_number,
            gender=room.gender,
            category=room.category,
            bed_count=room.bed_count,
            student_count=occupied,
            available_beds=max(0, room.bed_count - occupied),
            occupancy_rate=occupied / room.bed_count if room.bed_count else 0.0,
        )

    def availability_for(
        self, gender: str, category: str, hostel: str | None = None
    ) -> list[RoomAvailability]:
        """Get availability of every room for a gender and category.

        Args:
            gender: Gender (any accepted alias)
            category: Room category (any accepted spelling)
            hostel: Restrict to one hostel (used for staff/guest allocation)

        Returns:
            RoomAvailability per room, ordered by room number
        """
        canonical_gender = normalize_gender(gender)
        canonical_category = normalize_category(category)
        if canonical_gender is None or canonical_category is None:
            return []

        rooms = self.repository.list_rooms(canonical_gender, canonical_category, hostel)
        result = [self._room_availability(room) for room in rooms]
        result.sort(key=lambda r: (len(r.room_number), r.room_number))

        for entry in result:
            logger.debug(
                f"Room {entry.room_number}: {entry.student_count}/{entry.bed_count} occupied"
            )
        return result

    def _get_room(self, room_number: str) -> Room:
        room = self.repository.get_room(room_number)
        if room is None:
            raise ResolutionError("room", room_number)
        return room

    def bed_locker_availability(self, room_number: str) -> BedLockerAvailability:
        """Get free beds and lockers of a room.

        Free slots are the complement of slots held by active occupants.

        Raises:
            ResolutionError: If the room does not exist
        """
        room = self._get_room(room_number)
        active = self._active_assignments(room_number)
        taken_beds = {a.bed_number for a in active if a.bed_number}
        taken_lockers = {a.locker_number for a in active if a.locker_number}

        return BedLockerAvailability(
            room_number=room_number,
            available_beds=[b for b in bed_ids(room) if b not in taken_beds],
            available_lockers=[lk for lk in locker_ids(room) if lk not in taken_lockers],
        )

    def select_room(self, selection: AllocationSelection, room_number: str) -> AllocationSelection:
        """Choose a room; any previously chosen bed and locker are cleared."""
        self._get_room(room_number)
        return selection.with_room(room_number)

    def auto_select(self, room_number: str) -> AllocationSelection:
        """Select a room with its first free bed and locker (None where none are free)."""
        availability = self.bed_locker_availability(room_number)
        return AllocationSelection(
            room_number=room_number,
            bed_number=availability.available_beds[0] if availability.available_beds else None,
            locker_number=(
                availability.available_lockers[0] if availability.available_lockers else None
            ),
        )

    def resolve_selection(
        self,
        selection: AllocationSelection,
        bed_number: str | None = None,
        locker_number: str | None = None,
    ) -> AllocationSelection:
        """Confirm a bed/locker choice within the selected room against fresh occupancy.

        Raises:
            ResolutionError: If no room is selected or the room does not exist
            AllocationConflictError: If the bed or locker is not free
        """
        if not selection.room_number:
            raise ResolutionError("room", "")

        room_number = selection.room_number
        availability = self.bed_locker_availability(room_number)
        room = self._get_room(room_number)

        if bed_number is not None:
            if bed_number not in bed_ids(room):
                raise ResolutionError("bed", f"{room_number}/{bed_number}")
            if bed_number not in availability.available_beds:
                raise AllocationConflictError(room_number, bed_number=bed_number, reason="bed taken")

        if locker_number is not None:
            if locker_number not in locker_ids(room):
                raise ResolutionError("locker", f"{room_number}/{locker_number}")
            if locker_number not in availability.available_lockers:
                raise AllocationConflictError(
                    room_number, locker_number=locker_number, reason="locker taken"
                )

        return AllocationSelection(
            room_number=room_number,
            bed_number=bed_number if bed_number is not None else selection.bed_number,
            locker_number=locker_number if locker_number is not None else selection.locker_number,
        )
