"""Validity state machine, renewal and check-in/out for staff and guest occupants."""

import logging
from dataclasses import replace
from datetime import date, datetime

from .charges import ChargeCalculator, last_day_of_month
from .exceptions import InvalidOperationError
from .models import (
    OccupantType,
    RateSettings,
    RenewalResult,
    StaffGuestOccupant,
    ValidityState,
)
from .normalization import format_month, parse_date, parse_month

logger = logging.getLogger(__name__)


def is_checked_in(occupant: StaffGuestOccupant) -> bool:
    """Checked in: a check-in date is recorded and no check-out date."""
    return occupant.checkin_date is not None and occupant.checkout_date is None


def is_checked_out(occupant: StaffGuestOccupant) -> bool:
    return occupant.checkout_date is not None


def check_in(occupant: StaffGuestOccupant, when: date | datetime | None = None) -> StaffGuestOccupant:
    """Record a check-in, starting a new stay.

    Raises:
        InvalidOperationError: If the occupant is already checked in
    """
    if is_checked_in(occupant):
        raise InvalidOperationError(f"{occupant.name or occupant.id} is already checked in")
    return replace(occupant, checkin_date=parse_date(when or date.today()), checkout_date=None)


def check_out(occupant: StaffGuestOccupant, when: date | datetime | None = None) -> StaffGuestOccupant:
    """Record a check-out.

    Raises:
        InvalidOperationError: If the occupant is not checked in, or the
            check-out date precedes the check-in date
    """
    if not is_checked_in(occupant):
        raise InvalidOperationError(f"{occupant.name or occupant.id} is not checked in")

    checkout = parse_date(when or date.today())
    if checkout < parse_date(occupant.checkin_date):
        raise InvalidOperationError(
            f"Check-out {checkout} is before check-in {parse_date(occupant.checkin_date)}"
        )
    return replace(occupant, checkout_date=checkout)


def current_month(today: date) -> str:
    return format_month(today.year, today.month)


class OccupancyLifecycle:
    """Active/Expired state of an occupant and the renewal transition.

    Expiry is derived: a monthly staff occupant expires once today is past
    the last day of its selected month. Any staff occupant whose isActive
    flag is false is expired regardless of dates. Renewal is defined only for
    monthly staff.
    """

    def __init__(self, calculator: ChargeCalculator | None = None) -> None:
        self.calculator = calculator or ChargeCalculator()

    def state(self, occupant: StaffGuestOccupant, today: date | None = None) -> ValidityState:
        """Get the validity state of an occupant on a given day."""
        today = today or date.today()

        if occupant.type == OccupantType.STAFF and not occupant.is_active:
            return ValidityState.EXPIRED

        if occupant.is_monthly_staff and occupant.selected_month:
            if today > last_day_of_month(occupant.selected_month):
                return ValidityState.EXPIRED

        return ValidityState.ACTIVE

    def is_expired(self, occupant: StaffGuestOccupant, today: date | None = None) -> bool:
        return self.state(occupant, today) == ValidityState.EXPIRED

    def renew(
        self,
        occupant: StaffGuestOccupant,
        new_month: str,
        rate_settings: RateSettings,
        today: date | None = None,
        room_number: str | None = None,
        bed_number: str | None = None,
    ) -> RenewalResult:
        """Renew a monthly staff occupant for a new month.

        The occupant is returned as a new object: the original (and any
        charge already computed for its prior month) is left untouched.

        Args:
            occupant: Occupant to renew
            new_month: Month to bill, "YYYY-MM", not before the current month
            rate_settings: Tariffs in force for the new period
            today: Reference date (defaults to today)
            room_number: Optional new room; clears the bed unless bed_number is given
            bed_number: Optional new bed

        Returns:
            RenewalResult with the renewed occupant and its new charge

        Raises:
            InvalidOperationError: If the occupant is not monthly staff or the
                month is malformed or in the past
        """
        today = today or date.today()

        if not occupant.is_monthly_staff:
            raise InvalidOperationError(
                f"Renewal is only defined for monthly staff, not "
                f"{occupant.type.value}/{occupant.stay_type.value if occupant.stay_type else 'none'}"
            )

        parsed = parse_month(new_month)
        if parsed is None:
            raise InvalidOperationError(f"Invalid renewal month: '{new_month}'. Expected YYYY-MM")

        if parsed < (today.year, today.month):
            raise InvalidOperationError(
                f"Renewal month {new_month} is before the current month {current_month(today)}"
            )

        changes = {
            "selected_month": format_month(*parsed),
            "is_active": True,
            "calculated_charges": None,
        }
        if room_number is not None and room_number != occupant.room_number:
            changes["room_number"] = room_number
            changes["bed_number"] = bed_number
        elif bed_number is not None:
            changes["bed_number"] = bed_number

        renewed = replace(occupant, **changes)
        charge = self.calculator.compute_charge(renewed, rate_settings, today)

        logger.info(
            f"Renewed {occupant.name or occupant.id} from {occupant.selected_month} "
            f"to {renewed.selected_month}: {charge.amount}"
        )
        return RenewalResult(
            occupant=renewed,
            charge=charge,
            previous_month=occupant.selected_month,
        )
