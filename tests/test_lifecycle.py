"""Tests for the occupant lifecycle."""

from datetime import date

import pytest

from hostel_rules.exceptions import InvalidOperationError
from hostel_rules.lifecycle import (
    OccupancyLifecycle,
    check_in,
    check_out,
    is_checked_in,
    is_checked_out,
)
from hostel_rules.models import (
    ChargeType,
    OccupantType,
    RateSettings,
    StaffGuestOccupant,
    StayType,
    ValidityState,
)


@pytest.fixture
def lifecycle():
    return OccupancyLifecycle()


@pytest.fixture
def staff():
    return StaffGuestOccupant(
        type=OccupantType.STAFF,
        id="st1",
        name="Ravi",
        stay_type=StayType.MONTHLY,
        charge_type=ChargeType.PER_DAY,
        selected_month="2024-06",
        room_number="309",
        bed_number="B1",
        calculated_charges=2800,
    )


class TestState:
    """Tests for validity state."""

    def test_active_within_month(self, lifecycle, staff):
        assert lifecycle.state(staff, date(2024, 6, 30)) == ValidityState.ACTIVE

    def test_expired_after_last_day(self, lifecycle, staff):
        assert lifecycle.state(staff, date(2024, 7, 1)) == ValidityState.EXPIRED
        assert lifecycle.is_expired(staff, date(2024, 7, 1))

    def test_inactive_flag_expires_staff(self, lifecycle, staff):
        staff.is_active = False
        assert lifecycle.state(staff, date(2024, 6, 15)) == ValidityState.EXPIRED

    def test_inactive_string_from_record(self, lifecycle):
        occupant = StaffGuestOccupant.from_dict(
            {"type": "staff", "stayType": "daily", "isActive": "false"}
        )
        assert lifecycle.state(occupant, date(2024, 6, 15)) == ValidityState.EXPIRED

    def test_guest_active(self, lifecycle):
        guest = StaffGuestOccupant(type=OccupantType.GUEST, is_active=False)
        assert lifecycle.state(guest, date(2030, 1, 1)) == ValidityState.ACTIVE

    def test_daily_staff_active(self, lifecycle):
        occupant = StaffGuestOccupant(type=OccupantType.STAFF, stay_type=StayType.DAILY)
        assert lifecycle.state(occupant, date(2030, 1, 1)) == ValidityState.ACTIVE


class TestRenew:
    """Tests for monthly staff renewal."""

    def test_renew_expired(self, lifecycle, staff):
        result = lifecycle.renew(staff, "2024-07", RateSettings(), date(2024, 7, 2))

        assert result.occupant.selected_month == "2024-07"
        assert result.previous_month == "2024-06"
        assert result.charge.amount == 3100
        assert lifecycle.state(result.occupant, date(2024, 7, 2)) == ValidityState.ACTIVE

    def test_original_untouched(self, lifecycle, staff):
        lifecycle.renew(staff, "2024-07", RateSettings(), date(2024, 7, 2))

        assert staff.selected_month == "2024-06"
        assert staff.calculated_charges == 2800

    def test_renew_reactivates(self, lifecycle, staff):
        staff.is_active = False
        result = lifecycle.renew(staff, "2024-08", RateSettings(), date(2024, 7, 2))
        assert result.occupant.is_active

    def test_renew_active_occupant(self, lifecycle, staff):
        """Test an active occupant may be renewed ahead of time."""
        result = lifecycle.renew(staff, "2024-07", RateSettings(), date(2024, 6, 20))
        assert result.occupant.selected_month == "2024-07"

    def test_stored_charges_cleared(self, lifecycle, staff):
        result = lifecycle.renew(staff, "2024-07", RateSettings(), date(2024, 7, 2))
        assert result.occupant.calculated_charges is None
        assert not result.charge.is_overridden

    def test_room_change_clears_bed(self, lifecycle, staff):
        result = lifecycle.renew(
            staff, "2024-07", RateSettings(), date(2024, 7, 2), room_number="310"
        )
        assert result.occupant.room_number == "310"
        assert result.occupant.bed_number is None

    def test_room_and_bed(self, lifecycle, staff):
        result = lifecycle.renew(
            staff, "2024-07", RateSettings(), date(2024, 7, 2), room_number="310", bed_number="B2"
        )
        assert result.occupant.bed_number == "B2"

    def test_past_month_rejected(self, lifecycle, staff):
        with pytest.raises(InvalidOperationError):
            lifecycle.renew(staff, "2024-05", RateSettings(), date(2024, 7, 2))

    def test_malformed_month(self, lifecycle, staff):
        with pytest.raises(InvalidOperationError):
            lifecycle.renew(staff, "July", RateSettings(), date(2024, 7, 2))

    @pytest.mark.parametrize(
        "occupant",
        [
            StaffGuestOccupant(type=OccupantType.GUEST),
            StaffGuestOccupant(type=OccupantType.STAFF, stay_type=StayType.DAILY),
        ],
    )
    def test_not_monthly_staff(self, lifecycle, occupant):
        with pytest.raises(InvalidOperationError):
            lifecycle.renew(occupant, "2024-07", RateSettings(), date(2024, 7, 2))


class TestCheckInOut:
    """Tests for check-in and check-out."""

    def test_check_in(self):
        guest = StaffGuestOccupant(type=OccupantType.GUEST, name="Asha")

        checked_in = check_in(guest, date(2024, 6, 1))

        assert is_checked_in(checked_in)
        assert not is_checked_out(checked_in)
        assert not is_checked_in(guest)

    def test_check_out(self):
        guest = check_in(StaffGuestOccupant(type=OccupantType.GUEST), date(2024, 6, 1))

        checked_out = check_out(guest, date(2024, 6, 3))

        assert is_checked_out(checked_out)
        assert checked_out.checkout_date == date(2024, 6, 3)

    def test_double_check_in(self):
        guest = check_in(StaffGuestOccupant(type=OccupantType.GUEST), date(2024, 6, 1))
        with pytest.raises(InvalidOperationError):
            check_in(guest, date(2024, 6, 2))

    def test_check_out_without_check_in(self):
        with pytest.raises(InvalidOperationError):
            check_out(StaffGuestOccupant(type=OccupantType.GUEST), date(2024, 6, 2))

    def test_check_out_before_check_in(self):
        guest = check_in(StaffGuestOccupant(type=OccupantType.GUEST), date(2024, 6, 5))
        with pytest.raises(InvalidOperationError):
            check_out(guest, date(2024, 6, 4))

    def test_check_in_again_after_check_out(self):
        """Test a checked-out occupant can start a new stay."""
        guest = check_out(
            check_in(StaffGuestOccupant(type=OccupantType.GUEST), date(2024, 6, 1)),
            date(2024, 6, 2),
        )

        again = check_in(guest, date(2024, 6, 10))

        assert again.checkout_date is None
        assert again.checkin_date == date(2024, 6, 10)
