"""Charge computation for staff and guest occupants."""

import calendar
from datetime import date

from .exceptions import InvalidOperationError
from .models import (
    ChargeResult,
    ChargeType,
    OccupantType,
    RateSettings,
    StaffGuestOccupant,
)
from .normalization import parse_date, parse_month


def days_in_month(year: int, month: int) -> int:
    """Number of calendar days in a month."""
    return calendar.monthrange(year, month)[1]


def last_day_of_month(selected_month: str) -> date:
    """Last calendar day of a "YYYY-MM" month.

    Raises:
        ValueError: If the month string is malformed
    """
    parsed = parse_month(selected_month)
    if parsed is None:
        raise ValueError(f"Invalid month: '{selected_month}'. Expected YYYY-MM")
    year, month = parsed
    return date(year, month, days_in_month(year, month))


def elapsed_days(start, end) -> int:
    """Whole days between two dates, both truncated to midnight; never negative."""
    return max(0, (parse_date(end) - parse_date(start)).days)


def _fmt(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return f"{value:g}"


class ChargeCalculator:
    """Computes the billable amount for an occupant.

    Rules, in priority order:
    1. Guests are never charged.
    2. Monthly staff: a fixed monthly amount, or days in the selected month
       multiplied by the daily rate.
    3. Everyone else: elapsed days from check-in to check-out (or today)
       multiplied by the daily rate.

    Rate settings are always passed in; per-occupant overrides take
    precedence over them.
    """

    def compute_charge(
        self,
        occupant: StaffGuestOccupant,
        rate_settings: RateSettings,
        today: date | None = None,
    ) -> ChargeResult:
        """Compute the charge for an occupant.

        Args:
            occupant: Occupant to bill
            rate_settings: Default tariffs in force for this computation
            today: End date for open stays (defaults to today)

        Returns:
            ChargeResult with the formulaic amount and any stored override

        Raises:
            InvalidOperationError: If the time basis needed for the occupant is missing
        """
        override = occupant.calculated_charges

        if occupant.type == OccupantType.GUEST:
            return ChargeResult(
                amount=0,
                breakdown_text="Guests are not charged",
                override_amount=override,
            )

        if occupant.is_monthly_staff:
            return self._monthly_charge(occupant, rate_settings, override)

        return self._daily_charge(occupant, rate_settings, today or date.today(), override)

    def _monthly_charge(
        self,
        occupant: StaffGuestOccupant,
        rate_settings: RateSettings,
        override: float | None,
    ) -> ChargeResult:
        if occupant.charge_type == ChargeType.MONTHLY_FIXED:
            amount = (
                occupant.monthly_fixed_amount
                if occupant.monthly_fixed_amount is not None
                else rate_settings.monthly_fixed_amount
            )
            month = occupant.selected_month or "month"
            return ChargeResult(
                amount=amount,
                breakdown_text=f"Monthly fixed charge for {month}: {_fmt(amount)}",
                override_amount=override,
            )

        parsed = parse_month(occupant.selected_month)
        if parsed is None:
            raise InvalidOperationError(
                f"Monthly staff stay requires selectedMonth (YYYY-MM), got '{occupant.selected_month}'"
            )

        day_count = days_in_month(*parsed)
        rate = occupant.daily_rate if occupant.daily_rate is not None else rate_settings.staff_daily_rate
        amount = day_count * rate
        return ChargeResult(
            amount=amount,
            breakdown_text=(
                f"{day_count} days in {occupant.selected_month} × {_fmt(rate)}/day = {_fmt(amount)}"
            ),
            day_count=day_count,
            rate=rate,
            override_amount=override,
        )

    def _daily_charge(
        self,
        occupant: StaffGuestOccupant,
        rate_settings: RateSettings,
        today: date,
        override: float | None,
    ) -> ChargeResult:
        if occupant.checkin_date is None:
            raise InvalidOperationError(
                f"{occupant.type.value.capitalize()} stay requires a check-in date"
            )

        end = occupant.checkout_date or today
        day_count = elapsed_days(occupant.checkin_date, end)
        rate = occupant.daily_rate if occupant.daily_rate is not None else rate_settings.staff_daily_rate
        amount = day_count * rate
        return ChargeResult(
            amount=amount,
            breakdown_text=f"{day_count} days × {_fmt(rate)}/day = {_fmt(amount)}",
            day_count=day_count,
            rate=rate,
            override_amount=override,
        )


def compute_charge(
    occupant: StaffGuestOccupant,
    rate_settings: RateSettings,
    today: date | None = None,
) -> ChargeResult:
    """Shortcut for ``ChargeCalculator().compute_charge``."""
    return ChargeCalculator().compute_charge(occupant, rate_settings, today)

