from datetime import date, timedelta
from typing import Optional
from dateutil.relativedelta import relativedelta
from ..models.enums import RecurrenceType
from .constants import AppConstants


class DateHelpers:
    @staticmethod
    def today() -> date:
        return date.today()

    @staticmethod
    def add_days(start_date: date, days: int) -> date:
        return start_date + timedelta(days=days)

    @staticmethod
    def add_months(start_date: date, months: int) -> date:
        """Add calendar months, clamping to the last day of shorter months"""
        return start_date + relativedelta(months=months)

    @staticmethod
    def days_between(start_date: date, end_date: date) -> int:
        """Signed number of days from start_date to end_date"""
        return (end_date - start_date).days

    @staticmethod
    def custom_interval(custom_days: Optional[int]) -> int:
        """Interval for custom recurrence, falling back to a week"""
        if not custom_days or custom_days <= 0:
            return AppConstants.DEFAULT_CUSTOM_INTERVAL_DAYS
        return custom_days

    @staticmethod
    def get_next_occurrence(
        start_date: date,
        recurrence_type: RecurrenceType,
        occurrences: int = 1,
        custom_days: Optional[int] = None,
    ) -> date:
        """Calculate the date `occurrences` steps after start_date"""

        if recurrence_type == RecurrenceType.WEEKLY:
            return start_date + timedelta(weeks=occurrences)
        elif recurrence_type == RecurrenceType.BIWEEKLY:
            return start_date + timedelta(weeks=2 * occurrences)
        elif recurrence_type == RecurrenceType.MONTHLY:
            return DateHelpers.add_months(start_date, occurrences)
        elif recurrence_type == RecurrenceType.CUSTOM:
            interval = DateHelpers.custom_interval(custom_days)
            return start_date + timedelta(days=interval * occurrences)
        else:
            raise ValueError(f"Unsupported recurrence type: {recurrence_type}")

    @staticmethod
    def is_past(target_date: date, today: Optional[date] = None) -> bool:
        today = today or DateHelpers.today()
        return target_date < today

    @staticmethod
    def is_within(
        target_date: date, days: int, today: Optional[date] = None
    ) -> bool:
        """Check if target_date falls between today and today + days"""
        today = today or DateHelpers.today()
        return 0 <= DateHelpers.days_between(today, target_date) <= days

    @staticmethod
    def days_until(target_date: date, today: Optional[date] = None) -> int:
        today = today or DateHelpers.today()
        return DateHelpers.days_between(today, target_date)

    @staticmethod
    def is_deadline_soon(deadline: date, today: Optional[date] = None) -> bool:
        return DateHelpers.is_within(deadline, AppConstants.DEADLINE_SOON_DAYS, today)

    @staticmethod
    def is_deadline_passed(deadline: date, today: Optional[date] = None) -> bool:
        return DateHelpers.is_past(deadline, today)

    @staticmethod
    def format_date(target_date: date, today: Optional[date] = None) -> str:
        """Get human-readable date, e.g. 'Today', 'Tomorrow' or 'Tue, Dec 31'"""
        today = today or DateHelpers.today()
        diff = DateHelpers.days_between(today, target_date)

        if diff == 0:
            return "Today"
        elif diff == 1:
            return "Tomorrow"
        return f"{target_date.strftime('%a, %b')} {target_date.day}"

    @staticmethod
    def format_time(time_value: str) -> str:
        """Format 'HH:MM' as a 12-hour clock string"""
        hours, minutes = (int(part) for part in time_value.split(":"))
        period = "PM" if hours >= 12 else "AM"
        display_hours = hours % 12 or 12
        return f"{display_hours}:{minutes:02d} {period}"

    @staticmethod
    def format_date_time(
        target_date: date, time_value: str, today: Optional[date] = None
    ) -> str:
        return (
            f"{DateHelpers.format_date(target_date, today)} at "
            f"{DateHelpers.format_time(time_value)}"
        )
