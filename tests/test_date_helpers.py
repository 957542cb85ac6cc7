from datetime import date

import pytest

from openinvite.models.enums import RecurrenceType
from openinvite.utils.date_helpers import DateHelpers


def test_add_months_clamps_to_month_end():
    assert DateHelpers.add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert DateHelpers.add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert DateHelpers.add_months(date(2025, 1, 15), 1) == date(2025, 2, 15)


def test_monthly_occurrences_keep_original_day():
    start = date(2025, 1, 31)
    dates = [
        DateHelpers.get_next_occurrence(start, RecurrenceType.MONTHLY, k)
        for k in range(4)
    ]
    assert dates == [
        date(2025, 1, 31),
        date(2025, 2, 28),
        date(2025, 3, 31),
        date(2025, 4, 30),
    ]


def test_weekly_and_biweekly_steps():
    start = date(2024, 12, 31)
    assert DateHelpers.get_next_occurrence(start, RecurrenceType.WEEKLY) == date(2025, 1, 7)
    assert DateHelpers.get_next_occurrence(
        start, RecurrenceType.BIWEEKLY, 2
    ) == date(2025, 1, 28)


@pytest.mark.parametrize("custom_days", [None, 0, -3])
def test_custom_interval_falls_back_to_a_week(custom_days):
    start = date(2025, 1, 1)
    assert DateHelpers.get_next_occurrence(
        start, RecurrenceType.CUSTOM, 1, custom_days
    ) == date(2025, 1, 8)


def test_custom_interval_uses_given_days():
    assert DateHelpers.get_next_occurrence(
        date(2025, 1, 1), RecurrenceType.CUSTOM, 3, 10
    ) == date(2025, 1, 31)


def test_non_recurring_type_has_no_next_occurrence():
    with pytest.raises(ValueError):
        DateHelpers.get_next_occurrence(date(2025, 1, 1), RecurrenceType.NONE)


def test_days_between_is_signed():
    assert DateHelpers.days_between(date(2025, 1, 1), date(2025, 1, 4)) == 3
    assert DateHelpers.days_between(date(2025, 1, 4), date(2025, 1, 1)) == -3


def test_deadline_checks():
    today = date(2025, 1, 10)
    assert DateHelpers.is_deadline_passed(date(2025, 1, 9), today)
    assert not DateHelpers.is_deadline_passed(date(2025, 1, 10), today)
    assert DateHelpers.is_deadline_soon(date(2025, 1, 12), today)
    assert not DateHelpers.is_deadline_soon(date(2025, 1, 13), today)
    assert not DateHelpers.is_deadline_soon(date(2025, 1, 9), today)


def test_format_date():
    today = date(2024, 12, 1)
    assert DateHelpers.format_date(today, today) == "Today"
    assert DateHelpers.format_date(date(2024, 12, 2), today) == "Tomorrow"
    assert DateHelpers.format_date(date(2024, 12, 31), today) == "Tue, Dec 31"


@pytest.mark.parametrize(
    "value,expected",
    [("18:30", "6:30 PM"), ("00:05", "12:05 AM"), ("12:00", "12:00 PM"), ("09:15", "9:15 AM")],
)
def test_format_time(value, expected):
    assert DateHelpers.format_time(value) == expected


def test_format_date_time():
    today = date(2024, 12, 30)
    assert (
        DateHelpers.format_date_time(date(2024, 12, 31), "18:30", today)
        == "Tomorrow at 6:30 PM"
    )
