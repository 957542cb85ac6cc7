from datetime import date, timedelta
from itertools import count, islice

import pytest

from openinvite.models.enums import RecurrenceEndType, RecurrenceType
from openinvite.schemas.plan import PlanCreate, PlanRecurrence
from openinvite.services.plan_service import PlanValidationError
from openinvite.services.recurrence_service import RecurrenceExpander


@pytest.fixture
def expander():
    ids = count(1)
    return RecurrenceExpander(
        id_factory=lambda: f"plan-{next(ids)}",
        series_id_factory=lambda: "series-1",
    )


def _template(start, recurrence, deadline_gap=2):
    return PlanCreate(
        title="Weekly Volleyball",
        date=start,
        time="18:30",
        location="City Park",
        total_spots=12,
        rsvp_deadline=start - timedelta(days=deadline_gap),
        visibility={"type": "friends"},
        recurrence=recurrence,
    )


def test_weekly_series_ending_after_four(expander):
    start = date(2025, 1, 7)
    template = _template(
        start, {"type": "weekly", "end": {"type": "after", "occurrences": 4}}
    )

    plans = expander.expand(template, "me", max_count=10)

    assert [p.date for p in plans] == [start + timedelta(weeks=k) for k in range(4)]
    assert [p.rsvp_deadline for p in plans] == [p.date - timedelta(days=2) for p in plans]
    assert [p.recurrence.instance_index for p in plans] == [0, 1, 2, 3]
    assert {p.series_id for p in plans} == {"series-1"}
    assert len({p.id for p in plans}) == 4
    assert all(p.filled_spots == 0 and p.created_by == "me" for p in plans)
    assert all(p.title == "Weekly Volleyball" for p in plans)


def test_open_ended_series_is_capped(expander):
    template = _template(date(2025, 1, 7), {"type": "weekly"})
    assert len(expander.expand(template, "me", max_count=5)) == 5
    assert expander.expand(template, "me", max_count=0) == []


def test_iteration_is_lazy_and_restartable(expander):
    start = date(2025, 1, 7)
    template = _template(start, {"type": "biweekly"})

    first_thousand = list(islice(expander.iter_occurrences(template, "me"), 1000))
    assert first_thousand[-1].date == start + timedelta(weeks=2 * 999)

    # Restarting from a later member reproduces the same dates
    member = first_thousand[3]
    restarted = list(islice(expander.iter_occurrences(member, "me"), 3))
    assert [p.date for p in restarted] == [p.date for p in first_thousand[3:6]]
    assert [p.recurrence.instance_index for p in restarted] == [3, 4, 5]


def test_on_date_end_is_inclusive(expander):
    template = _template(
        date(2025, 1, 1),
        {"type": "weekly", "end": {"type": "on_date", "end_date": "2025-01-15"}},
    )
    plans = expander.expand(template, "me", max_count=10)
    assert [p.date for p in plans] == [
        date(2025, 1, 1),
        date(2025, 1, 8),
        date(2025, 1, 15),
    ]


def test_custom_interval_without_days_repeats_weekly(expander):
    template = _template(date(2025, 1, 1), {"type": "custom", "custom_days": 0})
    plans = expander.expand(template, "me", max_count=3)
    assert [p.date for p in plans] == [
        date(2025, 1, 1),
        date(2025, 1, 8),
        date(2025, 1, 15),
    ]


def test_non_recurring_template_is_rejected(expander):
    template = _template(date(2025, 1, 1), None)
    with pytest.raises(ValueError):
        next(expander.iter_occurrences(template, "me"))


def test_monthly_series_from_jan_31(plan_service):
    plans = plan_service.create_plan(
        _template(date(2025, 1, 31), {"type": "monthly"}, deadline_gap=1),
        created_by="me",
    )
    assert [p.date for p in plans] == [
        date(2025, 1, 31),
        date(2025, 2, 28),
        date(2025, 3, 31),
        date(2025, 4, 30),
        date(2025, 5, 31),
    ]
    assert plans[1].rsvp_deadline == date(2025, 2, 27)


def test_series_with_no_occurrences_is_rejected(plan_service, store):
    with pytest.raises(PlanValidationError):
        plan_service.create_plan(
            _template(
                date(2025, 1, 7),
                {"type": "weekly", "end": {"type": "after", "occurrences": 0}},
            ),
            created_by="me",
        )
    assert store.plans == {}


def test_end_after_requires_a_count():
    with pytest.raises(ValueError):
        PlanRecurrence(type="weekly", end={"type": "after"})


@pytest.mark.parametrize(
    "recurrence,label",
    [
        (None, "Does not repeat"),
        ({"type": "none"}, "Does not repeat"),
        ({"type": "weekly"}, "Repeats weekly"),
        (
            {"type": "biweekly", "end": {"type": "after", "occurrences": 1}},
            "Repeats every 2 weeks, 1 time",
        ),
        (
            {"type": "monthly", "end": {"type": "after", "occurrences": 6}},
            "Repeats monthly, 6 times",
        ),
        ({"type": "custom", "custom_days": 1}, "Repeats daily"),
        (
            {
                "type": "custom",
                "custom_days": 10,
                "end": {"type": "on_date", "end_date": "2025-03-01"},
            },
            "Repeats every 10 days until Mar 1, 2025",
        ),
    ],
)
def test_recurrence_labels(recurrence, label):
    parsed = PlanRecurrence(**recurrence) if recurrence else None
    assert RecurrenceExpander.get_recurrence_label(parsed) == label


def test_extend_series_adds_only_beyond_the_latest(plan_service, plan_data, today):
    plans = plan_service.create_plan(
        plan_data(days_ahead=1, recurrence={"type": "weekly"}), created_by="me"
    )
    series_id = plans[0].series_id
    horizon = plans[0].date + timedelta(weeks=9)

    added = plan_service.extend_series(series_id, horizon)

    assert [p.recurrence.instance_index for p in added] == [5, 6, 7, 8, 9]
    assert added[-1].date == horizon
    assert len(plan_service.get_series(series_id)) == 10

    # A deleted occurrence is not brought back by a later top-up
    plan_service.delete_plan(plans[2].id)
    assert plan_service.extend_series(series_id, horizon) == []
    assert len(plan_service.get_series(series_id)) == 9


def test_extend_series_carries_series_edits_forward(plan_service, plan_data):
    plans = plan_service.create_plan(
        plan_data(days_ahead=1, recurrence={"type": "weekly"}), created_by="me"
    )
    series_id = plans[0].series_id
    plan_service.update_series_plans(series_id, {"title": "Beach Volleyball"})

    added = plan_service.extend_series(series_id, plans[0].date + timedelta(weeks=5))

    assert len(added) == 1
    assert added[0].title == "Beach Volleyball"
    assert added[0].date == plans[0].date + timedelta(weeks=5)


def test_extend_series_respects_end_count(plan_service, plan_data):
    plans = plan_service.create_plan(
        plan_data(
            days_ahead=1,
            recurrence={"type": "weekly", "end": {"type": "after", "occurrences": 6}},
        ),
        created_by="me",
    )
    added = plan_service.extend_series(
        plans[0].series_id, plans[0].date + timedelta(weeks=20)
    )
    assert [p.recurrence.instance_index for p in added] == [5]


def test_extend_open_series_counts_new_occurrences(plan_service, plan_data, today):
    plan_service.create_plan(
        plan_data(days_ahead=1, recurrence={"type": "weekly"}), created_by="me"
    )
    # Existing: today+1 .. today+29; horizon today+43 adds two more
    assert plan_service.extend_open_series(horizon_days=43, today=today) == 2
    assert plan_service.extend_open_series(horizon_days=43, today=today) == 0


def test_monthly_restart_keeps_the_anchor_day(expander):
    template = _template(date(2025, 1, 31), {"type": "monthly"}, deadline_gap=1)
    plans = expander.expand(template, "me", max_count=4)

    # Restarting from the clamped Feb 28 member still lands on month ends
    restarted = list(islice(expander.iter_occurrences(plans[1], "me"), 3))
    assert [p.date for p in restarted] == [
        date(2025, 2, 28),
        date(2025, 3, 31),
        date(2025, 4, 30),
    ]
    assert all(p.recurrence.anchor_date == date(2025, 1, 31) for p in restarted)


def test_extend_series_ignores_edits_to_the_first_occurrence(plan_service):
    plans = plan_service.create_plan(
        _template(date(2025, 1, 1), {"type": "weekly"}), created_by="me"
    )
    series_id = plans[0].series_id
    plan_service.update_plan(
        plans[0].id, {"date": date(2024, 12, 25), "rsvp_deadline": date(2024, 12, 20)}
    )

    added = plan_service.extend_series(series_id, date(2025, 3, 1))

    assert [(p.recurrence.instance_index, p.date) for p in added] == [
        (5, date(2025, 2, 5)),
        (6, date(2025, 2, 12)),
        (7, date(2025, 2, 19)),
        (8, date(2025, 2, 26)),
    ]
    assert [p.rsvp_deadline for p in added] == [p.date - timedelta(days=2) for p in added]

    dates = [p.date for p in plan_service.get_series(series_id)]
    assert dates == sorted(set(dates))


def test_extend_monthly_series_after_deleting_the_first(plan_service):
    plans = plan_service.create_plan(
        _template(date(2025, 1, 31), {"type": "monthly"}, deadline_gap=1),
        created_by="me",
    )
    series_id = plans[0].series_id
    plan_service.delete_plan(plans[0].id)

    added = plan_service.extend_series(series_id, date(2025, 7, 31))

    assert [(p.recurrence.instance_index, p.date) for p in added] == [
        (5, date(2025, 6, 30)),
        (6, date(2025, 7, 31)),
    ]
    assert [p.rsvp_deadline for p in added] == [date(2025, 6, 29), date(2025, 7, 30)]
