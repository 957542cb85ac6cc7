from datetime import timedelta

import pytest

from openinvite.models.enums import NotificationType, RSVPStatus
from openinvite.schemas.message import PlanMessageCreate
from openinvite.schemas.plan import Plan
from openinvite.services.plan_service import (
    PermissionDeniedError,
    PlanNotFoundError,
    PlanValidationError,
)


@pytest.fixture
def series(plan_service, plan_data):
    return plan_service.create_plan(
        plan_data(
            days_ahead=1,
            visibility={"type": "groups", "group_ids": ["g1"]},
            recurrence={"type": "weekly"},
        ),
        created_by="me",
    )


def test_create_standalone_plan(make_plan, store, persistence):
    plan = make_plan()

    assert isinstance(plan, Plan)
    assert plan.filled_spots == 0
    assert plan.spots_left == 6
    assert not plan.is_full
    assert plan.created_by == "me"
    assert store.plans[plan.id] is plan
    assert persistence.saved["plans"][0]["id"] == plan.id


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "   "},
        {"location": ""},
        {"total_spots": 0},
        {"deadline_gap": -1},
    ],
)
def test_invalid_plans_are_rejected(plan_service, plan_data, store, overrides):
    with pytest.raises(PlanValidationError):
        plan_service.create_plan(plan_data(**overrides), created_by="me")
    assert store.plans == {}


def test_plan_needs_a_creator(plan_service, plan_data):
    with pytest.raises(PlanValidationError):
        plan_service.create_plan(plan_data())


def test_update_plan_checks_capacity(make_plan, plan_service, rsvp_service):
    plan = make_plan(total_spots=3)
    rsvp_service.set_rsvp("alex", plan.id, RSVPStatus.GOING)
    rsvp_service.set_rsvp("jordan", plan.id, RSVPStatus.GOING)

    with pytest.raises(PlanValidationError):
        plan_service.update_plan(plan.id, {"total_spots": 1})

    updated = plan_service.update_plan(plan.id, {"total_spots": 2})
    assert updated.is_full


def test_only_creator_can_edit(make_plan, plan_service):
    plan = make_plan()
    with pytest.raises(PermissionDeniedError):
        plan_service.update_plan(plan.id, {"title": "Hijacked"}, updated_by="alex")
    with pytest.raises(PermissionDeniedError):
        plan_service.delete_plan(plan.id, deleted_by="alex")


def test_update_unknown_plan(plan_service):
    with pytest.raises(PlanNotFoundError):
        plan_service.update_plan("missing", {"title": "Nope"})


def test_location_change_notifies_responders(
    make_plan, plan_service, rsvp_service, notification_service
):
    plan = make_plan()
    rsvp_service.set_rsvp("alex", plan.id, RSVPStatus.MAYBE)

    plan_service.update_plan(plan.id, {"location": "Sloan's Lake"}, updated_by="me")
    plan_service.update_plan(plan.id, {"notes": "Bring chairs"}, updated_by="me")

    updates = [
        n
        for n in notification_service.list_notifications("alex")
        if n.type == NotificationType.PLAN_UPDATE
    ]
    assert len(updates) == 1
    assert "location" in updates[0].message


def test_series_update_leaves_per_occurrence_fields(series, plan_service):
    original_dates = [p.date for p in series]
    original_spots = [p.total_spots for p in series]

    updated = plan_service.update_series_plans(
        series[0].series_id,
        {
            "title": "Beach Volleyball",
            "date": series[0].date,
            "time": "07:00",
            "visibility": {"type": "people", "user_ids": ["alex"]},
        },
        from_instance_index=2,
    )

    assert [p.recurrence.instance_index for p in updated] == [2, 3, 4]
    refreshed = plan_service.get_series(series[0].series_id)
    assert [p.title for p in refreshed] == ["Board Game Night"] * 2 + [
        "Beach Volleyball"
    ] * 3
    assert [p.date for p in refreshed] == original_dates
    assert [p.time for p in refreshed] == ["18:00"] * 5
    assert [p.total_spots for p in refreshed] == original_spots

    # Each occurrence owns its own visibility object
    refreshed[2].visibility.user_ids.append("sam")
    assert refreshed[3].visibility.user_ids == ["alex"]


def test_series_update_validates_before_applying(series, plan_service, rsvp_service):
    rsvp_service.set_rsvp("alex", series[4].id, RSVPStatus.GOING)
    rsvp_service.set_rsvp("jordan", series[4].id, RSVPStatus.GOING)

    with pytest.raises(PlanValidationError):
        plan_service.update_series_plans(
            series[0].series_id, {"title": "Smaller", "total_spots": 1}
        )
    assert all(p.title == "Board Game Night" for p in plan_service.get_series(series[0].series_id))


def test_series_update_unknown_series(plan_service):
    with pytest.raises(PlanNotFoundError):
        plan_service.update_series_plans("series_missing", {"title": "Nope"})


def test_delete_removes_rsvps_and_messages_but_not_siblings(
    series, plan_service, rsvp_service, message_service, store
):
    target = series[1]
    rsvp_service.set_rsvp("alex", target.id, RSVPStatus.GOING)
    rsvp_service.set_rsvp("alex", series[2].id, RSVPStatus.GOING)
    message_service.post_message(target.id, PlanMessageCreate(text="See you"), "alex")

    assert plan_service.delete_plan(target.id, deleted_by="me")

    assert target.id not in store.plans
    assert ("alex", target.id) not in store.rsvps
    assert ("alex", series[2].id) in store.rsvps
    assert message_service.list_messages(target.id) == []
    assert len(plan_service.get_series(series[0].series_id)) == 4


def test_delete_unknown_plan(plan_service):
    with pytest.raises(PlanNotFoundError):
        plan_service.delete_plan("missing")


def test_upcoming_occurrences(series, plan_service, store):
    upcoming = plan_service.get_upcoming_occurrences(series[0].id)
    assert [p.id for p in upcoming] == [p.id for p in series[1:]]

    # Past siblings are skipped
    store.plans[series[1].id].date = series[0].date - timedelta(days=400)
    upcoming = plan_service.get_upcoming_occurrences(series[2].id)
    assert [p.id for p in upcoming] == [series[0].id, series[3].id, series[4].id]


def test_upcoming_occurrences_of_standalone_plan(make_plan, plan_service):
    assert plan_service.get_upcoming_occurrences(make_plan().id) == []
    assert plan_service.get_upcoming_occurrences("missing") == []


def test_list_plans(make_plan, plan_service):
    later = make_plan(days_ahead=9)
    sooner = make_plan(days_ahead=2)
    make_plan(created_by="alex")
    past = make_plan(days_ahead=-3, deadline_gap=0)

    mine = plan_service.list_plans(created_by="me", include_past=False)
    assert [p.id for p in mine] == [sooner.id, later.id]
    assert past.id in [p.id for p in plan_service.list_plans(created_by="me")]


def test_recurrence_label(series, make_plan, plan_service):
    assert plan_service.get_recurrence_label(series[0]) == "Repeats weekly"
    assert plan_service.get_recurrence_label(make_plan()) == "Does not repeat"
