"""Shared fixtures: a fresh in-memory store per test with a handful of users."""

from datetime import date, timedelta

import pytest

from openinvite.schemas.plan import PlanCreate
from openinvite.schemas.user import User
from openinvite.services.message_service import MessageService
from openinvite.services.notification_service import NotificationService
from openinvite.services.plan_service import PlanService
from openinvite.services.rsvp_service import RSVPService
from openinvite.services.social_service import SocialService
from openinvite.services.visibility_service import VisibilityService
from openinvite.store import PlanStore


class RecordingPersistence:
    """Keeps the last saved copy of every collection in memory"""

    def __init__(self):
        self.saved = {}
        self.save_calls = []

    def load(self):
        return {collection: list(records) for collection, records in self.saved.items()}

    def save(self, collection, records):
        self.save_calls.append(collection)
        self.saved[collection] = records


class FailingPersistence(RecordingPersistence):
    def save(self, collection, records):
        raise RuntimeError("disk full")


TODAY = date.today()


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def persistence():
    return RecordingPersistence()


@pytest.fixture
def store(persistence):
    store = PlanStore(persistence)
    for user_id, name in [
        ("me", "You"),
        ("alex", "Alex Chen"),
        ("jordan", "Jordan Smith"),
        ("sam", "Sam Wilson"),
        ("taylor", "Taylor Kim"),
    ]:
        store.users[user_id] = User(id=user_id, name=name, username=user_id)
    return store


@pytest.fixture
def notification_service(store):
    return NotificationService(store)


@pytest.fixture
def social_service(store):
    return SocialService(store)


@pytest.fixture
def plan_service(store):
    return PlanService(store, max_occurrences=5)


@pytest.fixture
def rsvp_service(store):
    return RSVPService(store, enforce_deadline=False)


@pytest.fixture
def visibility_service(store):
    return VisibilityService(store)


@pytest.fixture
def message_service(store):
    return MessageService(store)


@pytest.fixture
def plan_data():
    """Build a PlanCreate dated relative to today"""

    def _plan_data(days_ahead=7, deadline_gap=1, **overrides):
        plan_date = TODAY + timedelta(days=days_ahead)
        fields = {
            "title": "Board Game Night",
            "date": plan_date,
            "time": "18:00",
            "location": "Capitol Hill",
            "total_spots": 6,
            "rsvp_deadline": plan_date - timedelta(days=deadline_gap),
            "notes": "Bring snacks",
            "visibility": {"type": "friends"},
        }
        fields.update(overrides)
        return PlanCreate(**fields)

    return _plan_data


@pytest.fixture
def make_plan(plan_service, plan_data):
    """Create a standalone plan owned by `created_by`"""

    def _make_plan(created_by="me", **overrides):
        return plan_service.create_plan(plan_data(**overrides), created_by=created_by)

    return _make_plan
