"""
Demo fixtures for a fresh install: a small friend circle around the user "me",
their groups, a weekly volleyball series and a handful of one-off plans.

Plan dates are offsets from today so the feed always has upcoming entries.
Everything except the groups goes through the services, so filled_spots and
notifications come out consistent with the RSVPs.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional
from faker import Faker
from .models.enums import GroupType, RecurrenceEndType, RecurrenceType, VisibilityType
from .schemas.group import Group, GroupInvite
from .schemas.message import PlanMessageCreate
from .schemas.plan import PlanCreate
from .schemas.user import User
from .services.message_service import MessageService
from .services.plan_service import PlanService
from .services.rsvp_service import RSVPService
from .services.social_service import SocialService
from .store import PlanStore
from .utils.constants import AppConstants

logger = logging.getLogger(__name__)

fake = Faker()

USERS = [
    ("me", "You", "#6366F1", "yourname"),
    ("1", "Alex Chen", "#EC4899", "alexc"),
    ("2", "Jordan Smith", "#14B8A6", "jordans"),
    ("3", "Sam Wilson", "#F59E0B", "samw"),
    ("4", "Taylor Kim", "#8B5CF6", "taylork"),
    ("5", "Morgan Lee", "#EF4444", "morganl"),
]

FRIENDSHIPS = [
    ("me", "1"),
    ("me", "2"),
    ("me", "3"),
    ("me", "4"),
    ("me", "5"),
    ("1", "2"),
    ("1", "4"),
    ("2", "3"),
    ("4", "5"),
]

# (id, name, type, created_by, member_ids, description)
GROUPS = [
    ("sg1", "Friday Night Crew", GroupType.SHARED, "me", ["me", "1", "2", "3"],
     "Weekend hangouts around LoDo and RiNo"),
    ("sg2", "Hiking Club", GroupType.SHARED, "1", ["me", "1", "4", "5"],
     "Weekly hikes in the Front Range"),
    ("sg3", "Book Club", GroupType.SHARED, "2", ["me", "2", "4"],
     "Monthly book discussions in the Highlands"),
    ("sg4", "Pickup Basketball", GroupType.SHARED, "1", ["1", "3", "5"],
     "Sunday pickup games at City Park"),
    ("g1", "Close Friends", GroupType.PERSONAL, "me", ["1", "2", "3"], None),
    ("g2", "Workout Buddies", GroupType.PERSONAL, "me", ["1", "4"], None),
    ("g3", "Drinking Crew", GroupType.PERSONAL, "me", ["2", "3", "5"], None),
    ("g4", "Quiet Hangs", GroupType.PERSONAL, "me", ["1", "4", "5"], None),
]

# (created_by, title, days_ahead, time, location, total_spots, visibility, notes)
PLANS = [
    ("me", "Dinner at Guard and Grace", 3, "19:00",
     "Guard and Grace, 1801 California St, Denver", 6,
     {"type": VisibilityType.GROUPS, "group_ids": ["g1"]}, "Reservation under my name"),
    ("me", "Avalanche Game", 5, "19:00",
     "Ball Arena, 1000 Chopper Cir, Denver", 8,
     {"type": VisibilityType.EVERYONE}, None),
    ("me", "Board Game Night", 10, "18:00",
     "My place - Capitol Hill", 6,
     {"type": VisibilityType.GROUPS, "group_ids": ["g4"]}, "Bring snacks!"),
    ("1", "Rooftop Drinks at 54thirty", 4, "17:30",
     "54thirty Rooftop, 1475 California St, Denver", 8,
     {"type": VisibilityType.FRIENDS}, None),
    ("2", "Brunch at Snooze", 6, "10:00",
     "Snooze A.M. Eatery, 2262 Larimer St, Denver", 6,
     {"type": VisibilityType.GROUPS, "group_ids": ["sg3"]}, None),
    ("4", "Axe Throwing", 11, "20:00",
     "Bad Axe Throwing, 3411 E 52nd Ave, Denver", 4,
     {"type": VisibilityType.PEOPLE, "user_ids": ["me", "5"]}, None),
]

# (user_id, plan title, status)
RSVPS = [
    ("1", "Dinner at Guard and Grace", "going"),
    ("2", "Dinner at Guard and Grace", "going"),
    ("3", "Dinner at Guard and Grace", "maybe"),
    ("1", "Board Game Night", "going"),
    ("4", "Board Game Night", "going"),
    ("5", "Board Game Night", "interested"),
    ("2", "Rooftop Drinks at 54thirty", "going"),
]


def seed_if_empty(store: PlanStore, today: Optional[date] = None) -> bool:
    """Load the demo fixtures unless the store already holds data"""

    if not store.is_empty():
        logger.info("Store already has data, skipping seed")
        return False

    today = today or date.today()
    Faker.seed(42)

    social_service = SocialService(store)
    plan_service = PlanService(store)
    rsvp_service = RSVPService(store, enforce_deadline=False)

    for user_id, name, color, username in USERS:
        social_service.upsert_user(
            User(
                id=user_id,
                name=name,
                avatar_color=color,
                username=username,
                email=fake.email(),
                phone=fake.numerify("303-###-####"),
                bio=fake.sentence(nb_words=6),
            )
        )

    for user_id, friend_id in FRIENDSHIPS:
        social_service.add_friendship(user_id, friend_id)

    created_at = datetime.utcnow()
    with store.write(AppConstants.GROUPS, AppConstants.GROUP_INVITES):
        for group_id, name, group_type, owner, member_ids, description in GROUPS:
            store.groups[group_id] = Group(
                id=group_id,
                name=name,
                type=group_type,
                created_by=owner,
                member_ids=member_ids,
                description=description,
                created_at=created_at,
            )
        store.group_invites["inv1"] = GroupInvite(
            id="inv1",
            group_id="sg4",
            group_name="Pickup Basketball",
            invited_user_id="me",
            invited_by_user_id="1",
            created_at=created_at,
        )

    # Weekly volleyball, next Tuesday onwards
    first_tuesday = today + timedelta(days=(1 - today.weekday()) % 7 or 7)
    volleyball = plan_service.create_plan(
        PlanCreate(
            title="Weekly Volleyball",
            date=first_tuesday,
            time="18:30",
            location="City Park Recreation Center, 2001 Colorado Blvd, Denver",
            total_spots=12,
            rsvp_deadline=first_tuesday - timedelta(days=1),
            notes="Casual pickup volleyball. All skill levels welcome!",
            visibility={"type": VisibilityType.FRIENDS},
            recurrence={
                "type": RecurrenceType.WEEKLY,
                "end": {"type": RecurrenceEndType.NEVER},
            },
        ),
        created_by="me",
    )

    plans_by_title = {}
    for owner, title, days_ahead, time, location, spots, visibility, notes in PLANS:
        plan_date = today + timedelta(days=days_ahead)
        plans_by_title[title] = plan_service.create_plan(
            PlanCreate(
                title=title,
                date=plan_date,
                time=time,
                location=location,
                total_spots=spots,
                rsvp_deadline=plan_date - timedelta(days=1),
                notes=notes,
                visibility=visibility,
            ),
            created_by=owner,
        )

    for user_id, title, status in RSVPS:
        rsvp_service.set_rsvp(user_id, plans_by_title[title].id, status)
    for user_id in ("1", "2", "3"):
        rsvp_service.set_rsvp(user_id, volleyball[0].id, "going")

    MessageService(store).post_message(
        plans_by_title["Dinner at Guard and Grace"].id,
        PlanMessageCreate(text="Can't wait! Should we grab drinks after?"),
        user_id="1",
    )

    logger.info(
        f"Seeded {len(USERS)} users, {len(GROUPS)} groups and {len(store.plans)} plans"
    )
    return True
