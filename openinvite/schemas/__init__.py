from .plan import (
    DiscoveredPlan,
    Plan,
    PlanCreate,
    PlanRecurrence,
    PlanUpdate,
    PlanVisibility,
    RecurrenceEnd,
)
from .rsvp import RSVP, RSVPResult, RSVPSet, RSVPSummary
from .user import FriendRequest, FriendRequestCreate, Friendship, User
from .group import Group, GroupCreate, GroupInvite, GroupInviteCreate, GroupUpdate
from .notification import AppNotification
from .message import PlanMessage, PlanMessageCreate

__all__ = [
    "DiscoveredPlan",
    "Plan",
    "PlanCreate",
    "PlanRecurrence",
    "PlanUpdate",
    "PlanVisibility",
    "RecurrenceEnd",
    "RSVP",
    "RSVPResult",
    "RSVPSet",
    "RSVPSummary",
    "FriendRequest",
    "FriendRequestCreate",
    "Friendship",
    "User",
    "Group",
    "GroupCreate",
    "GroupInvite",
    "GroupInviteCreate",
    "GroupUpdate",
    "AppNotification",
    "PlanMessage",
    "PlanMessageCreate",
]
