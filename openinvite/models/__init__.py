from .plan import PlanRecord
from .rsvp import RSVPRecord
from .user import UserRecord, FriendshipRecord, FriendRequestRecord
from .group import GroupRecord, GroupInviteRecord
from .notification import NotificationRecord
from .plan_message import PlanMessageRecord


__all__ = [
    "PlanRecord",
    "RSVPRecord",
    "UserRecord",
    "FriendshipRecord",
    "FriendRequestRecord",
    "GroupRecord",
    "GroupInviteRecord",
    "NotificationRecord",
    "PlanMessageRecord",
]
