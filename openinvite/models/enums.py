from enum import Enum


class VisibilityType(str, Enum):
    EVERYONE = "everyone"
    FRIENDS = "friends"
    GROUPS = "groups"
    PEOPLE = "people"


class RecurrenceType(str, Enum):
    NONE = "none"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class RecurrenceEndType(str, Enum):
    NEVER = "never"
    AFTER = "after"
    ON_DATE = "on_date"


class RSVPStatus(str, Enum):
    GOING = "going"
    MAYBE = "maybe"
    INTERESTED = "interested"


class GroupType(str, Enum):
    PERSONAL = "personal"
    SHARED = "shared"


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class NotificationType(str, Enum):
    RSVP = "rsvp"
    GROUP_INVITE = "group_invite"
    FRIEND_REQUEST = "friend_request"
    PLAN_REMINDER = "plan_reminder"
    PLAN_UPDATE = "plan_update"
