from .message_service import MessageService
from .notification_service import NotificationService
from .plan_service import PlanService
from .recurrence_service import RecurrenceExpander
from .rsvp_service import RSVPService
from .social_service import SocialService
from .visibility_service import VisibilityService

__all__ = [
    "MessageService",
    "NotificationService",
    "PlanService",
    "RecurrenceExpander",
    "RSVPService",
    "SocialService",
    "VisibilityService",
]
