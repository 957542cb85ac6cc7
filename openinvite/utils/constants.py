class ResponseMessages:
    """Standard API response messages"""

    SUCCESS = "Success"
    CREATED = "Created successfully"
    UPDATED = "Updated successfully"
    DELETED = "Deleted successfully"


# Application Constants
class AppConstants:
    # Recurrence
    DEFAULT_MAX_OCCURRENCES = 5
    DEFAULT_CUSTOM_INTERVAL_DAYS = 7
    MAX_UPCOMING_OCCURRENCES = 5
    MAX_OCCURRENCES_PER_EXTENSION = 100

    # Deadlines
    DEADLINE_SOON_DAYS = 2
    PLAN_REMINDER_DAYS = 2

    # Validation Limits
    MAX_TITLE_LENGTH = 100
    MAX_LOCATION_LENGTH = 200
    MAX_NOTES_LENGTH = 1000
    MAX_MESSAGE_LENGTH = 1000
    MAX_TOTAL_SPOTS = 1000
    MAX_CUSTOM_INTERVAL_DAYS = 365

    # Collections persisted by the store
    PLANS = "plans"
    RSVPS = "rsvps"
    USERS = "users"
    FRIENDSHIPS = "friendships"
    FRIEND_REQUESTS = "friend_requests"
    GROUPS = "groups"
    GROUP_INVITES = "group_invites"
    NOTIFICATIONS = "notifications"
    PLAN_MESSAGES = "plan_messages"
