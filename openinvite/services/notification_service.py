import logging
import uuid
from datetime import date, datetime
from typing import List, Optional
from ..models.enums import NotificationType, RSVPStatus
from ..schemas.notification import AppNotification
from ..schemas.plan import Plan
from ..store import PlanStore
from ..utils.constants import AppConstants
from ..utils.date_helpers import DateHelpers

logger = logging.getLogger(__name__)


class NotificationServiceError(Exception):
    """Base exception for notification service errors"""

    pass


class NotificationNotFoundError(NotificationServiceError):
    """Notification not found"""

    pass


RSVP_PHRASES = {
    RSVPStatus.GOING: "is going to",
    RSVPStatus.MAYBE: "is maybe going to",
    RSVPStatus.INTERESTED: "is interested in",
}


class NotificationService:
    def __init__(self, store: PlanStore):
        self.store = store

    def list_notifications(
        self, user_id: str, unread_only: bool = False
    ) -> List[AppNotification]:
        """Notifications for a user, newest first"""
        with self.store.read() as store:
            notifications = [
                n
                for n in store.notifications.values()
                if n.user_id == user_id and (not unread_only or not n.read)
            ]
        return sorted(notifications, key=lambda n: n.created_at, reverse=True)

    def unread_count(self, user_id: str) -> int:
        return len(self.list_notifications(user_id, unread_only=True))

    def mark_as_read(self, notification_id: str, user_id: str) -> AppNotification:
        with self.store.write(AppConstants.NOTIFICATIONS):
            notification = self._get_notification_or_raise(notification_id, user_id)
            notification.read = True
            return notification

    def mark_all_as_read(self, user_id: str) -> int:
        with self.store.write(AppConstants.NOTIFICATIONS) as store:
            unread = [
                n
                for n in store.notifications.values()
                if n.user_id == user_id and not n.read
            ]
            for notification in unread:
                notification.read = True
            return len(unread)

    def delete_notification(self, notification_id: str, user_id: str) -> bool:
        with self.store.write(AppConstants.NOTIFICATIONS) as store:
            self._get_notification_or_raise(notification_id, user_id)
            del store.notifications[notification_id]
            return True

    def notify(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        **context,
    ) -> AppNotification:
        """Record a notification for a user"""
        notification = self._build(
            user_id, notification_type, title, message, **context
        )

        with self.store.write(AppConstants.NOTIFICATIONS) as store:
            store.notifications[notification.id] = notification

        return notification

    @staticmethod
    def _build(
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        **context,
    ) -> AppNotification:
        return AppNotification(
            id=uuid.uuid4().hex,
            user_id=user_id,
            type=notification_type,
            title=title,
            message=message,
            created_at=datetime.utcnow(),
            **context,
        )

    def notify_rsvp(
        self, plan: Plan, user_id: str, status: RSVPStatus
    ) -> Optional[AppNotification]:
        """Tell a plan's creator that someone responded"""
        if user_id == plan.created_by:
            return None

        return self.notify(
            plan.created_by,
            NotificationType.RSVP,
            "New RSVP",
            f"{self._user_name(user_id)} {RSVP_PHRASES[status]} {plan.title}",
            plan_id=plan.id,
            plan_title=plan.title,
            actor_id=user_id,
            rsvp_status=status,
        )

    def notify_plan_update(
        self, plan: Plan, recipient_ids: List[str], changed_fields: List[str]
    ) -> int:
        """Tell responders that details they may rely on have changed"""
        changes = ", ".join(sorted(changed_fields))
        for recipient_id in recipient_ids:
            if recipient_id == plan.created_by:
                continue
            self.notify(
                recipient_id,
                NotificationType.PLAN_UPDATE,
                "Plan Updated",
                f"{plan.title} changed: {changes}",
                plan_id=plan.id,
                plan_title=plan.title,
                actor_id=plan.created_by,
            )
        return len([r for r in recipient_ids if r != plan.created_by])

    def create_plan_reminders(self, today: Optional[date] = None) -> int:
        """Remind the creator and everyone going about plans coming up soon"""

        today = today or DateHelpers.today()
        created = 0

        with self.store.write(AppConstants.NOTIFICATIONS) as store:
            reminded = {
                (n.user_id, n.plan_id)
                for n in store.notifications.values()
                if n.type == NotificationType.PLAN_REMINDER
            }

            for plan in store.plans.values():
                if not DateHelpers.is_within(
                    plan.date, AppConstants.PLAN_REMINDER_DAYS, today
                ):
                    continue

                recipients = {plan.created_by} | {
                    user_id
                    for (user_id, plan_id), rsvp in store.rsvps.items()
                    if plan_id == plan.id and rsvp.status == RSVPStatus.GOING
                }

                for user_id in sorted(recipients):
                    if (user_id, plan.id) in reminded:
                        continue
                    reminder = self._build(
                        user_id,
                        NotificationType.PLAN_REMINDER,
                        "Upcoming Plan",
                        f"{plan.title} is coming up "
                        f"{self._describe_days(DateHelpers.days_until(plan.date, today))}!",
                        plan_id=plan.id,
                        plan_title=plan.title,
                    )
                    store.notifications[reminder.id] = reminder
                    created += 1

        if created:
            logger.info(f"Created {created} plan reminders")
        return created

    # === HELPER METHODS ===
    def _get_notification_or_raise(
        self, notification_id: str, user_id: str
    ) -> AppNotification:
        notification = self.store.notifications.get(notification_id)
        if not notification or notification.user_id != user_id:
            raise NotificationNotFoundError(
                f"Notification {notification_id} not found"
            )
        return notification

    def _user_name(self, user_id: str) -> str:
        user = self.store.users.get(user_id)
        return user.name if user else "Someone"

    @staticmethod
    def _describe_days(days: int) -> str:
        if days == 0:
            return "today"
        elif days == 1:
            return "tomorrow"
        return f"in {days} days"
