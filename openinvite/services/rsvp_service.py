import logging
from typing import Dict, Optional
from ..config import settings
from ..models.enums import RSVPStatus
from ..schemas.rsvp import RSVP, RSVPResult, RSVPSummary
from ..store import PlanStore
from ..utils.constants import AppConstants
from ..utils.date_helpers import DateHelpers
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

PLAN_NOT_FOUND = "Plan not found"
PLAN_FULL = "This plan is full"
DEADLINE_PASSED = "RSVP deadline has passed"


class RSVPService:
    """Ledger of per-user responses, kept in step with each plan's filled_spots.

    The capacity check, the ledger write and the filled_spots adjustment run
    under one store lock, so two racing "going" responses for the last open
    spot cannot both succeed.
    """

    def __init__(
        self,
        store: PlanStore,
        notifications: NotificationService = None,
        enforce_deadline: bool = None,
    ):
        self.store = store
        self.notifications = notifications or NotificationService(store)
        self.enforce_deadline = (
            settings.ENFORCE_RSVP_DEADLINE if enforce_deadline is None else enforce_deadline
        )

    def set_rsvp(
        self, user_id: str, plan_id: str, status: Optional[RSVPStatus]
    ) -> RSVPResult:
        """Record, change or (with None) withdraw a user's response.

        Setting the status the user already holds is a no-op.
        """
        status = RSVPStatus(status) if status is not None else None

        with self.store.read() as store:
            plan = store.plans.get(plan_id)
            if not plan:
                return RSVPResult(success=False, error=PLAN_NOT_FOUND)

            key = (user_id, plan_id)
            current = store.rsvps.get(key)
            previous_status = current.status if current else None

            if previous_status == status:
                return RSVPResult(
                    success=True, status=status, filled_spots=plan.filled_spots
                )

            if (
                self.enforce_deadline
                and status is not None
                and DateHelpers.is_deadline_passed(plan.rsvp_deadline)
            ):
                return RSVPResult(
                    success=False,
                    error=DEADLINE_PASSED,
                    status=previous_status,
                    filled_spots=plan.filled_spots,
                )

            was_going = previous_status == RSVPStatus.GOING
            now_going = status == RSVPStatus.GOING

            if now_going and not was_going and plan.filled_spots >= plan.total_spots:
                logger.info(f"RSVP rejected: plan {plan_id} is at capacity")
                return RSVPResult(
                    success=False,
                    error=PLAN_FULL,
                    status=previous_status,
                    filled_spots=plan.filled_spots,
                )

            with self.store.write(AppConstants.RSVPS, AppConstants.PLANS):
                if status is None:
                    del store.rsvps[key]
                else:
                    store.rsvps[key] = RSVP(
                        user_id=user_id, plan_id=plan_id, status=status
                    )

                if now_going != was_going:
                    delta = 1 if now_going else -1
                    plan.filled_spots = min(
                        max(plan.filled_spots + delta, 0), plan.total_spots
                    )

            filled_spots = plan.filled_spots

        if status is not None:
            self.notifications.notify_rsvp(plan, user_id, status)

        return RSVPResult(success=True, status=status, filled_spots=filled_spots)

    def toggle_rsvp(
        self, user_id: str, plan_id: str, status: Optional[RSVPStatus]
    ) -> RSVPResult:
        """Picking the status the user already holds withdraws the response"""
        status = RSVPStatus(status) if status is not None else None
        with self.store.read():
            if status is not None and self.get_my_rsvp(user_id, plan_id) == status:
                status = None
            return self.set_rsvp(user_id, plan_id, status)

    def get_my_rsvp(self, user_id: str, plan_id: str) -> Optional[RSVPStatus]:
        with self.store.read() as store:
            rsvp = store.rsvps.get((user_id, plan_id))
            return rsvp.status if rsvp else None

    def rsvps_for_plan(self, plan_id: str) -> RSVPSummary:
        """Responding users grouped by status"""
        summary = RSVPSummary()
        with self.store.read() as store:
            for (user_id, rsvp_plan_id), rsvp in store.rsvps.items():
                if rsvp_plan_id == plan_id:
                    getattr(summary, rsvp.status.value).add(user_id)
        return summary

    def get_user_rsvps(self, user_id: str) -> Dict[str, RSVPStatus]:
        """Plan id -> status for everything a user has answered"""
        with self.store.read() as store:
            return {
                plan_id: rsvp.status
                for (rsvp_user_id, plan_id), rsvp in store.rsvps.items()
                if rsvp_user_id == user_id
            }

