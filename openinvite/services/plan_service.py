import copy
import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Union
from ..config import settings
from ..schemas.plan import Plan, PlanCreate, PlanUpdate
from ..store import PlanStore
from ..utils.constants import AppConstants
from ..utils.date_helpers import DateHelpers
from .notification_service import NotificationService
from .recurrence_service import TEMPLATE_FIELDS, RecurrenceExpander, new_plan_id

logger = logging.getLogger(__name__)


class PlanServiceError(Exception):
    """Base exception for plan service errors"""

    pass


class PlanNotFoundError(PlanServiceError):
    """Plan or series not found"""

    pass


class PermissionDeniedError(PlanServiceError):
    """Permission denied for operation"""

    pass


class PlanValidationError(PlanServiceError):
    """Plan fields break a business rule"""

    pass


# Per-occurrence fields a series-wide edit must never touch
SERIES_EXCLUDED_FIELDS = {
    "date",
    "time",
    "rsvp_deadline",
    "filled_spots",
    "id",
    "created_at",
    "recurrence",
}

REQUIRED_FIELDS = ["title", "date", "time", "location", "total_spots", "rsvp_deadline"]

# Changes responders get told about
NOTIFY_FIELDS = {"date", "time", "location"}


class PlanService:
    """Single entry point for creating, editing and deleting plans"""

    def __init__(
        self,
        store: PlanStore,
        expander: RecurrenceExpander = None,
        notifications: NotificationService = None,
        max_occurrences: int = None,
    ):
        self.store = store
        self.expander = expander or RecurrenceExpander()
        self.notifications = notifications or NotificationService(store)
        self.max_occurrences = (
            settings.MAX_OCCURRENCES if max_occurrences is None else max_occurrences
        )

    def create_plan(
        self, plan_data: PlanCreate, created_by: Optional[str] = None
    ) -> Union[Plan, List[Plan]]:
        """Create a standalone plan, or every occurrence of a recurring one"""

        created_by = created_by or plan_data.created_by
        if not created_by:
            raise PlanValidationError("A plan needs a creator")

        self._validate_plan_fields(plan_data.dict())
        created_at = datetime.utcnow()

        if plan_data.recurrence is None or not plan_data.recurrence.is_recurring:
            plan = Plan(
                **plan_data.dict(exclude={"created_by"}),
                id=new_plan_id(),
                filled_spots=0,
                created_by=created_by,
                created_at=created_at,
            )

            with self.store.write(AppConstants.PLANS) as store:
                store.plans[plan.id] = plan

            logger.info(f"Plan {plan.id} created by {created_by}")
            return plan

        # A new template always starts a fresh series at index 0
        template = PlanCreate(
            **{
                **plan_data.dict(),
                "recurrence": {
                    **plan_data.recurrence.dict(),
                    "series_id": None,
                    "instance_index": 0,
                    "anchor_date": None,
                    "deadline_gap_days": None,
                },
            }
        )
        occurrences = self.expander.expand(
            template, created_by, max_count=self.max_occurrences, created_at=created_at
        )
        if not occurrences:
            raise PlanValidationError("Recurrence settings produce no occurrences")

        with self.store.write(AppConstants.PLANS) as store:
            for occurrence in occurrences:
                store.plans[occurrence.id] = occurrence

        logger.info(
            f"Series {occurrences[0].series_id} created by {created_by} "
            f"with {len(occurrences)} occurrences"
        )
        return occurrences

    def update_plan(
        self,
        plan_id: str,
        plan_updates: Union[PlanUpdate, Dict[str, Any]],
        updated_by: Optional[str] = None,
    ) -> Plan:
        """Patch one plan. Recurrence changes are stored, never re-expanded."""

        if isinstance(plan_updates, dict):
            plan_updates = PlanUpdate(**plan_updates)
        update_data = plan_updates.dict(exclude_unset=True)

        with self.store.write(AppConstants.PLANS):
            plan = self._get_plan_or_raise(plan_id)
            self._check_can_edit(plan, updated_by)
            self._validate_plan_fields({**plan.dict(), **update_data}, plan.filled_spots)

            changed = [
                field
                for field in update_data
                if field in NOTIFY_FIELDS and getattr(plan, field) != update_data[field]
            ]
            for field in update_data:
                setattr(plan, field, getattr(plan_updates, field))

        if changed:
            self.notifications.notify_plan_update(
                plan, self._responder_ids(plan.id), changed
            )
        return plan

    def update_series_plans(
        self,
        series_id: str,
        plan_updates: Union[PlanUpdate, Dict[str, Any]],
        from_instance_index: int = 0,
        updated_by: Optional[str] = None,
    ) -> List[Plan]:
        """Apply shared fields to a series from from_instance_index onwards.

        Dates, times, deadlines, capacity counters, identity and recurrence stay
        per-occurrence so the series keeps its spacing.
        """

        if isinstance(plan_updates, dict):
            plan_updates = PlanUpdate(**plan_updates)
        update_data = {
            field: value
            for field, value in plan_updates.dict(exclude_unset=True).items()
            if field not in SERIES_EXCLUDED_FIELDS
        }

        with self.store.write(AppConstants.PLANS):
            series = self.get_series(series_id)
            if not series:
                raise PlanNotFoundError(f"Series {series_id} not found")

            targets = [
                p for p in series if p.recurrence.instance_index >= from_instance_index
            ]

            # Validate every occurrence before touching any of them
            for plan in targets:
                self._check_can_edit(plan, updated_by)
                self._validate_plan_fields(
                    {**plan.dict(), **update_data}, plan.filled_spots
                )

            for plan in targets:
                for field in update_data:
                    setattr(plan, field, copy.deepcopy(getattr(plan_updates, field)))

        logger.info(
            f"Series {series_id}: updated {sorted(update_data)} on {len(targets)} occurrences"
        )
        return targets

    def delete_plan(self, plan_id: str, deleted_by: Optional[str] = None) -> bool:
        """Remove one occurrence with its RSVPs and messages; siblings stay"""

        with self.store.write(
            AppConstants.PLANS, AppConstants.RSVPS, AppConstants.PLAN_MESSAGES
        ) as store:
            plan = self._get_plan_or_raise(plan_id)
            self._check_can_edit(plan, deleted_by)

            del store.plans[plan_id]
            for key in [k for k in store.rsvps if k[1] == plan_id]:
                del store.rsvps[key]
            for message_id in [
                m.id for m in store.plan_messages.values() if m.plan_id == plan_id
            ]:
                del store.plan_messages[message_id]

        logger.info(f"Plan {plan_id} deleted")
        return True

    def get_plan_by_id(self, plan_id: str) -> Optional[Plan]:
        with self.store.read() as store:
            return store.plans.get(plan_id)

    def list_plans(
        self, created_by: Optional[str] = None, include_past: bool = True
    ) -> List[Plan]:
        today = DateHelpers.today()
        with self.store.read() as store:
            plans = [
                p
                for p in store.plans.values()
                if (created_by is None or p.created_by == created_by)
                and (include_past or not DateHelpers.is_past(p.date, today))
            ]
        return sorted(plans, key=lambda p: (p.date, p.time))

    def get_series(self, series_id: str) -> List[Plan]:
        with self.store.read() as store:
            series = [p for p in store.plans.values() if p.series_id == series_id]
        return sorted(series, key=lambda p: p.recurrence.instance_index)

    def get_upcoming_occurrences(
        self, plan_id: str, today: Optional[date] = None
    ) -> List[Plan]:
        """Future siblings of a plan in its series, soonest first"""

        today = today or DateHelpers.today()
        plan = self.get_plan_by_id(plan_id)
        if not plan or not plan.is_recurring or not plan.series_id:
            return []

        siblings = [
            p
            for p in self.get_series(plan.series_id)
            if p.id != plan.id and not DateHelpers.is_past(p.date, today)
        ]
        siblings.sort(key=lambda p: p.date)
        return siblings[: AppConstants.MAX_UPCOMING_OCCURRENCES]

    def get_recurrence_label(self, plan: Plan) -> str:
        return self.expander.get_recurrence_label(plan.recurrence)

    def extend_series(self, series_id: str, horizon: date) -> List[Plan]:
        """Materialize occurrences up to horizon beyond the last existing one.

        Dates are recomputed from the anchor recorded on the series, so edits
        to single occurrences never shift the spacing. Shared fields come from
        the latest member so series-wide edits carry forward. Deleted or edited
        occurrences are never recreated.
        """

        with self.store.write(AppConstants.PLANS) as store:
            series = self.get_series(series_id)
            if not series:
                raise PlanNotFoundError(f"Series {series_id} not found")

            first, latest = series[0], series[-1]
            created = self.expander.expand_until(
                first,
                first.created_by,
                horizon,
                created_at=datetime.utcnow(),
                series_id=series_id,
                after_index=latest.recurrence.instance_index,
            )

            new_plans = [
                Plan(**{**plan.dict(), **latest.dict(include=TEMPLATE_FIELDS)})
                for plan in created
            ]
            for plan in new_plans:
                store.plans[plan.id] = plan

        if new_plans:
            logger.info(f"Series {series_id}: added {len(new_plans)} occurrences")
        return new_plans

    def extend_open_series(
        self, horizon_days: Optional[int] = None, today: Optional[date] = None
    ) -> int:
        """Top up every series to the configured horizon"""

        horizon_days = horizon_days or settings.RECURRENCE_HORIZON_DAYS
        horizon = (today or DateHelpers.today()) + timedelta(days=horizon_days)

        with self.store.read() as store:
            series_ids = {
                p.series_id
                for p in store.plans.values()
                if p.is_recurring and p.series_id
            }

        return sum(
            len(self.extend_series(series_id, horizon))
            for series_id in sorted(series_ids)
        )

    # === HELPER METHODS ===
    def _get_plan_or_raise(self, plan_id: str) -> Plan:
        plan = self.store.plans.get(plan_id)
        if not plan:
            raise PlanNotFoundError(f"Plan {plan_id} not found")
        return plan

    def _check_can_edit(self, plan: Plan, user_id: Optional[str]) -> None:
        if user_id is not None and plan.created_by != user_id:
            raise PermissionDeniedError("Only the plan creator can change it")

    def _responder_ids(self, plan_id: str) -> List[str]:
        with self.store.read() as store:
            return sorted(u for (u, p) in store.rsvps if p == plan_id)

    @staticmethod
    def _validate_plan_fields(fields: Dict[str, Any], filled_spots: int = 0) -> None:
        """Raise PlanValidationError unless the merged fields form a valid plan"""

        for field in REQUIRED_FIELDS:
            if fields.get(field) is None:
                raise PlanValidationError(f"{field} is required")

        if not fields["title"].strip():
            raise PlanValidationError("Title is required")
        if not fields["location"].strip():
            raise PlanValidationError("Location is required")
        if fields["total_spots"] < 1:
            raise PlanValidationError("A plan needs at least one spot")
        if fields["total_spots"] < filled_spots:
            raise PlanValidationError(
                f"Cannot reduce spots below the {filled_spots} already taken"
            )
        if fields["rsvp_deadline"] > fields["date"]:
            raise PlanValidationError("RSVP deadline cannot be after the plan date")
