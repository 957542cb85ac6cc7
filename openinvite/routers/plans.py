from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Dict, Any
from ..dependencies.permissions import get_current_user_id
from ..schemas.message import PlanMessageCreate
from ..schemas.plan import Plan, PlanCreate, PlanUpdate
from ..schemas.rsvp import RSVPSet
from ..services.message_service import MessageService
from ..services.plan_service import PlanNotFoundError, PlanService
from ..services.rsvp_service import PLAN_FULL, PLAN_NOT_FOUND, RSVPService
from ..store import PlanStore, get_store
from ..utils.date_helpers import DateHelpers
from ..utils.router_helpers import handle_service_errors, RouterResponse

router = APIRouter(tags=["plans"])


def _plan_details(
    plan: Plan, user_id: str, plan_service: PlanService, rsvp_service: RSVPService
) -> Dict[str, Any]:
    return {
        "plan": plan,
        "my_rsvp": rsvp_service.get_my_rsvp(user_id, plan.id),
        "rsvps": rsvp_service.rsvps_for_plan(plan.id),
        "recurrence_label": plan_service.get_recurrence_label(plan),
        "upcoming_occurrences": plan_service.get_upcoming_occurrences(plan.id),
        "date_label": DateHelpers.format_date_time(plan.date, plan.time),
        "deadline_soon": DateHelpers.is_deadline_soon(plan.rsvp_deadline),
        "deadline_passed": DateHelpers.is_deadline_passed(plan.rsvp_deadline),
        "can_edit": plan.created_by == user_id,
    }


@router.post("/", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
@handle_service_errors
async def create_plan(
    plan_data: PlanCreate,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Create a plan; recurring plans come back as their first occurrences"""

    result = PlanService(store).create_plan(plan_data, created_by=current_user_id)
    plans = result if isinstance(result, list) else [result]

    return RouterResponse.created(
        data={"plans": plans, "series_id": plans[0].series_id},
        message="Plan created successfully",
    )


@router.get("/", response_model=Dict[str, Any])
@handle_service_errors
async def get_my_plans(
    include_past: bool = Query(False, description="Include plans already over"),
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Plans created by the current user"""

    plans = PlanService(store).list_plans(
        created_by=current_user_id, include_past=include_past
    )
    return RouterResponse.success(data={"plans": plans})


@router.get("/responded", response_model=Dict[str, Any])
@handle_service_errors
async def get_responded_plans(
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Upcoming plans the current user has answered, with their status"""

    plan_service = PlanService(store)
    answered = RSVPService(store).get_user_rsvps(current_user_id)

    plans = []
    for plan in plan_service.list_plans(include_past=False):
        if plan.id in answered:
            plans.append({"plan": plan, "status": answered[plan.id]})

    return RouterResponse.success(data={"plans": plans})


@router.patch("/series/{series_id}", response_model=Dict[str, Any])
@handle_service_errors
async def update_series(
    series_id: str,
    plan_updates: PlanUpdate,
    from_instance_index: int = Query(0, ge=0),
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Apply shared fields to every occurrence from an index onwards"""

    plans = PlanService(store).update_series_plans(
        series_id,
        plan_updates,
        from_instance_index=from_instance_index,
        updated_by=current_user_id,
    )
    return RouterResponse.updated(
        data={"plans": plans}, message="Series updated successfully"
    )


@router.get("/{plan_id}", response_model=Dict[str, Any])
@handle_service_errors
async def get_plan(
    plan_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Plan details with the current user's RSVP and the responder lists"""

    plan_service = PlanService(store)
    plan = plan_service.get_plan_by_id(plan_id)
    if not plan:
        raise PlanNotFoundError(f"Plan {plan_id} not found")

    return RouterResponse.success(
        data=_plan_details(plan, current_user_id, plan_service, RSVPService(store))
    )


@router.patch("/{plan_id}", response_model=Dict[str, Any])
@handle_service_errors
async def update_plan(
    plan_id: str,
    plan_updates: PlanUpdate,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Edit a single plan"""

    plan = PlanService(store).update_plan(
        plan_id, plan_updates, updated_by=current_user_id
    )
    return RouterResponse.updated(
        data={"plan": plan}, message="Plan updated successfully"
    )


@router.delete("/{plan_id}", response_model=Dict[str, Any])
@handle_service_errors
async def delete_plan(
    plan_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Delete one plan; other occurrences of its series stay"""

    PlanService(store).delete_plan(plan_id, deleted_by=current_user_id)
    return RouterResponse.deleted(message="Plan deleted successfully")


@router.get("/{plan_id}/occurrences", response_model=Dict[str, Any])
@handle_service_errors
async def get_upcoming_occurrences(
    plan_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    plan_service = PlanService(store)
    if not plan_service.get_plan_by_id(plan_id):
        raise PlanNotFoundError(f"Plan {plan_id} not found")

    return RouterResponse.success(
        data={"occurrences": plan_service.get_upcoming_occurrences(plan_id)}
    )


@router.get("/{plan_id}/recurrence-label", response_model=Dict[str, Any])
@handle_service_errors
async def get_recurrence_label(
    plan_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    plan_service = PlanService(store)
    plan = plan_service.get_plan_by_id(plan_id)
    if not plan:
        raise PlanNotFoundError(f"Plan {plan_id} not found")

    return RouterResponse.success(
        data={"label": plan_service.get_recurrence_label(plan)}
    )


# === RSVPS ===
@router.put("/{plan_id}/rsvp", response_model=Dict[str, Any])
@handle_service_errors
async def set_rsvp(
    plan_id: str,
    rsvp_data: RSVPSet,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Set, change or withdraw (status null) the current user's RSVP"""

    rsvp_service = RSVPService(store)
    if rsvp_data.toggle:
        result = rsvp_service.toggle_rsvp(current_user_id, plan_id, rsvp_data.status)
    else:
        result = rsvp_service.set_rsvp(current_user_id, plan_id, rsvp_data.status)

    if not result.success:
        if result.error == PLAN_NOT_FOUND:
            code = status.HTTP_404_NOT_FOUND
        elif result.error == PLAN_FULL:
            code = status.HTTP_409_CONFLICT
        else:
            code = status.HTTP_400_BAD_REQUEST
        raise HTTPException(status_code=code, detail=result.error)

    return RouterResponse.updated(data={"rsvp": result}, message="RSVP saved")


@router.get("/{plan_id}/rsvp/me", response_model=Dict[str, Any])
@handle_service_errors
async def get_my_rsvp(
    plan_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    status_value = RSVPService(store).get_my_rsvp(current_user_id, plan_id)
    return RouterResponse.success(data={"status": status_value})


@router.get("/{plan_id}/rsvps", response_model=Dict[str, Any])
@handle_service_errors
async def get_plan_rsvps(
    plan_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Responding users grouped by status"""

    if not PlanService(store).get_plan_by_id(plan_id):
        raise PlanNotFoundError(f"Plan {plan_id} not found")

    return RouterResponse.success(data={"rsvps": RSVPService(store).rsvps_for_plan(plan_id)})


# === MESSAGES ===
@router.get("/{plan_id}/messages", response_model=Dict[str, Any])
@handle_service_errors
async def get_messages(
    plan_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    if not PlanService(store).get_plan_by_id(plan_id):
        raise PlanNotFoundError(f"Plan {plan_id} not found")

    return RouterResponse.success(
        data={"messages": MessageService(store).list_messages(plan_id)}
    )


@router.post(
    "/{plan_id}/messages",
    response_model=Dict[str, Any],
    status_code=status.HTTP_201_CREATED,
)
@handle_service_errors
async def post_message(
    plan_id: str,
    message_data: PlanMessageCreate,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    message = MessageService(store).post_message(
        plan_id, message_data, user_id=current_user_id
    )
    return RouterResponse.created(data={"message": message}, message="Message posted")
