from fastapi import APIRouter, Depends
from typing import Dict, Any
from ..dependencies.permissions import get_current_user_id
from ..services.plan_service import PlanNotFoundError, PlanService
from ..services.visibility_service import VisibilityService
from ..store import PlanStore, get_store
from ..utils.router_helpers import handle_service_errors, RouterResponse

router = APIRouter(tags=["discover"])


@router.get("/", response_model=Dict[str, Any])
@handle_service_errors
async def discover_plans(
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Every unanswered upcoming plan visible to the current user"""

    plans = VisibilityService(store).discover(current_user_id)
    return RouterResponse.success(data={"plans": plans, "count": len(plans)})


@router.get("/friends", response_model=Dict[str, Any])
@handle_service_errors
async def discover_friends_plans(
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Plans reaching the current user through friendship or a direct invite"""

    plans = VisibilityService(store).discover_friends_plans(current_user_id)
    return RouterResponse.success(data={"plans": plans, "count": len(plans)})


@router.get("/groups", response_model=Dict[str, Any])
@handle_service_errors
async def discover_group_plans(
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Plans reaching the current user through one of their groups"""

    visibility_service = VisibilityService(store)
    plans = visibility_service.discover_group_plans(current_user_id)

    by_group: Dict[str, Dict[str, Any]] = {}
    for discovered in plans:
        entry = by_group.setdefault(
            discovered.group_id,
            {"group_id": discovered.group_id, "group_name": discovered.group_name, "plans": []},
        )
        entry["plans"].append(discovered.plan)

    return RouterResponse.success(
        data={"plans": plans, "groups": list(by_group.values())}
    )


@router.get("/plans/{plan_id}", response_model=Dict[str, Any])
@handle_service_errors
async def check_plan_visibility(
    plan_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Whether a plan is discoverable by the current user, and via which group"""

    plan = PlanService(store).get_plan_by_id(plan_id)
    if not plan:
        raise PlanNotFoundError(f"Plan {plan_id} not found")

    visibility_service = VisibilityService(store)
    discoverable = visibility_service.is_discoverable(plan, current_user_id)
    group = (
        visibility_service.explaining_group(plan, current_user_id)
        if discoverable
        else None
    )
    return RouterResponse.success(
        data={
            "discoverable": discoverable,
            "group_id": group.id if group else None,
            "group_name": group.name if group else None,
        }
    )
