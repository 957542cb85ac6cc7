from fastapi import APIRouter, Depends, Query, status
from typing import Dict, Any
from ..dependencies.permissions import get_current_user_id
from ..models.enums import GroupType
from ..schemas.group import GroupCreate, GroupInviteCreate, GroupUpdate
from ..schemas.user import FriendRequestCreate
from ..services.social_service import GroupNotFoundError, SocialService
from ..store import PlanStore, get_store
from ..utils.router_helpers import handle_service_errors, RouterResponse

router = APIRouter(tags=["social"])


# === USERS ===
@router.get("/users/search", response_model=Dict[str, Any])
@handle_service_errors
async def search_users(
    q: str = Query(..., min_length=1, description="Name or username fragment"),
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    users = SocialService(store).search_users(q, exclude_user_id=current_user_id)
    return RouterResponse.success(data={"users": users})


# === FRIENDS ===
@router.get("/friends", response_model=Dict[str, Any])
@handle_service_errors
async def get_friends(
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    friends = SocialService(store).get_friends(current_user_id)
    return RouterResponse.success(data={"friends": friends})


@router.delete("/friends/{friend_id}", response_model=Dict[str, Any])
@handle_service_errors
async def remove_friend(
    friend_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    removed = SocialService(store).remove_friend(current_user_id, friend_id)
    return RouterResponse.success(
        data={"removed": removed}, message="Friend removed" if removed else "Not friends"
    )


@router.get("/friend-requests", response_model=Dict[str, Any])
@handle_service_errors
async def get_friend_requests(
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Pending friend requests sent to the current user"""

    requests = SocialService(store).get_pending_friend_requests(current_user_id)
    return RouterResponse.success(data={"requests": requests})


@router.post(
    "/friend-requests",
    response_model=Dict[str, Any],
    status_code=status.HTTP_201_CREATED,
)
@handle_service_errors
async def send_friend_request(
    request_data: FriendRequestCreate,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    request = SocialService(store).send_friend_request(
        current_user_id, request_data.to_user_id
    )
    return RouterResponse.created(
        data={"request": request}, message="Friend request sent"
    )


@router.put("/friend-requests/{request_id}/accept", response_model=Dict[str, Any])
@handle_service_errors
async def accept_friend_request(
    request_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    request = SocialService(store).respond_to_friend_request(
        request_id, current_user_id, accept=True
    )
    return RouterResponse.updated(
        data={"request": request}, message="Friend request accepted"
    )


@router.put("/friend-requests/{request_id}/decline", response_model=Dict[str, Any])
@handle_service_errors
async def decline_friend_request(
    request_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    request = SocialService(store).respond_to_friend_request(
        request_id, current_user_id, accept=False
    )
    return RouterResponse.updated(
        data={"request": request}, message="Friend request declined"
    )


# === GROUPS ===
@router.get("/groups", response_model=Dict[str, Any])
@handle_service_errors
async def get_my_groups(
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Personal lists the user owns and shared groups the user belongs to"""

    social_service = SocialService(store)
    return RouterResponse.success(
        data={
            "personal": social_service.get_personal_groups(current_user_id),
            "shared": social_service.groups_containing_user(
                current_user_id, GroupType.SHARED
            ),
        }
    )


@router.post("/groups", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
@handle_service_errors
async def create_group(
    group_data: GroupCreate,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    group = SocialService(store).create_group(group_data, created_by=current_user_id)
    return RouterResponse.created(data={"group": group}, message="Group created")


@router.get("/groups/{group_id}", response_model=Dict[str, Any])
@handle_service_errors
async def get_group(
    group_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    group = SocialService(store).get_group(group_id)
    if not group:
        raise GroupNotFoundError(f"Group {group_id} not found")
    return RouterResponse.success(data={"group": group})


@router.patch("/groups/{group_id}", response_model=Dict[str, Any])
@handle_service_errors
async def update_group(
    group_id: str,
    group_updates: GroupUpdate,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    group = SocialService(store).update_group(
        group_id, group_updates, updated_by=current_user_id
    )
    return RouterResponse.updated(data={"group": group}, message="Group updated")


@router.delete("/groups/{group_id}", response_model=Dict[str, Any])
@handle_service_errors
async def delete_group(
    group_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    SocialService(store).delete_group(group_id, deleted_by=current_user_id)
    return RouterResponse.deleted(message="Group deleted")


@router.post("/groups/{group_id}/leave", response_model=Dict[str, Any])
@handle_service_errors
async def leave_group(
    group_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    left = SocialService(store).leave_shared_group(group_id, current_user_id)
    return RouterResponse.success(data={"left": left})


@router.post(
    "/groups/{group_id}/invites",
    response_model=Dict[str, Any],
    status_code=status.HTTP_201_CREATED,
)
@handle_service_errors
async def invite_to_group(
    group_id: str,
    invite_data: GroupInviteCreate,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    invite = SocialService(store).invite_to_group(
        group_id, invite_data.user_id, invited_by=current_user_id
    )
    return RouterResponse.created(data={"invite": invite}, message="Invite sent")


@router.get("/group-invites", response_model=Dict[str, Any])
@handle_service_errors
async def get_group_invites(
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    invites = SocialService(store).get_pending_group_invites(current_user_id)
    return RouterResponse.success(data={"invites": invites})


@router.put("/group-invites/{invite_id}/accept", response_model=Dict[str, Any])
@handle_service_errors
async def accept_group_invite(
    invite_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    invite = SocialService(store).respond_to_group_invite(
        invite_id, current_user_id, accept=True
    )
    return RouterResponse.updated(data={"invite": invite}, message="Joined group")


@router.put("/group-invites/{invite_id}/decline", response_model=Dict[str, Any])
@handle_service_errors
async def decline_group_invite(
    invite_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    invite = SocialService(store).respond_to_group_invite(
        invite_id, current_user_id, accept=False
    )
    return RouterResponse.updated(data={"invite": invite}, message="Invite declined")
