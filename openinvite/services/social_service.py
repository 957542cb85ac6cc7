import logging
import uuid
from datetime import datetime
from typing import List, Optional
from ..models.enums import GroupType, NotificationType, RequestStatus
from ..schemas.group import Group, GroupCreate, GroupInvite, GroupUpdate
from ..schemas.user import FriendRequest, Friendship, User
from ..store import PlanStore
from ..utils.constants import AppConstants
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


class SocialServiceError(Exception):
    """Base exception for social service errors"""

    pass


class UserNotFoundError(SocialServiceError):
    """User not found"""

    pass


class GroupNotFoundError(SocialServiceError):
    """Group not found"""

    pass


class RequestNotFoundError(SocialServiceError):
    """Friend request or group invite not found"""

    pass


class SocialRuleViolationError(SocialServiceError):
    """Business rule violation"""

    pass


class SocialService:
    """Users, friendships and groups: the membership data plans are scoped by"""

    def __init__(self, store: PlanStore, notifications: NotificationService = None):
        self.store = store
        self.notifications = notifications or NotificationService(store)

    # === USERS ===
    def upsert_user(self, user: User) -> User:
        with self.store.write(AppConstants.USERS) as store:
            store.users[user.id] = user
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        with self.store.read() as store:
            return store.users.get(user_id)

    def search_users(self, query: str, exclude_user_id: str = None) -> List[User]:
        needle = query.strip().lower()
        with self.store.read() as store:
            matches = [
                u
                for u in store.users.values()
                if u.id != exclude_user_id
                and (
                    needle in u.name.lower()
                    or (u.username and needle in u.username.lower())
                )
            ]
        return sorted(matches, key=lambda u: u.name)

    # === FRIENDS ===
    def is_friend(self, user_id: str, other_id: str) -> bool:
        pair = self._pair(user_id, other_id)
        with self.store.read() as store:
            return any(
                (f.user_id, f.friend_id) == pair for f in store.friendships
            )

    def get_friends(self, user_id: str) -> List[User]:
        with self.store.read() as store:
            friend_ids = [
                f.friend_id if f.user_id == user_id else f.user_id
                for f in store.friendships
                if user_id in (f.user_id, f.friend_id)
            ]
            friends = [store.users[i] for i in friend_ids if i in store.users]
        return sorted(friends, key=lambda u: u.name)

    def add_friendship(self, user_id: str, other_id: str) -> Friendship:
        if user_id == other_id:
            raise SocialRuleViolationError("Users cannot befriend themselves")

        user_id, other_id = self._pair(user_id, other_id)
        friendship = Friendship(user_id=user_id, friend_id=other_id)

        with self.store.write(AppConstants.FRIENDSHIPS) as store:
            if not self.is_friend(user_id, other_id):
                store.friendships.append(friendship)
        return friendship

    def remove_friend(self, user_id: str, friend_id: str) -> bool:
        pair = self._pair(user_id, friend_id)
        with self.store.write(AppConstants.FRIENDSHIPS) as store:
            before = len(store.friendships)
            store.friendships = [
                f for f in store.friendships if (f.user_id, f.friend_id) != pair
            ]
            return len(store.friendships) < before

    def send_friend_request(self, from_user_id: str, to_user_id: str) -> FriendRequest:
        """Send a friend request, notifying the recipient"""

        with self.store.write(AppConstants.FRIEND_REQUESTS) as store:
            self._get_user_or_raise(from_user_id)
            self._get_user_or_raise(to_user_id)

            if from_user_id == to_user_id:
                raise SocialRuleViolationError("Users cannot befriend themselves")
            if self.is_friend(from_user_id, to_user_id):
                raise SocialRuleViolationError("Users are already friends")
            if self.has_pending_request(from_user_id, to_user_id):
                raise SocialRuleViolationError("A friend request is already pending")

            request = FriendRequest(
                id=uuid.uuid4().hex,
                from_user_id=from_user_id,
                to_user_id=to_user_id,
                created_at=datetime.utcnow(),
            )
            store.friend_requests[request.id] = request

            self.notifications.notify(
                to_user_id,
                NotificationType.FRIEND_REQUEST,
                "Friend Request",
                f"{store.users[from_user_id].name} sent you a friend request",
                actor_id=from_user_id,
            )

        return request

    def has_pending_request(self, user_id: str, other_id: str) -> bool:
        """Check for a pending request in either direction"""
        pair = {user_id, other_id}
        with self.store.read() as store:
            return any(
                r.status == RequestStatus.PENDING
                and {r.from_user_id, r.to_user_id} == pair
                for r in store.friend_requests.values()
            )

    def get_pending_friend_requests(self, user_id: str) -> List[FriendRequest]:
        with self.store.read() as store:
            requests = [
                r
                for r in store.friend_requests.values()
                if r.to_user_id == user_id and r.status == RequestStatus.PENDING
            ]
        return sorted(requests, key=lambda r: r.created_at, reverse=True)

    def respond_to_friend_request(
        self, request_id: str, user_id: str, accept: bool
    ) -> FriendRequest:
        with self.store.write(AppConstants.FRIEND_REQUESTS) as store:
            request = store.friend_requests.get(request_id)
            if not request or request.to_user_id != user_id:
                raise RequestNotFoundError(f"Friend request {request_id} not found")
            if request.status != RequestStatus.PENDING:
                raise SocialRuleViolationError("Friend request was already answered")

            if accept:
                self.add_friendship(request.from_user_id, request.to_user_id)
            request.status = RequestStatus.ACCEPTED if accept else RequestStatus.DECLINED

        return request

    # === GROUPS ===
    def create_group(self, group_data: GroupCreate, created_by: str) -> Group:
        """Create a personal contact list or a shared group.

        Shared groups always include their creator; personal groups are
        private lists of other people.
        """
        member_ids = list(dict.fromkeys(group_data.member_ids))
        if group_data.type == GroupType.SHARED and created_by not in member_ids:
            member_ids.insert(0, created_by)
        if group_data.type == GroupType.PERSONAL:
            member_ids = [m for m in member_ids if m != created_by]

        group = Group(
            id=uuid.uuid4().hex,
            name=group_data.name.strip(),
            type=group_data.type,
            member_ids=member_ids,
            created_by=created_by,
            description=group_data.description,
            created_at=datetime.utcnow(),
        )

        with self.store.write(AppConstants.GROUPS) as store:
            store.groups[group.id] = group

        logger.info(f"Group {group.id} ({group.type.value}) created by {created_by}")
        return group

    def update_group(
        self, group_id: str, group_updates: GroupUpdate, updated_by: str
    ) -> Group:
        with self.store.write(AppConstants.GROUPS):
            group = self._get_group_or_raise(group_id)
            if group.created_by != updated_by:
                raise SocialRuleViolationError("Only the group creator can edit it")

            update_data = group_updates.dict(exclude_unset=True)
            for field, value in update_data.items():
                setattr(group, field, value)

            if group.type == GroupType.SHARED and group.created_by not in group.member_ids:
                group.member_ids.insert(0, group.created_by)
            return group

    def delete_group(self, group_id: str, deleted_by: str) -> bool:
        with self.store.write(AppConstants.GROUPS) as store:
            group = self._get_group_or_raise(group_id)
            if group.created_by != deleted_by:
                raise SocialRuleViolationError("Only the group creator can delete it")
            del store.groups[group_id]
            return True

    def get_group(self, group_id: str) -> Optional[Group]:
        with self.store.read() as store:
            return store.groups.get(group_id)

    def groups_containing_user(
        self, user_id: str, group_type: Optional[GroupType] = None
    ) -> List[Group]:
        """Groups listing the user as a member, oldest first"""
        with self.store.read() as store:
            groups = [
                g
                for g in store.groups.values()
                if user_id in g.member_ids
                and (group_type is None or g.type == group_type)
            ]
        return sorted(groups, key=lambda g: g.created_at)

    def members_of_group(self, group_id: str) -> List[str]:
        group = self.get_group(group_id)
        return list(group.member_ids) if group else []

    def get_personal_groups(self, owner_id: str) -> List[Group]:
        with self.store.read() as store:
            groups = [
                g
                for g in store.groups.values()
                if g.type == GroupType.PERSONAL and g.created_by == owner_id
            ]
        return sorted(groups, key=lambda g: g.created_at)

    def leave_shared_group(self, group_id: str, user_id: str) -> bool:
        with self.store.write(AppConstants.GROUPS):
            group = self._get_group_or_raise(group_id)
            if group.type != GroupType.SHARED:
                raise SocialRuleViolationError("Only shared groups can be left")
            if user_id not in group.member_ids:
                return False
            group.member_ids.remove(user_id)
            return True

    # === GROUP INVITES ===
    def invite_to_group(
        self, group_id: str, invited_user_id: str, invited_by: str
    ) -> GroupInvite:
        """Invite someone into a shared group the inviter belongs to"""

        with self.store.write(AppConstants.GROUP_INVITES) as store:
            group = self._get_group_or_raise(group_id)
            self._get_user_or_raise(invited_user_id)

            if group.type != GroupType.SHARED:
                raise SocialRuleViolationError("Only shared groups accept invites")
            if invited_by not in group.member_ids:
                raise SocialRuleViolationError("Only group members can invite")
            if invited_user_id in group.member_ids:
                raise SocialRuleViolationError("User is already a member")
            if any(
                i.group_id == group_id
                and i.invited_user_id == invited_user_id
                and i.status == RequestStatus.PENDING
                for i in store.group_invites.values()
            ):
                raise SocialRuleViolationError("An invite is already pending")

            invite = GroupInvite(
                id=uuid.uuid4().hex,
                group_id=group_id,
                group_name=group.name,
                invited_user_id=invited_user_id,
                invited_by_user_id=invited_by,
                created_at=datetime.utcnow(),
            )
            store.group_invites[invite.id] = invite

            inviter = store.users.get(invited_by)
            self.notifications.notify(
                invited_user_id,
                NotificationType.GROUP_INVITE,
                "Group Invite",
                f"{inviter.name if inviter else 'Someone'} invited you to {group.name}",
                actor_id=invited_by,
                group_id=group_id,
            )

        return invite

    def get_pending_group_invites(self, user_id: str) -> List[GroupInvite]:
        with self.store.read() as store:
            invites = [
                i
                for i in store.group_invites.values()
                if i.invited_user_id == user_id and i.status == RequestStatus.PENDING
            ]
        return sorted(invites, key=lambda i: i.created_at, reverse=True)

    def respond_to_group_invite(
        self, invite_id: str, user_id: str, accept: bool
    ) -> GroupInvite:
        with self.store.write(AppConstants.GROUP_INVITES, AppConstants.GROUPS) as store:
            invite = store.group_invites.get(invite_id)
            if not invite or invite.invited_user_id != user_id:
                raise RequestNotFoundError(f"Group invite {invite_id} not found")
            if invite.status != RequestStatus.PENDING:
                raise SocialRuleViolationError("Group invite was already answered")

            if accept:
                group = self._get_group_or_raise(invite.group_id)
                if user_id not in group.member_ids:
                    group.member_ids.append(user_id)

            invite.status = RequestStatus.ACCEPTED if accept else RequestStatus.DECLINED

        return invite

    # === HELPER METHODS ===
    def _get_user_or_raise(self, user_id: str) -> User:
        user = self.store.users.get(user_id)
        if not user:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    def _get_group_or_raise(self, group_id: str) -> Group:
        group = self.store.groups.get(group_id)
        if not group:
            raise GroupNotFoundError(f"Group {group_id} not found")
        return group

    @staticmethod
    def _pair(user_id: str, other_id: str) -> tuple:
        return tuple(sorted((user_id, other_id)))
