import pytest

from openinvite.models.enums import GroupType, NotificationType, RequestStatus
from openinvite.schemas.group import GroupCreate, GroupUpdate
from openinvite.services.social_service import (
    GroupNotFoundError,
    RequestNotFoundError,
    SocialRuleViolationError,
    UserNotFoundError,
)


def test_friendship_is_symmetric(social_service):
    social_service.add_friendship("alex", "me")
    social_service.add_friendship("me", "alex")

    assert social_service.is_friend("me", "alex")
    assert social_service.is_friend("alex", "me")
    assert [u.id for u in social_service.get_friends("me")] == ["alex"]
    assert [u.id for u in social_service.get_friends("alex")] == ["me"]


def test_remove_friend(social_service):
    social_service.add_friendship("me", "alex")
    assert social_service.remove_friend("alex", "me")
    assert not social_service.is_friend("me", "alex")
    assert not social_service.remove_friend("alex", "me")


def test_cannot_befriend_self(social_service):
    with pytest.raises(SocialRuleViolationError):
        social_service.add_friendship("me", "me")


def test_friend_request_flow(social_service, notification_service):
    request = social_service.send_friend_request("alex", "sam")

    [notification] = notification_service.list_notifications("sam")
    assert notification.type == NotificationType.FRIEND_REQUEST
    assert notification.message == "Alex Chen sent you a friend request"

    assert [r.id for r in social_service.get_pending_friend_requests("sam")] == [
        request.id
    ]
    with pytest.raises(SocialRuleViolationError):
        social_service.send_friend_request("sam", "alex")

    accepted = social_service.respond_to_friend_request(request.id, "sam", accept=True)
    assert accepted.status == RequestStatus.ACCEPTED
    assert social_service.is_friend("alex", "sam")
    assert social_service.get_pending_friend_requests("sam") == []

    with pytest.raises(SocialRuleViolationError):
        social_service.respond_to_friend_request(request.id, "sam", accept=False)
    with pytest.raises(SocialRuleViolationError):
        social_service.send_friend_request("alex", "sam")


def test_declined_request_adds_no_friendship(social_service):
    request = social_service.send_friend_request("me", "sam")
    social_service.respond_to_friend_request(request.id, "sam", accept=False)
    assert not social_service.is_friend("me", "sam")


def test_only_the_recipient_answers_a_request(social_service):
    request = social_service.send_friend_request("me", "sam")
    with pytest.raises(RequestNotFoundError):
        social_service.respond_to_friend_request(request.id, "alex", accept=True)


def test_friend_request_to_unknown_user(social_service):
    with pytest.raises(UserNotFoundError):
        social_service.send_friend_request("me", "ghost")


def test_search_users(social_service):
    assert [u.id for u in social_service.search_users("ch", exclude_user_id="me")] == [
        "alex"
    ]
    assert [u.id for u in social_service.search_users("TAYLOR")] == ["taylor"]


def test_group_membership_rules(social_service):
    personal = social_service.create_group(
        GroupCreate(name="Close Friends", member_ids=["me", "alex", "alex"]),
        created_by="me",
    )
    shared = social_service.create_group(
        GroupCreate(name="Book Club", type=GroupType.SHARED, member_ids=["jordan"]),
        created_by="me",
    )

    assert personal.member_ids == ["alex"]
    assert shared.member_ids == ["me", "jordan"]
    assert [g.id for g in social_service.get_personal_groups("me")] == [personal.id]
    assert [g.id for g in social_service.groups_containing_user("me")] == [shared.id]
    assert social_service.members_of_group(shared.id) == ["me", "jordan"]
    assert social_service.members_of_group("missing") == []


def test_update_and_delete_group(social_service):
    group = social_service.create_group(
        GroupCreate(name="Book Club", type=GroupType.SHARED), created_by="me"
    )

    with pytest.raises(SocialRuleViolationError):
        social_service.update_group(group.id, GroupUpdate(name="Mine"), "alex")

    updated = social_service.update_group(
        group.id, GroupUpdate(member_ids=["jordan"]), "me"
    )
    assert updated.member_ids == ["me", "jordan"]

    assert social_service.delete_group(group.id, "me")
    with pytest.raises(GroupNotFoundError):
        social_service.delete_group(group.id, "me")


def test_group_invite_flow(social_service, notification_service):
    group = social_service.create_group(
        GroupCreate(name="Hiking Club", type=GroupType.SHARED, member_ids=["alex"]),
        created_by="alex",
    )

    with pytest.raises(SocialRuleViolationError):
        social_service.invite_to_group(group.id, "me", invited_by="sam")

    invite = social_service.invite_to_group(group.id, "me", invited_by="alex")
    assert invite.group_name == "Hiking Club"
    with pytest.raises(SocialRuleViolationError):
        social_service.invite_to_group(group.id, "me", invited_by="alex")

    [notification] = notification_service.list_notifications("me")
    assert notification.type == NotificationType.GROUP_INVITE
    assert notification.group_id == group.id

    social_service.respond_to_group_invite(invite.id, "me", accept=True)
    assert "me" in social_service.get_group(group.id).member_ids
    assert social_service.get_pending_group_invites("me") == []

    assert social_service.leave_shared_group(group.id, "me")
    assert "me" not in social_service.get_group(group.id).member_ids


def test_personal_groups_take_no_invites(social_service):
    group = social_service.create_group(GroupCreate(name="List"), created_by="me")
    with pytest.raises(SocialRuleViolationError):
        social_service.invite_to_group(group.id, "alex", invited_by="me")
    with pytest.raises(SocialRuleViolationError):
        social_service.leave_shared_group(group.id, "me")
