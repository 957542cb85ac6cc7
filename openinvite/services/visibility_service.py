from datetime import date
from typing import List, Optional, Tuple
from ..models.enums import GroupType, VisibilityType
from ..schemas.group import Group
from ..schemas.plan import DiscoveredPlan, Plan, PlanVisibility
from ..store import PlanStore
from ..utils.date_helpers import DateHelpers
from .rsvp_service import RSVPService
from .social_service import SocialService


class VisibilityService:
    """Decides which plans a viewer can discover, and through which group.

    Discovery only ever surfaces plans the viewer has not answered yet; a
    creator never discovers their own plans.
    """

    def __init__(
        self,
        store: PlanStore,
        social: SocialService = None,
        rsvps: RSVPService = None,
    ):
        self.store = store
        self.social = social or SocialService(store)
        self.rsvps = rsvps or RSVPService(store)

    def viewer_groups(self, viewer_id: str, creator_id: str) -> List[Group]:
        """Groups that can carry a creator's plan to this viewer.

        Shared groups the viewer belongs to come first, then the creator's
        personal lists that include the viewer.
        """
        shared = self.social.groups_containing_user(viewer_id, GroupType.SHARED)
        personal = [
            g
            for g in self.social.get_personal_groups(creator_id)
            if viewer_id in g.member_ids
        ]
        return shared + personal

    def resolve(self, plan: Plan, viewer_id: str) -> Tuple[bool, Optional[Group]]:
        """Audience check ignoring RSVPs: (visible, explaining group)"""

        if viewer_id == plan.created_by:
            return False, None

        visibility = plan.visibility or PlanVisibility()

        if visibility.type in (VisibilityType.EVERYONE, VisibilityType.FRIENDS):
            return self.social.is_friend(viewer_id, plan.created_by), None

        if visibility.type == VisibilityType.GROUPS:
            target_ids = set(visibility.group_ids)
            for group in self.viewer_groups(viewer_id, plan.created_by):
                if group.id in target_ids:
                    return True, group
            return False, None

        if visibility.type == VisibilityType.PEOPLE:
            return viewer_id in visibility.user_ids, None

        return False, None

    def is_discoverable(self, plan: Plan, viewer_id: str) -> bool:
        if self.rsvps.get_my_rsvp(viewer_id, plan.id) is not None:
            return False
        return self.resolve(plan, viewer_id)[0]

    def explaining_group(self, plan: Plan, viewer_id: str) -> Optional[Group]:
        return self.resolve(plan, viewer_id)[1]

    def discover(
        self, viewer_id: str, today: Optional[date] = None
    ) -> List[DiscoveredPlan]:
        """Every unanswered upcoming plan visible to the viewer, soonest first"""

        today = today or DateHelpers.today()
        answered = self.rsvps.get_user_rsvps(viewer_id)

        with self.store.read() as store:
            candidates = [
                p
                for p in store.plans.values()
                if p.id not in answered and not DateHelpers.is_past(p.date, today)
            ]

            discovered = []
            for plan in candidates:
                visible, group = self.resolve(plan, viewer_id)
                if visible:
                    discovered.append(
                        DiscoveredPlan(
                            plan=plan,
                            group_id=group.id if group else None,
                            group_name=group.name if group else None,
                        )
                    )

        return sorted(discovered, key=lambda d: (d.plan.date, d.plan.time))

    def discover_friends_plans(
        self, viewer_id: str, today: Optional[date] = None
    ) -> List[DiscoveredPlan]:
        return [d for d in self.discover(viewer_id, today) if d.group_id is None]

    def discover_group_plans(
        self, viewer_id: str, today: Optional[date] = None
    ) -> List[DiscoveredPlan]:
        return [d for d in self.discover(viewer_id, today) if d.group_id is not None]
