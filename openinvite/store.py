import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Protocol, Tuple
from .schemas.group import Group, GroupInvite
from .schemas.message import PlanMessage
from .schemas.notification import AppNotification
from .schemas.plan import Plan
from .schemas.rsvp import RSVP
from .schemas.user import FriendRequest, Friendship, User
from .utils.constants import AppConstants

logger = logging.getLogger(__name__)


class PersistenceAdapter(Protocol):
    def load(self) -> Dict[str, List[Dict[str, Any]]]: ...

    def save(self, collection: str, records: List[Dict[str, Any]]) -> None: ...


class PlanStore:
    """Single authoritative in-memory state for plans, RSVPs and the social graph.

    Every mutation runs inside `write()`, which holds one re-entrant lock for
    the whole read-validate-mutate-persist sequence. Reads go through `read()`
    so they never observe a half-applied mutation.
    """

    def __init__(self, persistence: Optional[PersistenceAdapter] = None):
        self.persistence = persistence
        self.lock = threading.RLock()

        self.plans: Dict[str, Plan] = {}
        self.rsvps: Dict[Tuple[str, str], RSVP] = {}
        self.users: Dict[str, User] = {}
        self.friendships: List[Friendship] = []
        self.friend_requests: Dict[str, FriendRequest] = {}
        self.groups: Dict[str, Group] = {}
        self.group_invites: Dict[str, GroupInvite] = {}
        self.notifications: Dict[str, AppNotification] = {}
        self.plan_messages: Dict[str, PlanMessage] = {}

    @contextmanager
    def read(self) -> Iterator["PlanStore"]:
        with self.lock:
            yield self

    @contextmanager
    def write(self, *collections: str) -> Iterator["PlanStore"]:
        """Serialize a mutation and persist the touched collections afterwards"""
        with self.lock:
            yield self
            for collection in collections:
                self.persist(collection)

    def is_empty(self) -> bool:
        with self.lock:
            return not (self.plans or self.users or self.groups)

    # === PERSISTENCE ===
    def records(self, collection: str) -> List[Dict[str, Any]]:
        with self.lock:
            items = getattr(self, collection)
            values = items.values() if isinstance(items, dict) else items
            return [item.dict() for item in values]

    def persist(self, collection: str) -> bool:
        """Hand one collection to the persistence adapter.

        Failures are reported and swallowed: the in-memory mutation stands.
        """
        if self.persistence is None:
            return True

        try:
            self.persistence.save(collection, self.records(collection))
            return True
        except Exception as e:
            logger.warning(f"Failed to persist {collection}: {str(e)}")
            return False

    def load(self) -> None:
        """Replace in-memory state with whatever the adapter holds"""
        if self.persistence is None:
            return

        data = self.persistence.load()
        with self.lock:
            self.plans = {
                p["id"]: Plan(**p) for p in data.get(AppConstants.PLANS, [])
            }
            self.rsvps = {}
            for r in data.get(AppConstants.RSVPS, []):
                rsvp = RSVP(**r)
                self.rsvps[(rsvp.user_id, rsvp.plan_id)] = rsvp
            self.users = {u["id"]: User(**u) for u in data.get(AppConstants.USERS, [])}
            self.friendships = [
                Friendship(**f) for f in data.get(AppConstants.FRIENDSHIPS, [])
            ]
            self.friend_requests = {
                r["id"]: FriendRequest(**r)
                for r in data.get(AppConstants.FRIEND_REQUESTS, [])
            }
            self.groups = {
                g["id"]: Group(**g) for g in data.get(AppConstants.GROUPS, [])
            }
            self.group_invites = {
                i["id"]: GroupInvite(**i)
                for i in data.get(AppConstants.GROUP_INVITES, [])
            }
            self.notifications = {
                n["id"]: AppNotification(**n)
                for n in data.get(AppConstants.NOTIFICATIONS, [])
            }
            self.plan_messages = {
                m["id"]: PlanMessage(**m)
                for m in data.get(AppConstants.PLAN_MESSAGES, [])
            }

        logger.info(
            f"Loaded {len(self.plans)} plans, {len(self.rsvps)} RSVPs and "
            f"{len(self.users)} users"
        )


_store: Optional[PlanStore] = None


def init_store(persistence: Optional[PersistenceAdapter] = None) -> PlanStore:
    """Create the process-wide store (call once at startup)"""
    global _store
    _store = PlanStore(persistence)
    return _store


def get_store() -> PlanStore:
    global _store
    if _store is None:
        _store = PlanStore()
    return _store
