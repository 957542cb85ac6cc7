import logging
from typing import Any, Dict, List
from fastapi.encoders import jsonable_encoder
from sqlalchemy import JSON
from .database import SessionLocal, session_scope
from .models import (
    PlanRecord,
    RSVPRecord,
    UserRecord,
    FriendshipRecord,
    FriendRequestRecord,
    GroupRecord,
    GroupInviteRecord,
    NotificationRecord,
    PlanMessageRecord,
)
from .utils.constants import AppConstants

logger = logging.getLogger(__name__)


COLLECTION_MODELS = {
    AppConstants.PLANS: PlanRecord,
    AppConstants.RSVPS: RSVPRecord,
    AppConstants.USERS: UserRecord,
    AppConstants.FRIENDSHIPS: FriendshipRecord,
    AppConstants.FRIEND_REQUESTS: FriendRequestRecord,
    AppConstants.GROUPS: GroupRecord,
    AppConstants.GROUP_INVITES: GroupInviteRecord,
    AppConstants.NOTIFICATIONS: NotificationRecord,
    AppConstants.PLAN_MESSAGES: PlanMessageRecord,
}


class PersistenceError(Exception):
    """Storage adapter failure"""

    pass


class SqlAlchemyPersistence:
    """Stores each collection as rows of its own table.

    `save` replaces the whole collection, mirroring the blob-per-key
    semantics of the key-value store the client app used.
    """

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def load(self) -> Dict[str, List[Dict[str, Any]]]:
        data = {}
        try:
            with session_scope(self.session_factory) as db:
                for collection, model in COLLECTION_MODELS.items():
                    data[collection] = [
                        self._row_to_record(model, row) for row in db.query(model).all()
                    ]
        except Exception as e:
            raise PersistenceError(f"Failed to load collections: {str(e)}")

        return data

    def save(self, collection: str, records: List[Dict[str, Any]]) -> None:
        model = COLLECTION_MODELS.get(collection)
        if model is None:
            raise PersistenceError(f"Unknown collection: {collection}")

        try:
            with session_scope(self.session_factory) as db:
                db.query(model).delete()
                db.add_all([self._record_to_row(model, record) for record in records])
        except Exception as e:
            raise PersistenceError(f"Failed to save {collection}: {str(e)}")

        logger.debug(f"Saved {len(records)} records to {collection}")

    # === HELPER METHODS ===
    @staticmethod
    def _record_to_row(model, record: Dict[str, Any]):
        values = {}
        for column in model.__table__.columns:
            value = record.get(column.name)
            if isinstance(column.type, JSON):
                value = jsonable_encoder(value)
            elif hasattr(value, "value"):
                value = value.value
            values[column.name] = value
        return model(**values)

    @staticmethod
    def _row_to_record(model, row) -> Dict[str, Any]:
        return {
            column.name: getattr(row, column.name) for column in model.__table__.columns
        }
