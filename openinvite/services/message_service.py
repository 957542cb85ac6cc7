import uuid
from datetime import datetime
from typing import List
from ..schemas.message import PlanMessage, PlanMessageCreate
from ..store import PlanStore
from ..utils.constants import AppConstants
from .plan_service import PlanNotFoundError, PlanValidationError


class MessageService:
    """Discussion threads attached to plans"""

    def __init__(self, store: PlanStore):
        self.store = store

    def list_messages(self, plan_id: str) -> List[PlanMessage]:
        with self.store.read() as store:
            messages = [m for m in store.plan_messages.values() if m.plan_id == plan_id]
        return sorted(messages, key=lambda m: m.created_at)

    def post_message(
        self, plan_id: str, message_data: PlanMessageCreate, user_id: str
    ) -> PlanMessage:
        text = message_data.text.strip()
        if not text:
            raise PlanValidationError("Message cannot be empty")

        with self.store.write(AppConstants.PLAN_MESSAGES) as store:
            if plan_id not in store.plans:
                raise PlanNotFoundError(f"Plan {plan_id} not found")

            message = PlanMessage(
                id=uuid.uuid4().hex,
                plan_id=plan_id,
                user_id=user_id,
                text=text,
                created_at=datetime.utcnow(),
            )
            store.plan_messages[message.id] = message

        return message
