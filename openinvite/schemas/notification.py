import datetime as dt
from pydantic import BaseModel
from typing import Optional
from ..models.enums import NotificationType, RSVPStatus


class AppNotification(BaseModel):
    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    read: bool = False
    created_at: dt.datetime
    plan_id: Optional[str] = None
    plan_title: Optional[str] = None
    actor_id: Optional[str] = None
    group_id: Optional[str] = None
    rsvp_status: Optional[RSVPStatus] = None
