from sqlalchemy import Column, String, Text, Boolean, DateTime
from ..database import Base


class NotificationRecord(Base):
    __tablename__ = "notifications"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    # Optional context
    plan_id = Column(String)
    plan_title = Column(String)
    actor_id = Column(String)
    group_id = Column(String)
    rsvp_status = Column(String)
