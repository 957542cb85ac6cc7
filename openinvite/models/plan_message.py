from sqlalchemy import Column, String, Text, DateTime
from ..database import Base


class PlanMessageRecord(Base):
    __tablename__ = "plan_messages"

    id = Column(String, primary_key=True, index=True)
    plan_id = Column(String, nullable=False, index=True)
    user_id = Column(String, nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
