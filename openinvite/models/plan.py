from sqlalchemy import Column, Integer, String, Date, DateTime, Text, JSON
from ..database import Base


class PlanRecord(Base):
    __tablename__ = "plans"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    date = Column(Date, nullable=False, index=True)
    time = Column(String, nullable=False)
    location = Column(String, nullable=False)
    total_spots = Column(Integer, nullable=False)
    filled_spots = Column(Integer, nullable=False, default=0)
    rsvp_deadline = Column(Date, nullable=False)
    notes = Column(Text)

    created_by = Column(String, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

    # Tagged unions stored as JSON documents
    visibility = Column(JSON)
    recurrence = Column(JSON)
