from sqlalchemy import Column, String
from ..database import Base


class RSVPRecord(Base):
    __tablename__ = "rsvps"

    user_id = Column(String, primary_key=True)
    plan_id = Column(String, primary_key=True, index=True)
    status = Column(String, nullable=False)  # going, maybe, interested
