from sqlalchemy import Column, String, Text, DateTime, JSON
from ..database import Base


class GroupRecord(Base):
    __tablename__ = "groups"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)  # personal, shared
    member_ids = Column(JSON, nullable=False)
    created_by = Column(String)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False)


class GroupInviteRecord(Base):
    __tablename__ = "group_invites"

    id = Column(String, primary_key=True, index=True)
    group_id = Column(String, nullable=False)
    group_name = Column(String, nullable=False)
    invited_user_id = Column(String, nullable=False, index=True)
    invited_by_user_id = Column(String, nullable=False)
    status = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
