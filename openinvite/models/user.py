from sqlalchemy import Column, String, Text, DateTime
from ..database import Base


class UserRecord(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    avatar_color = Column(String)
    bio = Column(Text)
    username = Column(String)
    email = Column(String)
    phone = Column(String)


class FriendshipRecord(Base):
    __tablename__ = "friendships"

    user_id = Column(String, primary_key=True)
    friend_id = Column(String, primary_key=True)


class FriendRequestRecord(Base):
    __tablename__ = "friend_requests"

    id = Column(String, primary_key=True, index=True)
    from_user_id = Column(String, nullable=False)
    to_user_id = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
