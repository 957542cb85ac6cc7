import datetime as dt
from pydantic import BaseModel, Field, validator
from typing import Optional
from ..models.enums import RequestStatus


class User(BaseModel):
    id: str
    name: str = Field(..., min_length=1, max_length=100)
    avatar_color: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=300)
    username: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = None
    phone: Optional[str] = None

    @validator("email")
    def email_has_at_sign(cls, v):
        if v and "@" not in v:
            raise ValueError("Invalid email address")
        return v


class Friendship(BaseModel):
    user_id: str
    friend_id: str


class FriendRequestCreate(BaseModel):
    to_user_id: str


class FriendRequest(BaseModel):
    id: str
    from_user_id: str
    to_user_id: str
    status: RequestStatus = RequestStatus.PENDING
    created_at: dt.datetime
