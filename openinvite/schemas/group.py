import datetime as dt
from pydantic import BaseModel, Field
from typing import List, Optional
from ..models.enums import GroupType, RequestStatus


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: GroupType = GroupType.PERSONAL
    member_ids: List[str] = Field(default_factory=list)
    description: Optional[str] = Field(None, max_length=300)


class GroupUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    member_ids: Optional[List[str]] = None
    description: Optional[str] = Field(None, max_length=300)


class Group(BaseModel):
    id: str
    name: str
    type: GroupType
    member_ids: List[str] = Field(default_factory=list)
    created_by: Optional[str] = None
    description: Optional[str] = None
    created_at: dt.datetime


class GroupInviteCreate(BaseModel):
    user_id: str


class GroupInvite(BaseModel):
    id: str
    group_id: str
    group_name: str
    invited_user_id: str
    invited_by_user_id: str
    status: RequestStatus = RequestStatus.PENDING
    created_at: dt.datetime
