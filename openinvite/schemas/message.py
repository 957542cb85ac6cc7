import datetime as dt
from pydantic import BaseModel, Field
from ..utils.constants import AppConstants


class PlanMessageCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=AppConstants.MAX_MESSAGE_LENGTH)


class PlanMessage(BaseModel):
    id: str
    plan_id: str
    user_id: str
    text: str
    created_at: dt.datetime
