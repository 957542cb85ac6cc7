from pydantic import BaseModel, Field
from typing import Optional, Set
from ..models.enums import RSVPStatus


class RSVP(BaseModel):
    user_id: str
    plan_id: str
    status: RSVPStatus


class RSVPSet(BaseModel):
    status: Optional[RSVPStatus] = None
    toggle: bool = Field(
        False, description="Treat re-submitting the current status as a withdrawal"
    )


class RSVPResult(BaseModel):
    success: bool
    error: Optional[str] = None
    status: Optional[RSVPStatus] = None
    filled_spots: Optional[int] = None


class RSVPSummary(BaseModel):
    going: Set[str] = Field(default_factory=set)
    maybe: Set[str] = Field(default_factory=set)
    interested: Set[str] = Field(default_factory=set)
