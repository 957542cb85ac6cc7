import datetime as dt
from pydantic import BaseModel, Field, computed_field, validator
from typing import List, Optional
from ..models.enums import RecurrenceEndType, RecurrenceType, VisibilityType
from ..utils.constants import AppConstants

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class PlanVisibility(BaseModel):
    type: VisibilityType = VisibilityType.EVERYONE
    group_ids: List[str] = Field(default_factory=list)
    user_ids: List[str] = Field(default_factory=list)


class RecurrenceEnd(BaseModel):
    type: RecurrenceEndType = RecurrenceEndType.NEVER
    occurrences: Optional[int] = Field(None, ge=0)
    end_date: Optional[dt.date] = None

    @validator("occurrences", always=True)
    def occurrences_required_for_after(cls, v, values):
        if values.get("type") == RecurrenceEndType.AFTER and v is None:
            raise ValueError("An occurrence count is required when ending after N")
        return v

    @validator("end_date", always=True)
    def end_date_required_for_on_date(cls, v, values):
        if values.get("type") == RecurrenceEndType.ON_DATE and v is None:
            raise ValueError("An end date is required when ending on a date")
        return v


class PlanRecurrence(BaseModel):
    type: RecurrenceType = RecurrenceType.NONE
    custom_days: Optional[int] = Field(None, le=AppConstants.MAX_CUSTOM_INTERVAL_DAYS)
    end: RecurrenceEnd = Field(default_factory=RecurrenceEnd)
    series_id: Optional[str] = None
    instance_index: int = Field(0, ge=0)
    # Date of index 0 and its deadline gap, fixed when the series is generated
    anchor_date: Optional[dt.date] = None
    deadline_gap_days: Optional[int] = Field(None, ge=0)

    @property
    def is_recurring(self) -> bool:
        return self.type != RecurrenceType.NONE


class PlanBase(BaseModel):
    title: str = Field(..., max_length=AppConstants.MAX_TITLE_LENGTH)
    date: dt.date
    time: str = Field(..., pattern=TIME_PATTERN, description="HH:MM, 24-hour")
    location: str = Field(..., max_length=AppConstants.MAX_LOCATION_LENGTH)
    total_spots: int = Field(..., le=AppConstants.MAX_TOTAL_SPOTS)
    rsvp_deadline: dt.date
    notes: Optional[str] = Field(None, max_length=AppConstants.MAX_NOTES_LENGTH)
    visibility: Optional[PlanVisibility] = None
    recurrence: Optional[PlanRecurrence] = None


class PlanCreate(PlanBase):
    created_by: Optional[str] = None


class PlanUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=AppConstants.MAX_TITLE_LENGTH)
    date: Optional[dt.date] = None
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    location: Optional[str] = Field(None, max_length=AppConstants.MAX_LOCATION_LENGTH)
    total_spots: Optional[int] = Field(None, le=AppConstants.MAX_TOTAL_SPOTS)
    rsvp_deadline: Optional[dt.date] = None
    notes: Optional[str] = Field(None, max_length=AppConstants.MAX_NOTES_LENGTH)
    visibility: Optional[PlanVisibility] = None
    recurrence: Optional[PlanRecurrence] = None


class Plan(PlanBase):
    id: str
    filled_spots: int = 0
    created_by: str
    created_at: dt.datetime

    # COMPUTED FIELDS
    @computed_field
    @property
    def spots_left(self) -> int:
        return max(self.total_spots - self.filled_spots, 0)

    @computed_field
    @property
    def is_full(self) -> bool:
        return self.filled_spots >= self.total_spots

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None and self.recurrence.is_recurring

    @property
    def series_id(self) -> Optional[str]:
        return self.recurrence.series_id if self.recurrence else None

    class Config:
        from_attributes = True


class DiscoveredPlan(BaseModel):
    """A plan surfaced in a viewer's discovery feed"""

    plan: Plan
    group_id: Optional[str] = None
    group_name: Optional[str] = None
