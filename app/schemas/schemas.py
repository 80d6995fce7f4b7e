"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.

Request bodies keep the camelCase keys the frontend sends; the status
submission fields are deliberately loose (Optional, any type for phaseId)
because the engine owns the validation rules and their messages.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional, List, Union
from datetime import datetime
from enum import Enum

from app.models.meeting_status import MAX_PHASE_ID, ApprovalStatus, MeetingStatusValue


# ============================================================
# ENUMS
# ============================================================

class ScheduleStatus(str, Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"
    rescheduled = "rescheduled"


class Weekday(str, Enum):
    sunday = "Sunday"
    monday = "Monday"
    tuesday = "Tuesday"
    wednesday = "Wednesday"
    thursday = "Thursday"
    friday = "Friday"
    saturday = "Saturday"


# ============================================================
# IDENTITY SCHEMAS
# ============================================================

class UserSummary(BaseModel):
    id: str
    name: str = ""
    email: str = ""

class AssignedMenteesResponse(BaseModel):
    assignedMentees: List[UserSummary] = []


# ============================================================
# MEETING STATUS SCHEMAS
# ============================================================

class MeetingStatusSubmit(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mentor_email: Optional[str] = Field(None, alias="mentorEmail")
    # Ids stay untyped; the engine skips and logs entries it cannot parse
    mentee_id: Optional[Any] = Field(None, alias="menteeId")
    mentee_ids: Optional[List[Any]] = Field(None, alias="menteeIds")
    meeting_id: Optional[str] = Field(None, alias="meetingId")
    status: Optional[str] = None
    meeting_minutes: Optional[str] = Field(None, alias="meetingMinutes")
    # Two accepted spellings for the reason; first non-empty wins
    postponed_reason: Optional[str] = None
    postponed_reason_camel: Optional[str] = Field(None, alias="postponedReason")
    phase_id: Optional[Union[int, float, str]] = Field(None, alias="phaseId")

    def target_mentee_ids(self) -> List[Any]:
        """menteeIds when non-empty, else the single menteeId."""
        if self.mentee_ids:
            return list(self.mentee_ids)
        if self.mentee_id:
            return [self.mentee_id]
        return []

    def reason(self) -> Optional[str]:
        for reason in (self.postponed_reason, self.postponed_reason_camel):
            if reason and reason.strip():
                return reason
        return None

class MinutesEdit(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status_id: Optional[str] = Field(None, alias="statusId")
    minutes: Optional[str] = None

class ApprovalRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status_id: Optional[str] = Field(None, alias="statusId")
    # Validated by the approval gate so "Pending" and typos get the same 400
    action: Optional[str] = None

class MeetingStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    meeting_id: str
    mentor_user_id: str
    mentee_user_id: str
    phaseId: int
    status: MeetingStatusValue
    meeting_minutes: str = ""
    postponed_reason: str = ""
    statusApproval: ApprovalStatus
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    mentor_user: Optional[UserSummary] = None
    mentee_user: Optional[UserSummary] = None

class StatusSubmitResponse(BaseModel):
    message: str
    count: int
    phaseId: int
    statuses: List[MeetingStatusResponse]

class StatusListResponse(BaseModel):
    statuses: List[MeetingStatusResponse]


# ============================================================
# MEETING SCHEDULE SCHEMAS
# ============================================================

class MeetingScheduleCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mentor_email: str = Field(..., alias="mentorEmail")
    mentee_ids: List[str] = Field(..., alias="menteeIds", min_length=1)
    meeting_dates: List[datetime] = Field(..., alias="meetingDates", min_length=1)
    meeting_time: str = Field(..., alias="meetingTime", min_length=1)
    duration_minutes: int = Field(..., alias="durationMinutes", ge=1)
    platform: str = Field(..., min_length=1)
    meeting_link: Optional[str] = Field(None, alias="meetingLink")
    agenda: Optional[str] = None
    preferred_day: Optional[Weekday] = Field(None, alias="preferredDay")
    phase_id: int = Field(..., alias="phaseId", ge=1, le=MAX_PHASE_ID)

class MeetingOccurrence(BaseModel):
    date: datetime
    meeting_id: str

class MeetingScheduleResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    mentor_user_id: str
    mentee_user_ids: List[str]
    meeting_dates: List[MeetingOccurrence]
    meeting_time: str
    duration_minutes: int
    platform: str
    meeting_link: Optional[str] = None
    agenda: Optional[str] = None
    preferred_day: Optional[Weekday] = None
    number_of_meetings: int
    phaseId: int
    status: ScheduleStatus = ScheduleStatus.scheduled
    createdAt: Optional[datetime] = None

class MeetingScheduleListResponse(BaseModel):
    schedules: List[MeetingScheduleResponse]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    message: str
    success: bool = False
    error: Optional[str] = None
