"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: domain enums and state transitions
- Schemas: API contract (what client sends/receives)
"""

from app.schemas.schemas import (
    ApprovalRequest,
    AssignedMenteesResponse,
    ErrorResponse,
    MeetingScheduleCreate,
    MeetingScheduleListResponse,
    MeetingScheduleResponse,
    MeetingStatusResponse,
    MeetingStatusSubmit,
    MessageResponse,
    MinutesEdit,
    StatusListResponse,
    StatusSubmitResponse,
    UserSummary,
)
