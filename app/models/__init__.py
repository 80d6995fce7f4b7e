"""
Models module - domain types and state transitions.

These are used by the services (not the API layer):
- MeetingStatusValue, ApprovalStatus enums
- StatusWrite and the pure apply_* transition functions
"""

from app.models.meeting_status import (
    ApprovalStatus,
    ApprovalTransitionError,
    MAX_PHASE_ID,
    MeetingStatusValue,
    REVIEW_ACTIONS,
    StatusWrite,
    apply_minutes_edit,
    apply_review,
    apply_status_write,
)

__all__ = [
    "ApprovalStatus",
    "ApprovalTransitionError",
    "MAX_PHASE_ID",
    "MeetingStatusValue",
    "REVIEW_ACTIONS",
    "StatusWrite",
    "apply_minutes_edit",
    "apply_review",
    "apply_status_write",
]
