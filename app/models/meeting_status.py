"""
Meeting status record and its state transitions.

A status record lives in the meeting_statuses collection, one per
(meeting_id, mentee_user_id, phaseId). Two fields move independently:

- status: what happened to the meeting (Scheduled, Completed, ...)
- statusApproval: reviewer verdict on the record (Pending, Approved, Rejected)

Approval state machine:

    Pending --review--> Approved | Rejected
    Approved | Rejected --status write / minutes edit--> Pending

Only a review sets Approved or Rejected; every content write sends the
record back to Pending. There is no direct Approved <-> Rejected edge.

The functions here are pure: they take the current document (or None) and
return the next one. Services persist the result.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from bson import ObjectId


class MeetingStatusValue(str, Enum):
    scheduled = "Scheduled"
    completed = "Completed"
    postponed = "Postponed"
    cancelled = "Cancelled"
    in_progress = "In Progress"


class ApprovalStatus(str, Enum):
    pending = "Pending"
    approved = "Approved"
    rejected = "Rejected"


# Verdicts a reviewer may hand out
REVIEW_ACTIONS = (ApprovalStatus.approved, ApprovalStatus.rejected)

# phaseId is stored as a BSON int64
MAX_PHASE_ID = 2**63 - 1


class ApprovalTransitionError(ValueError):
    """Raised when a review would skip the Pending state."""


@dataclass(frozen=True)
class StatusWrite:
    """One mentee's share of a status submission, already validated."""
    meeting_id: ObjectId
    mentee_user_id: ObjectId
    mentor_user_id: ObjectId
    phase_id: int
    status: MeetingStatusValue
    meeting_minutes: str = ""
    postponed_reason: str = ""


def minutes_for(write: StatusWrite) -> str:
    """What meeting_minutes holds after a write, by status."""
    if write.status == MeetingStatusValue.completed:
        return write.meeting_minutes or ""
    if write.status == MeetingStatusValue.postponed:
        # The postponement reason is kept in meeting_minutes
        return write.postponed_reason or ""
    return ""


def apply_status_write(current: Optional[dict], write: StatusWrite, now: datetime) -> dict:
    """
    Full-replace semantics for a status submission.

    Minutes and postponed_reason are cleared and minutes repopulated from
    the write; approval always returns to Pending. Only _id and createdAt
    survive from `current`.
    """
    record = {
        "meeting_id": write.meeting_id,
        "mentee_user_id": write.mentee_user_id,
        "phaseId": write.phase_id,
        "mentor_user_id": write.mentor_user_id,
        "status": write.status.value,
        "meeting_minutes": minutes_for(write),
        "postponed_reason": "",
        "statusApproval": ApprovalStatus.pending.value,
        "createdAt": now,
        "updatedAt": now,
    }
    if current:
        if "_id" in current:
            record["_id"] = current["_id"]
        record["createdAt"] = current.get("createdAt", now)
    return record


def apply_minutes_edit(current: dict, minutes: str, now: datetime) -> dict:
    """Replace minutes; any edit invalidates a prior verdict."""
    record = dict(current)
    record["meeting_minutes"] = minutes
    record["statusApproval"] = ApprovalStatus.pending.value
    record["updatedAt"] = now
    return record


def review_transition(current: ApprovalStatus, action: ApprovalStatus) -> ApprovalStatus:
    """
    Next approval state for a reviewer action.

    Repeating the current verdict is allowed and changes nothing.
    """
    if action not in REVIEW_ACTIONS:
        raise ValueError(f"{action.value} is not a review action")
    if current == ApprovalStatus.pending or current == action:
        return action
    raise ApprovalTransitionError(
        f"Status already {current.value.lower()}; it must return to Pending "
        f"before it can be {action.value.lower()}"
    )


def apply_review(current: dict, action: ApprovalStatus, now: datetime) -> dict:
    """Set statusApproval from a review; nothing else changes but updatedAt."""
    state = ApprovalStatus(current.get("statusApproval", ApprovalStatus.pending.value))
    record = dict(current)
    record["statusApproval"] = review_transition(state, action).value
    record["updatedAt"] = now
    return record
