"""
Meeting Status Routes

GET  /meeting-status/mentees?email=          - Mentees assigned to a mentor
GET  /meeting-status/mentee/by-email?email=  - Look up one mentee
POST /meeting-status                         - Submit/overwrite status for mentee(s)
POST /meeting-status/minutes                 - Edit minutes (resets approval)
GET  /meeting-status                         - All statuses, newest first
GET  /meeting-status/by-meeting              - Statuses for one meeting + mentee
GET  /meeting-status/phase/{phase_id}        - Statuses of a phase, filterable
POST /meeting-status/approval                - Approve or reject a status

Handlers are plain `def`: pymongo is blocking, so FastAPI runs them in
its threadpool.
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from app.services.directory_service import AssignmentRegistryService, IdentityLookupService
from app.services.meeting_status_service import (
    MeetingStatusService,
    get_meeting_status_service,
    parse_phase_id,
)
from app.services.approval_service import ApprovalGateService, get_approval_service
from app.schemas.schemas import (
    ApprovalRequest, AssignedMenteesResponse, ErrorResponse, MeetingStatusSubmit, MessageResponse,
    MinutesEdit, StatusListResponse, StatusSubmitResponse, UserSummary
)

router = APIRouter(
    prefix="/meeting-status",
    tags=["Meeting Status"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


def get_identity_service() -> IdentityLookupService:
    return IdentityLookupService()


def get_assignment_service() -> AssignmentRegistryService:
    return AssignmentRegistryService()


@router.get("/mentees", response_model=AssignedMenteesResponse)
def get_mentees_by_mentor(
    email: Optional[str] = Query(None, description="Mentor email"),
    phase_id: Optional[str] = Query(None, alias="phaseId", description="Limit to one phase"),
    registry: AssignmentRegistryService = Depends(get_assignment_service),
):
    """Mentees assigned to the mentor with this email."""
    phase = parse_phase_id(phase_id) if phase_id else None
    return AssignedMenteesResponse(assignedMentees=registry.assigned_mentees(email, phase))


@router.get("/mentee/by-email", response_model=UserSummary)
def get_mentee_by_email(
    email: Optional[str] = Query(None, description="Mentee email"),
    identity: IdentityLookupService = Depends(get_identity_service),
):
    return identity.find_by_email(email, role="Mentee")


@router.post("", response_model=StatusSubmitResponse, status_code=201)
def submit_meeting_status(
    data: MeetingStatusSubmit,
    service: MeetingStatusService = Depends(get_meeting_status_service),
):
    """
    Create or update the status of a meeting occurrence for one or more mentees.

    - Completed requires `meetingMinutes`
    - Postponed requires `postponed_reason` or `postponedReason` (stored as minutes)
    - Unknown mentee ids are skipped; 400 if none remain
    """
    result = service.submit_status(
        mentor_email=data.mentor_email,
        meeting_id=data.meeting_id,
        phase_id=data.phase_id,
        mentee_ids=data.target_mentee_ids(),
        status=data.status,
        meeting_minutes=data.meeting_minutes,
        postponed_reason=data.reason(),
    )
    return StatusSubmitResponse(message="Meeting status updated successfully", **result)


@router.post("/minutes", response_model=MessageResponse)
def update_meeting_minutes(
    data: MinutesEdit,
    service: MeetingStatusService = Depends(get_meeting_status_service),
):
    """Replace minutes on a status. Approval goes back to Pending."""
    service.edit_minutes(data.status_id, data.minutes)
    return MessageResponse(message="Minutes updated and approval reset to pending")


@router.get("", response_model=StatusListResponse)
def get_all_meeting_statuses(service: MeetingStatusService = Depends(get_meeting_status_service)):
    return StatusListResponse(statuses=service.list_all())


@router.get("/by-meeting", response_model=StatusListResponse)
def get_meeting_status_by_meeting_id(
    meeting_id: Optional[str] = Query(None, alias="meetingId"),
    mentee_id: Optional[str] = Query(None, alias="menteeId"),
    service: MeetingStatusService = Depends(get_meeting_status_service),
):
    return StatusListResponse(statuses=service.list_by_meeting_and_mentee(meeting_id, mentee_id))


@router.get("/phase/{phase_id}", response_model=StatusListResponse)
def get_meeting_statuses_by_phase(
    phase_id: str,
    status: Optional[str] = Query(None),
    status_approval: Optional[str] = Query(None, alias="statusApproval"),
    mentor_email: Optional[str] = Query(None, alias="mentorEmail"),
    service: MeetingStatusService = Depends(get_meeting_status_service),
):
    """Statuses in one phase, optionally filtered by status, approval or mentor."""
    statuses = service.list_by_phase(
        phase_id, status=status, status_approval=status_approval, mentor_email=mentor_email
    )
    return StatusListResponse(statuses=statuses)


@router.post("/approval", response_model=MessageResponse)
def update_status_approval(
    data: ApprovalRequest,
    gate: ApprovalGateService = Depends(get_approval_service),
):
    """Approve or reject a status. `action` must be "Approved" or "Rejected"."""
    gate.set_approval(data.status_id, data.action)
    return MessageResponse(message=f"Status {data.action.lower()} successfully")
