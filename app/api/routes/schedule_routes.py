"""
Meeting Schedule Routes

POST /meeting-schedules               - Create a meeting series
GET  /meeting-schedules               - List by mentorEmail and/or phaseId
GET  /meeting-schedules/{schedule_id} - Get one schedule
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from app.services.schedule_service import MeetingScheduleService, get_schedule_service
from app.schemas.schemas import (
    ErrorResponse, MeetingScheduleCreate, MeetingScheduleListResponse, MeetingScheduleResponse
)

router = APIRouter(
    prefix="/meeting-schedules",
    tags=["Meeting Schedules"],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.post("", response_model=MeetingScheduleResponse, status_code=201)
def create_schedule(
    data: MeetingScheduleCreate,
    service: MeetingScheduleService = Depends(get_schedule_service),
):
    """Create a schedule; each date gets its own meeting_id."""
    return service.create(data)


@router.get("", response_model=MeetingScheduleListResponse)
def list_schedules(
    mentor_email: Optional[str] = Query(None, alias="mentorEmail"),
    phase_id: Optional[str] = Query(None, alias="phaseId"),
    service: MeetingScheduleService = Depends(get_schedule_service),
):
    return MeetingScheduleListResponse(schedules=service.list(mentor_email, phase_id))


@router.get("/{schedule_id}", response_model=MeetingScheduleResponse)
def get_schedule(
    schedule_id: str,
    service: MeetingScheduleService = Depends(get_schedule_service),
):
    return service.get(schedule_id)
