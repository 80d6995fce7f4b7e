"""
Meeting Schedule Service

A schedule is one mentor meeting one or more mentees over a series of
dates within a phase. Each date gets its own generated meeting_id; status
records point at that id.

Status writes do not check that their meeting_id belongs to a schedule.
"""

import logging
from typing import List, Optional

from bson import ObjectId

from app.core.exceptions import InvalidInputError, NotFoundError
from app.schemas.schemas import MeetingScheduleCreate, ScheduleStatus
from app.services.directory_service import IdentityLookupService
from app.services.meeting_status_service import parse_phase_id
from app.services.mongo_service import (
    MeetingScheduleStore,
    serialize_doc,
    serialize_docs,
    to_object_id,
    utcnow,
)

logger = logging.getLogger(__name__)


class MeetingScheduleService:

    def __init__(self, store: MeetingScheduleStore = None, identity: IdentityLookupService = None):
        self.store = store or MeetingScheduleStore()
        self.identity = identity or IdentityLookupService()

    def create(self, data: MeetingScheduleCreate) -> dict:
        """
        Create a schedule, minting one meeting_id per date.

        Every mentee must exist; unlike status submissions a schedule with
        an unknown participant is rejected outright.
        """
        mentor = self.identity.find_by_email(data.mentor_email, role="Mentor")

        mentee_oids = []
        for raw_id in data.mentee_ids:
            oid = to_object_id(raw_id)
            if oid is None:
                raise InvalidInputError(f"Invalid mentee ID: {raw_id}")
            if oid not in mentee_oids:
                mentee_oids.append(oid)

        known = self.identity.snapshots(mentee_oids)
        missing = [str(oid) for oid in mentee_oids if oid not in known]
        if missing:
            raise NotFoundError(f"Mentee not found: {', '.join(missing)}")

        dates = sorted(data.meeting_dates)
        doc = {
            "mentor_user_id": ObjectId(mentor["id"]),
            "mentee_user_ids": mentee_oids,
            "meeting_dates": [{"date": d, "meeting_id": ObjectId()} for d in dates],
            "meeting_time": data.meeting_time,
            "duration_minutes": data.duration_minutes,
            "platform": data.platform,
            "meeting_link": data.meeting_link,
            "agenda": data.agenda,
            "preferred_day": data.preferred_day.value if data.preferred_day else None,
            "number_of_meetings": len(dates),
            "phaseId": data.phase_id,
            "status": ScheduleStatus.scheduled.value,
            "createdAt": utcnow(),
        }
        saved = self.store.insert(doc)
        logger.info(
            "Schedule %s created: mentor %s, %d mentee(s), %d meeting(s), phase %d",
            saved["_id"], mentor["id"], len(mentee_oids), len(dates), data.phase_id,
        )
        return serialize_doc(saved)

    def get(self, schedule_id: str) -> dict:
        oid = to_object_id(schedule_id)
        doc = self.store.get_by_id(oid) if oid else None
        if doc is None:
            raise NotFoundError("Schedule not found")
        return serialize_doc(doc)

    def list(self, mentor_email: Optional[str] = None, phase_id=None) -> List[dict]:
        mentor_oid = None
        if mentor_email:
            mentor = self.identity.find_by_email(mentor_email, role="Mentor")
            mentor_oid = ObjectId(mentor["id"])
        phase = parse_phase_id(phase_id) if phase_id is not None else None
        return serialize_docs(self.store.find(mentor_oid, phase))


def get_schedule_service() -> MeetingScheduleService:
    return MeetingScheduleService()
