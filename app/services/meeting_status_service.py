"""
Meeting Status Engine

Tracks what happened to each meeting occurrence, per mentee and phase.

WRITE PATHS:
1. submit_status - mentor reports a status for one or more mentees.
   Upserts by (meeting_id, mentee_user_id, phaseId) with full-replace
   semantics and resets approval to Pending.
2. edit_minutes  - replaces meeting_minutes and resets approval to Pending.

Approval verdicts are written by ApprovalGateService, never here.

PARTIAL SUCCESS:
Mentee ids that are malformed or unknown are logged and skipped. Upserts
run one after another without a transaction: if the store fails halfway,
the mentees already written stay written and the call raises
PersistenceError.
"""

import logging
from typing import List, Optional

from bson import ObjectId
from pymongo.errors import PyMongoError

from app.core.exceptions import (
    InvalidInputError,
    NoValidTargetsError,
    NotFoundError,
    PersistenceError,
)
from app.models.meeting_status import (
    MAX_PHASE_ID,
    ApprovalStatus,
    MeetingStatusValue,
    StatusWrite,
    apply_minutes_edit,
    apply_status_write,
)
from app.services.directory_service import IdentityLookupService
from app.services.mongo_service import (
    MeetingStatusStore,
    serialize_doc,
    serialize_docs,
    to_object_id,
    utcnow,
)

logger = logging.getLogger(__name__)


# ============================================================
# INPUT PARSING
# ============================================================

def parse_phase_id(value) -> int:
    """Accept 1, 1.0 or "1"; anything missing, fractional, < 1 or beyond int64 is rejected."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidInputError("phaseId is required")
    if isinstance(value, bool):
        raise InvalidInputError("Invalid phaseId")

    number = value
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise InvalidInputError("Invalid phaseId")
    if isinstance(number, float):
        if number != number or not number.is_integer():
            raise InvalidInputError("Invalid phaseId")
        number = int(number)
    if not isinstance(number, int) or number < 1 or number > MAX_PHASE_ID:
        raise InvalidInputError("Invalid phaseId")
    return number


def parse_status(value) -> MeetingStatusValue:
    try:
        return MeetingStatusValue(value)
    except ValueError:
        allowed = ", ".join(s.value for s in MeetingStatusValue)
        raise InvalidInputError(f"Invalid status. Allowed: {allowed}")


def _blank(text: Optional[str]) -> bool:
    return not text or not text.strip()


def _unique(values: List[str]) -> List[str]:
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


# ============================================================
# ENGINE
# ============================================================

class MeetingStatusService:
    """Status submissions, minutes edits and status listings."""

    def __init__(self, store: MeetingStatusStore = None, identity: IdentityLookupService = None):
        self.store = store or MeetingStatusStore()
        self.identity = identity or IdentityLookupService()

    def submit_status(
        self,
        mentor_email: Optional[str],
        meeting_id: Optional[str],
        phase_id,
        mentee_ids: List[str],
        status: Optional[str],
        meeting_minutes: Optional[str] = None,
        postponed_reason: Optional[str] = None,
    ) -> dict:
        """
        Create or overwrite the status of one meeting occurrence for each mentee.

        Returns {"count", "phaseId", "statuses"} with the written records.

        Raises:
            InvalidInputError: missing/malformed field, or missing minutes
                (Completed) / reason (Postponed)
            NotFoundError: mentor email does not resolve
            NoValidTargetsError: every mentee id was skipped
            PersistenceError: the store failed mid-batch
        """
        phase = parse_phase_id(phase_id)

        if _blank(mentor_email) or not mentee_ids or not meeting_id or not status:
            raise InvalidInputError("Required fields missing")

        meeting_oid = to_object_id(meeting_id)
        if meeting_oid is None:
            raise InvalidInputError("Invalid meetingId")

        status_value = parse_status(status)
        if status_value == MeetingStatusValue.completed and _blank(meeting_minutes):
            raise InvalidInputError("Meeting minutes required for completed status")
        if status_value == MeetingStatusValue.postponed and _blank(postponed_reason):
            raise InvalidInputError("Postponed reason required for postponed status")

        mentor = self.identity.find_by_email(mentor_email, role="Mentor")
        mentor_oid = ObjectId(mentor["id"])

        # Resolve every candidate up front; unknown ones are skipped, not fatal
        candidates = []
        for raw_id in _unique(mentee_ids):
            oid = to_object_id(raw_id)
            if oid is None:
                logger.warning("Invalid mentee ID: %s", raw_id)
                continue
            candidates.append(oid)
        known = self.identity.snapshots(candidates)

        written = []
        for mentee_oid in candidates:
            if mentee_oid not in known:
                logger.warning("Mentee not found with ID: %s", mentee_oid)
                continue

            write = StatusWrite(
                meeting_id=meeting_oid,
                mentee_user_id=mentee_oid,
                mentor_user_id=mentor_oid,
                phase_id=phase,
                status=status_value,
                meeting_minutes=meeting_minutes or "",
                postponed_reason=postponed_reason or "",
            )
            record = apply_status_write(None, write, utcnow())
            try:
                saved = self.store.upsert(record)
            except PyMongoError as exc:
                logger.exception(
                    "Status upsert failed for meeting %s mentee %s (%d already written)",
                    meeting_oid, mentee_oid, len(written),
                )
                raise PersistenceError(detail=str(exc)) from exc
            written.append(saved)

        if not written:
            raise NoValidTargetsError("No valid mentee IDs processed")

        logger.info(
            "Meeting %s phase %d: %s recorded for %d mentee(s)",
            meeting_oid, phase, status_value.value, len(written),
        )
        return {
            "count": len(written),
            "phaseId": phase,
            "statuses": serialize_docs(written),
        }

    def edit_minutes(self, status_id: Optional[str], minutes: Optional[str]) -> dict:
        """
        Replace a record's meeting_minutes.

        Approval goes back to Pending on every edit, even when the text is
        unchanged or the record was already Approved/Rejected.
        """
        if not status_id:
            raise InvalidInputError("statusId is required")
        if minutes is None:
            raise InvalidInputError("minutes is required")

        oid = to_object_id(status_id)
        current = self.store.get_by_id(oid) if oid else None
        if current is None:
            raise NotFoundError("Status not found")

        record = apply_minutes_edit(current, minutes, utcnow())
        updated = self.store.update_fields(oid, {
            "meeting_minutes": record["meeting_minutes"],
            "statusApproval": record["statusApproval"],
            "updatedAt": record["updatedAt"],
        })
        if updated is None:
            raise NotFoundError("Status not found")

        logger.info("Minutes edited on status %s; approval reset to Pending", oid)
        return serialize_doc(updated)

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    def list_all(self) -> List[dict]:
        """Every status record, newest first, with mentor/mentee snapshots."""
        return self._denormalize(self.store.find())

    def list_by_meeting_and_mentee(self, meeting_id: Optional[str], mentee_id: Optional[str]) -> List[dict]:
        if not meeting_id or not mentee_id:
            raise InvalidInputError("Required params missing")

        meeting_oid = to_object_id(meeting_id)
        mentee_oid = to_object_id(mentee_id)
        if meeting_oid is None or mentee_oid is None:
            # Malformed ids cannot match anything
            return []

        docs = self.store.find({"meeting_id": meeting_oid, "mentee_user_id": mentee_oid})
        return self._denormalize(docs)

    def list_by_phase(
        self,
        phase_id,
        status: Optional[str] = None,
        status_approval: Optional[str] = None,
        mentor_email: Optional[str] = None,
    ) -> List[dict]:
        """Records of one phase, optionally narrowed by status, approval and mentor."""
        query = {"phaseId": parse_phase_id(phase_id)}
        if status:
            query["status"] = parse_status(status).value
        if status_approval:
            try:
                query["statusApproval"] = ApprovalStatus(status_approval).value
            except ValueError:
                raise InvalidInputError("Invalid statusApproval")
        if mentor_email:
            mentor = self.identity.find_by_email(mentor_email, role="Mentor")
            query["mentor_user_id"] = ObjectId(mentor["id"])

        return self._denormalize(self.store.find(query))

    def _denormalize(self, docs: List[dict]) -> List[dict]:
        """Attach mentor_user / mentee_user snapshots with one directory query."""
        user_ids = []
        for doc in docs:
            user_ids.append(doc.get("mentor_user_id"))
            user_ids.append(doc.get("mentee_user_id"))
        snapshots = self.identity.snapshots(_id for _id in user_ids if _id is not None)

        populated = []
        for doc in docs:
            item = serialize_doc(doc)
            item["mentor_user"] = snapshots.get(doc.get("mentor_user_id"))
            item["mentee_user"] = snapshots.get(doc.get("mentee_user_id"))
            populated.append(item)
        return populated


def get_meeting_status_service() -> MeetingStatusService:
    """Factory used by the routes."""
    return MeetingStatusService()
