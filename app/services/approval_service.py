"""
Approval Gate - reviewer verdicts on meeting status records.

The only writer of Approved / Rejected. Touches statusApproval (and
updatedAt), never the meeting status itself.
"""

import logging
from typing import Optional

from app.core.exceptions import InvalidInputError, NotFoundError
from app.models.meeting_status import (
    ApprovalStatus,
    ApprovalTransitionError,
    REVIEW_ACTIONS,
    apply_review,
)
from app.services.mongo_service import (
    MeetingStatusStore,
    serialize_doc,
    to_object_id,
    utcnow,
)

logger = logging.getLogger(__name__)


def parse_action(action: Optional[str]) -> ApprovalStatus:
    """Only "Approved" and "Rejected" are reviewer actions; "Pending" is not."""
    for allowed in REVIEW_ACTIONS:
        if action == allowed.value:
            return allowed
    raise InvalidInputError("Invalid request")


class ApprovalGateService:

    def __init__(self, store: MeetingStatusStore = None):
        self.store = store or MeetingStatusStore()

    def set_approval(self, status_id: Optional[str], action: Optional[str]) -> dict:
        """
        Approve or reject a status record.

        A record that already carries the other verdict has to go back to
        Pending (via a status write or minutes edit) before it can flip.
        """
        if not status_id:
            raise InvalidInputError("Invalid request")
        verdict = parse_action(action)

        oid = to_object_id(status_id)
        current = self.store.get_by_id(oid) if oid else None
        if current is None:
            raise NotFoundError("Status not found")

        try:
            record = apply_review(current, verdict, utcnow())
        except ApprovalTransitionError as exc:
            raise InvalidInputError(str(exc))

        # Guard against a concurrent write changing approval since the read
        updated = self.store.update_fields(
            oid,
            {"statusApproval": record["statusApproval"], "updatedAt": record["updatedAt"]},
            expect={"statusApproval": current.get("statusApproval", ApprovalStatus.pending.value)},
        )
        if updated is None:
            if self.store.get_by_id(oid) is None:
                raise NotFoundError("Status not found")
            raise InvalidInputError("Status changed during review; reload and try again")

        logger.info("Status %s %s", oid, verdict.value.lower())
        return serialize_doc(updated)


def get_approval_service() -> ApprovalGateService:
    return ApprovalGateService()
