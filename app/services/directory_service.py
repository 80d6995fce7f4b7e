"""
Identity Lookup and Assignment Registry.

Thin read-only views over the member directory and the mentor -> mentee
assignments. Every higher service resolves people through here.
"""

import logging
from typing import Dict, Iterable, List, Optional

from bson import ObjectId

from app.core.exceptions import InvalidInputError, NotFoundError
from app.services.mongo_service import (
    AssignmentStore,
    UserDirectoryStore,
    user_snapshot,
)

logger = logging.getLogger(__name__)


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class IdentityLookupService:
    """Resolve members by email or id."""

    def __init__(self, users: UserDirectoryStore = None):
        self.users = users or UserDirectoryStore()

    def find_by_email(self, email: Optional[str], role: str = "User") -> dict:
        """
        Return {id, name, email} for the member with this email.

        The email is trimmed and lower-cased, then matched exactly.
        `role` only shapes the error messages ("Mentor not found").
        """
        normalized = normalize_email(email)
        if not normalized:
            raise InvalidInputError(f"{role} email required")
        doc = self.users.find_by_email(normalized)
        if doc is None:
            raise NotFoundError(f"{role} not found")
        return user_snapshot(doc)

    def snapshots(self, user_ids: Iterable[ObjectId]) -> Dict[ObjectId, dict]:
        """Batch {id, name, email} lookup keyed by ObjectId."""
        return {
            _id: user_snapshot(doc)
            for _id, doc in self.users.find_many(user_ids).items()
        }


class AssignmentRegistryService:
    """Which mentees a mentor is responsible for."""

    def __init__(self, assignments: AssignmentStore = None, identity: IdentityLookupService = None):
        self.assignments = assignments or AssignmentStore()
        self.identity = identity or IdentityLookupService()

    def mentee_ids_for(self, mentor_id: ObjectId, phase_id: int = None) -> List[ObjectId]:
        """
        Union of mentee ids over the mentor's assignment records.
        Scoped to one phase when phase_id is given. Never raises for a
        mentor with no assignment; the result is just empty.
        """
        seen = []
        for record in self.assignments.find_for_mentor(mentor_id, phase_id):
            for mentee_id in record.get("mentee_user_ids") or []:
                if mentee_id not in seen:
                    seen.append(mentee_id)
        return seen

    def assigned_mentees(self, mentor_email: Optional[str], phase_id: int = None) -> List[dict]:
        """Resolve a mentor by email and return their mentees as {id, name, email}."""
        mentor = self.identity.find_by_email(mentor_email, role="Mentor")
        mentee_ids = self.mentee_ids_for(ObjectId(mentor["id"]), phase_id)
        if not mentee_ids:
            return []

        snapshots = self.identity.snapshots(mentee_ids)
        missing = [str(_id) for _id in mentee_ids if _id not in snapshots]
        if missing:
            logger.warning("Assigned mentees missing from directory: %s", ", ".join(missing))
        return [snapshots[_id] for _id in mentee_ids if _id in snapshots]
