"""
MongoDB Service - collection-level operations.

Collections in this database:
1. users            - Member directory (read-only here)
2. assignments      - Mentor -> mentee assignments (read-only here)
3. meeting_schedules - Meeting series; each dated occurrence has a meeting_id
4. meeting_statuses - Status + approval per (meeting_id, mentee, phase)

These classes do no validation and raise no domain errors; pymongo errors
propagate to the calling service.
"""

from datetime import datetime, timezone
from typing import Optional, List, Dict, Iterable
from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from app.db.mongodb import get_collection


# ============================================================
# HELPERS: ObjectId handling and JSON serialization
# ============================================================

def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value) -> Optional[ObjectId]:
    """Parse a 24-hex id (or pass an ObjectId through); None if malformed."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def _serialize_value(value):
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    return value


def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    return _serialize_value(doc)


def serialize_docs(docs: list) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def user_snapshot(doc: Optional[dict]) -> Optional[dict]:
    """Display name + email of a member directory entry."""
    if doc is None:
        return None
    basic = doc.get("basic") or {}
    return {
        "id": str(doc["_id"]),
        "name": basic.get("name") or "",
        "email": basic.get("email_id") or "",
    }


# ============================================================
# USERS COLLECTION
# Member directory owned by another system
# ============================================================

class UserDirectoryStore:
    """Read access to the member directory."""

    PROJECTION = {"basic.name": 1, "basic.email_id": 1}

    def __init__(self):
        self.collection: Collection = get_collection("users")

    def find_by_email(self, email: str) -> Optional[dict]:
        """Exact match on an already-normalized email."""
        return self.collection.find_one({"basic.email_id": email}, self.PROJECTION)

    def find_many(self, user_ids: Iterable[ObjectId]) -> Dict[ObjectId, dict]:
        """Batch lookup keyed by _id; missing ids are simply absent."""
        ids = list(set(user_ids))
        if not ids:
            return {}
        cursor = self.collection.find({"_id": {"$in": ids}}, self.PROJECTION)
        return {doc["_id"]: doc for doc in cursor}


# ============================================================
# ASSIGNMENTS COLLECTION
# ============================================================

class AssignmentStore:
    """Read access to mentor -> mentees assignments."""

    def __init__(self):
        self.collection: Collection = get_collection("assignments")

    def find_for_mentor(self, mentor_id: ObjectId, phase_id: int = None) -> List[dict]:
        query = {"mentor_user_id": mentor_id}
        if phase_id is not None:
            query["phaseId"] = phase_id
        return list(self.collection.find(query))


# ============================================================
# MEETING SCHEDULES COLLECTION
# ============================================================

class MeetingScheduleStore:
    """Meeting series documents."""

    def __init__(self):
        self.collection: Collection = get_collection("schedules")

    def insert(self, doc: dict) -> dict:
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def get_by_id(self, schedule_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": schedule_id})

    def find(self, mentor_id: ObjectId = None, phase_id: int = None) -> List[dict]:
        query = {}
        if mentor_id is not None:
            query["mentor_user_id"] = mentor_id
        if phase_id is not None:
            query["phaseId"] = phase_id
        return list(self.collection.find(query).sort("createdAt", DESCENDING))


# ============================================================
# MEETING STATUSES COLLECTION
# ============================================================

class MeetingStatusStore:
    """
    Meeting status records.
    The natural key (meeting_id, mentee_user_id, phaseId) is unique.
    """

    def __init__(self):
        self.collection: Collection = get_collection("statuses")

    @staticmethod
    def natural_key(record: dict) -> dict:
        return {
            "meeting_id": record["meeting_id"],
            "mentee_user_id": record["mentee_user_id"],
            "phaseId": record["phaseId"],
        }

    def upsert(self, record: dict) -> dict:
        """
        Replace-or-insert by natural key in one atomic call.
        createdAt is only written on insert.
        """
        fields = {k: v for k, v in record.items() if k not in ("_id", "createdAt")}
        update = {
            "$set": fields,
            "$setOnInsert": {"createdAt": record.get("createdAt") or utcnow()},
        }
        try:
            return self._find_one_and_upsert(record, update)
        except DuplicateKeyError:
            # Lost an insert race on the unique key; the retry matches the winner
            return self._find_one_and_upsert(record, update)

    def _find_one_and_upsert(self, record: dict, update: dict) -> dict:
        return self.collection.find_one_and_update(
            self.natural_key(record),
            update,
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    def get_by_id(self, status_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": status_id})

    def update_fields(self, status_id: ObjectId, fields: dict, expect: dict = None) -> Optional[dict]:
        """
        $set fields on one record, optionally only if it still matches `expect`.
        Returns the updated document, or None when nothing matched.
        """
        query = {"_id": status_id}
        if expect:
            query.update(expect)
        return self.collection.find_one_and_update(
            query,
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    def find(self, query: dict = None, newest_first: bool = True) -> List[dict]:
        cursor = self.collection.find(query or {})
        if newest_first:
            cursor = cursor.sort("createdAt", DESCENDING)
        return list(cursor)

