"""
MongoDB Connection Utility

MongoDB stores:
- Member directory (users) - read-only here, owned by the member system
- Mentor -> mentee assignments - read-only here, maintained by admins
- Meeting schedules (series of dated occurrences, each with a meeting_id)
- Meeting statuses (one per meeting occurrence, mentee and phase)
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from app.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the mentorship database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """
    Get a specific collection by its key in COLLECTIONS.
    - users: member directory (basic.name, basic.email_id)
    - assignments: mentor_user_id -> mentee_user_ids
    - schedules: meeting series with meeting_dates[].meeting_id
    - statuses: meeting status records
    """
    db = get_mongo_db()
    return db[COLLECTIONS[name]]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


def _collection_names() -> dict:
    settings = get_settings()
    return {
        "users": settings.users_collection,
        "assignments": settings.assignments_collection,
        "schedules": settings.schedules_collection,
        "statuses": settings.statuses_collection,
    }


# Collection name constants (avoid typos)
COLLECTIONS = _collection_names()


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    # Identity lookup is by normalized email
    db[COLLECTIONS["users"]].create_index("basic.email_id")

    db[COLLECTIONS["assignments"]].create_index([
        ("mentor_user_id", ASCENDING),
        ("phaseId", ASCENDING)
    ])

    schedules = db[COLLECTIONS["schedules"]]
    schedules.create_index([("phaseId", ASCENDING), ("mentor_user_id", ASCENDING)])
    schedules.create_index([("phaseId", ASCENDING), ("status", ASCENDING)])
    schedules.create_index([("phaseId", ASCENDING), ("createdAt", DESCENDING)])
    schedules.create_index("meeting_dates.meeting_id")

    statuses = db[COLLECTIONS["statuses"]]
    # Natural key: at most one status per mentee per occurrence per phase
    statuses.create_index([
        ("meeting_id", ASCENDING),
        ("mentee_user_id", ASCENDING),
        ("phaseId", ASCENDING)
    ], unique=True, name="natural_key")
    statuses.create_index([("meeting_id", ASCENDING), ("phaseId", ASCENDING)])
    statuses.create_index([("phaseId", ASCENDING), ("status", ASCENDING)])
    statuses.create_index([("mentor_user_id", ASCENDING), ("phaseId", ASCENDING)])
    statuses.create_index([("mentee_user_id", ASCENDING), ("phaseId", ASCENDING)])
    statuses.create_index([("phaseId", ASCENDING), ("statusApproval", ASCENDING)])

    logger.info("MongoDB indexes created successfully")
