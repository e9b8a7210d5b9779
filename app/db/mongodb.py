"""
MongoDB Connection Utility

MongoDB stores:
- Server-side login sessions (one document per `sid` cookie)
"""
import logging

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the session database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """
    Get a specific collection.
    Collections we use:
    - sessions: logged-in session identities keyed by sid
    """
    db = get_mongo_db()
    return db[name]


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
    except Exception:
        logger.exception("MongoDB connection failed")
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "sessions": "sessions",
}


def init_mongo_indexes(db: Database = None):
    """
    Create indexes for the session collection.
    Call this once during app startup.
    """
    db = db if db is not None else get_mongo_db()
    sessions = db[COLLECTIONS["sessions"]]

    # Expire documents as soon as expires_at has passed
    sessions.create_index([("expires_at", ASCENDING)], expireAfterSeconds=0)

    logger.info("MongoDB indexes created successfully")
