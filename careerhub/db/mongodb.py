"""
MongoDB Connection Utility

MongoDB stores:
- Import audit records (file name, detected type, per-entity counts)
- AI-generated documents (meeting briefs, content drafts)

The relational database remains the source of truth for every career and
resume record; these documents are append-only history.
"""
import logging

from pymongo import MongoClient, DESCENDING
from pymongo.database import Database
from pymongo.collection import Collection
from careerhub.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=3000)
    return _client


def get_mongo_db() -> Database:
    """Get the document database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def set_mongo_client(client: MongoClient) -> None:
    """Swap the client, e.g. for an in-memory one in tests."""
    global _client, _db
    _client = client
    _db = None


def get_collection(name: str) -> Collection:
    """
    Get a specific collection.
    Collections we'll use:
    - raw_imports: LinkedIn CSV import audit trail
    - ai_outputs: generated briefs and drafts
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
    except Exception as e:
        logger.error("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "raw_imports": "raw_imports",
    "ai_outputs": "ai_outputs",
}


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    db[COLLECTIONS["raw_imports"]].create_index([
        ("workspace_id", 1),
        ("imported_at", DESCENDING)
    ])
    db[COLLECTIONS["ai_outputs"]].create_index([
        ("workspace_id", 1),
        ("kind", 1),
        ("created_at", DESCENDING)
    ])

    logger.info("MongoDB indexes created")
