"""
MongoDB access helpers.

One MongoClient is shared by the whole process; handlers receive the
database through the `get_db` dependency so tests can swap in a mock.
"""
import logging
import re
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import DESCENDING, MongoClient
from pymongo.database import Database

from config import Config

logger = logging.getLogger(__name__)

client = MongoClient(
    Config.MONGODB_URI,
    maxPoolSize=Config.MONGO_MAX_POOL_SIZE,
    minPoolSize=Config.MONGO_MIN_POOL_SIZE,
    maxIdleTimeMS=Config.MONGO_MAX_IDLE_TIME_MS,
    serverSelectionTimeoutMS=Config.MONGO_SERVER_SELECTION_TIMEOUT_MS,
)
db = client[Config.DB_NAME]

COLLECTIONS = ["customers", "rooms", "bookings", "products", "orders", "memberships"]


def get_db() -> Database:
    return db


def serialize(doc: Optional[dict]) -> Optional[dict]:
    """Make a raw document JSON friendly (ObjectId -> str)."""
    if doc is None:
        return None
    out = dict(doc)
    if isinstance(out.get("_id"), ObjectId):
        out["_id"] = str(out["_id"])
    return out


def serialize_many(docs) -> List[dict]:
    return [serialize(d) for d in docs]


def create_document(database: Database, collection_name: str, data: Dict[str, Any]) -> dict:
    """Insert a document stamped with createdAt/updatedAt and return it with its _id."""
    now = datetime.utcnow()
    doc = dict(data)
    doc.setdefault("createdAt", now)
    doc["updatedAt"] = now
    result = database[collection_name].insert_one(doc)
    doc["_id"] = result.inserted_id
    return doc


def get_documents(
    database: Database,
    collection_name: str,
    filter_dict: Optional[dict] = None,
    sort: Optional[List[tuple]] = None,
    limit: int = 0,
) -> List[dict]:
    cursor = database[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def next_id(database: Database, collection_name: str, field: str, prefix: str) -> str:
    """
    Next sequential id for a collection, e.g. last "B021" -> "B022".

    The lexicographically-last id with the given prefix wins. Nothing guards
    against two concurrent callers reading the same last id.
    """
    last = database[collection_name].find_one(
        {field: {"$regex": f"^{re.escape(prefix)}\\d+$"}},
        sort=[(field, DESCENDING)],
    )
    if not last:
        return f"{prefix}001"
    number = int(last[field][len(prefix):]) + 1
    return f"{prefix}{number:03d}"


def contains_filter(text: str, fields: List[str]) -> dict:
    """Case-insensitive substring match on any of the given fields."""
    pattern = re.escape(text)
    return {"$or": [{f: {"$regex": pattern, "$options": "i"}} for f in fields]}


def day_filter(day: str) -> dict:
    """Range covering one YYYY-MM-DD day; ValueError if malformed."""
    start = datetime.strptime(day, "%Y-%m-%d")
    return {"$gte": start, "$lt": start + timedelta(days=1)}
