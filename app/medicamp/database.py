import asyncio
import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException, Request, status
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from medicamp.constant_file import (DB_URI, DB_NAME, DB_TIMEOUT_MS,
                                    USERS, CAMPS, PARTICIPANTS, PAYMENTS,
                                    FEEDBACKS, AI_IMAGES)

logger = logging.getLogger(__name__)


def connect(uri: str = DB_URI, name: str = DB_NAME) -> Database:
    """Open the process-wide client. Called once by the app factory."""
    client = MongoClient(
        uri,
        serverSelectionTimeoutMS=DB_TIMEOUT_MS,
        connectTimeoutMS=DB_TIMEOUT_MS,
        socketTimeoutMS=DB_TIMEOUT_MS,
    )
    return client[name]


# Dependency for FastAPI routes
def get_db(request: Request) -> Database:
    return request.app.state.db


def ensure_indexes(db: Database):
    db[USERS].create_index([("email", ASCENDING)], unique=True)
    db[PARTICIPANTS].create_index([("participantEmail", ASCENDING)])
    db[PARTICIPANTS].create_index([("campId", ASCENDING)])
    db[PAYMENTS].create_index([("email", ASCENDING)])
    db[PAYMENTS].create_index([("campId", ASCENDING)])
    db[FEEDBACKS].create_index([("date", ASCENDING)])
    db[AI_IMAGES].create_index([("email", ASCENDING)])
    db[CAMPS].create_index([("campName", ASCENDING)])


# ----------------------- Value helpers -----------------------
def serialize_doc(doc: Dict[str, Any]) -> Dict[str, Any]:
    out = {}
    for k, v in doc.items():
        if isinstance(v, ObjectId):
            out[k] = str(v)
        elif isinstance(v, datetime):
            out[k] = v.isoformat()
        elif isinstance(v, list):
            out[k] = [serialize_doc(i) if isinstance(i, dict) else (str(i) if isinstance(i, ObjectId) else i) for i in v]
        elif isinstance(v, dict):
            out[k] = serialize_doc(v)
        else:
            out[k] = v
    return out


def to_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid id: {value}")


def to_amount(value: Any) -> float:
    """Fees are stored as text. Anything that is not a number counts as 0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        amount = float(str(value).strip().replace(",", ""))
    except ValueError:
        return 0.0
    if amount != amount or amount in (float("inf"), float("-inf")):
        return 0.0
    return amount


def text_search(fields: List[str], search: Optional[str]) -> Dict[str, Any]:
    """Case-insensitive substring match of `search` on any of `fields`."""
    if not search:
        return {}
    pattern = re.escape(search.strip())
    return {"$or": [{field: {"$regex": pattern, "$options": "i"}} for field in fields]}


def matches_text(row: Dict[str, Any], fields: List[str], search: Optional[str]) -> bool:
    """In-memory counterpart of text_search for joined rows."""
    if not search:
        return True
    needle = search.strip().lower()
    return any(needle in str(row.get(field) or "").lower() for field in fields)


def paginate(rows: List[Any], page: int = 0, size: int = 0) -> List[Any]:
    if not size:
        return rows
    start = page * size
    return rows[start:start + size]


# ----------------------- Repository -----------------------
async def in_thread(fn, *args, **kwargs):
    """Run a blocking driver call off the event loop."""
    return await asyncio.to_thread(fn, *args, **kwargs)


class Repository:
    """Thin CRUD contract over one collection returning JSON-ready dicts.

    Every method hands the blocking pymongo call to a worker thread, so a
    slow query only holds up the request that made it.
    """

    def __init__(self, db: Database, name: str):
        self.name = name
        self.collection = db[name]

    def _find_many(self, filter, sort, skip, limit) -> List[Dict[str, Any]]:
        cursor = self.collection.find(filter or {})
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return [serialize_doc(doc) for doc in cursor]

    async def find_many(self, filter: Optional[dict] = None, sort: Optional[list] = None,
                        skip: int = 0, limit: int = 0) -> List[Dict[str, Any]]:
        return await in_thread(self._find_many, filter, sort, skip, limit)

    async def find_one(self, filter: dict) -> Optional[Dict[str, Any]]:
        doc = await in_thread(self.collection.find_one, filter)
        return serialize_doc(doc) if doc else None

    async def insert_one(self, doc: dict) -> Dict[str, Any]:
        result = await in_thread(self.collection.insert_one, doc)
        return {"acknowledged": result.acknowledged, "insertedId": str(result.inserted_id)}

    async def update_one(self, filter: dict, patch: dict) -> Dict[str, Any]:
        result = await in_thread(self.collection.update_one, filter, patch)
        return {
            "acknowledged": result.acknowledged,
            "matchedCount": result.matched_count,
            "modifiedCount": result.modified_count,
        }

    async def delete_one(self, filter: dict) -> Dict[str, Any]:
        result = await in_thread(self.collection.delete_one, filter)
        return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}

    async def count(self, filter: Optional[dict] = None) -> int:
        return await in_thread(self.collection.count_documents, filter or {})
