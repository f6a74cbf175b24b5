from datetime import datetime, timezone
from typing import Optional

from pymongo.database import Database

from medicamp.constant_file import FEEDBACKS
from medicamp.database import Repository


def _as_utc(value: Optional[datetime]) -> datetime:
    """Naive client dates are taken as UTC. Missing dates get the server time."""
    if value is None:
        return datetime.now(timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


async def add_feedback_controller(db: Database, feedback_data: dict):
    feedback = dict(feedback_data)
    feedback["date"] = _as_utc(feedback.get("date"))
    return await Repository(db, FEEDBACKS).insert_one(feedback)


async def retrieve_feedbacks_controller(db: Database):
    return await Repository(db, FEEDBACKS).find_many(sort=[("date", -1), ("_id", -1)])
