from datetime import datetime, timezone
from typing import Optional

from pymongo.database import Database

from medicamp.constant_file import CAMPS
from medicamp.database import Repository, paginate, text_search, to_amount, to_object_id

CAMP_SEARCH_FIELDS = ["campName", "dateTime", "professionalName"]

# fees is text in the store, so it is ordered in memory
CAMP_SORTS = {
    "participantCount": [("participantCount", -1), ("_id", 1)],
    "campName": [("campName", 1), ("_id", 1)],
}
HOME_PAGE_LIMIT = 6


def _by_fees_desc(camp):
    return (-to_amount(camp.get("fees")), camp["_id"])


# ------------------ Add New Camp ------------------
async def add_camp(db: Database, camp_data: dict):
    new_camp = dict(camp_data)
    new_camp["participantCount"] = 0
    new_camp["createdAt"] = datetime.now(timezone.utc)
    return await Repository(db, CAMPS).insert_one(new_camp)


# ------------------ Retrieve Camps (search / sort / page) ------------------
async def retrieve_camps(db: Database, search: Optional[str] = None, sorted: Optional[str] = None,
                         page: int = 0, size: int = 0):
    camps = Repository(db, CAMPS)
    query = text_search(CAMP_SEARCH_FIELDS, search)

    if sorted == "fees":
        rows = await camps.find_many(query)
        rows.sort(key=_by_fees_desc)
        return paginate(rows, page, size)

    sort = CAMP_SORTS.get(sorted, [("_id", 1)])
    return await camps.find_many(query, sort=sort, skip=page * size if size else 0, limit=size)


async def count_camps(db: Database, search: Optional[str] = None):
    return await Repository(db, CAMPS).count(text_search(CAMP_SEARCH_FIELDS, search))


async def retrieve_camp(db: Database, camp_id: str):
    return await Repository(db, CAMPS).find_one({"_id": to_object_id(camp_id)})


async def retrieve_popular_camps(db: Database, limit: int = HOME_PAGE_LIMIT):
    return await Repository(db, CAMPS).find_many(sort=CAMP_SORTS["participantCount"], limit=limit)


async def retrieve_affordable_camps(db: Database, limit: int = HOME_PAGE_LIMIT):
    rows = await Repository(db, CAMPS).find_many()
    rows.sort(key=lambda camp: (to_amount(camp.get("fees")), camp["_id"]))
    return rows[:limit]


# ------------------ Update Camp ------------------
async def update_camp(db: Database, camp_id: str, update_data: dict):
    result = await Repository(db, CAMPS).update_one({"_id": to_object_id(camp_id)}, {"$set": update_data})
    if not result["matchedCount"]:
        return None
    return result


async def increment_participant_count(db: Database, camp_id: str):
    """Single atomic $inc. Cancellations never decrement it."""
    result = await Repository(db, CAMPS).update_one({"_id": to_object_id(camp_id)}, {"$inc": {"participantCount": 1}})
    if not result["matchedCount"]:
        return None
    return result


# ------------------ Delete Camp ------------------
async def delete_camp(db: Database, camp_id: str):
    result = await Repository(db, CAMPS).delete_one({"_id": to_object_id(camp_id)})
    if not result["deletedCount"]:
        return None
    return result
