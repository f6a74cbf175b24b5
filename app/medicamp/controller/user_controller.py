import logging
from datetime import datetime, timezone
from typing import Optional

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from medicamp.constant_file import USERS
from medicamp.database import Repository, text_search, to_object_id
from medicamp.models.user_model import Role

logger = logging.getLogger(__name__)

USER_SEARCH_FIELDS = ["name", "email"]


def _already_exists(email: str) -> dict:
    return {"created": False, "insertedId": None, "message": f"user {email} already exists"}


# ------------------ Add New User ------------------
async def add_user(db: Database, user_data: dict):
    """Insert the user unless the email is known. A known email is not an error."""
    users = Repository(db, USERS)
    email = user_data["email"]
    if await users.find_one({"email": email}):
        return _already_exists(email)

    new_user = dict(user_data)
    # roles are granted by operators, sign-ups always start as participants
    new_user["role"] = Role.PARTICIPANT.value
    new_user["createdAt"] = datetime.now(timezone.utc)
    try:
        result = await users.insert_one(new_user)
    except DuplicateKeyError:
        # lost a race with a concurrent sign-in for the same email
        return _already_exists(email)

    logger.info("Created user %s as %s", email, new_user["role"])
    return {"created": True, "insertedId": result["insertedId"], "message": "user created"}


# ------------------ Retrieve Users ------------------
async def retrieve_users(db: Database, search: Optional[str] = None):
    return await Repository(db, USERS).find_many(text_search(USER_SEARCH_FIELDS, search), sort=[("_id", 1)])


async def retrieve_user_by_email(db: Database, email: str):
    return await Repository(db, USERS).find_one({"email": email})


async def has_role(db: Database, email: str, role: Role) -> bool:
    user = await retrieve_user_by_email(db, email)
    return bool(user and user.get("role") == role.value)


# ------------------ Update Profile ------------------
async def update_profile(db: Database, user_id: str, email: str, update_data: dict):
    """Update the caller's own profile. Returns None when the id is not theirs."""
    result = await Repository(db, USERS).update_one(
        {"_id": to_object_id(user_id), "email": email},
        {"$set": update_data},
    )
    if not result["matchedCount"]:
        return None
    return result
