import logging
from datetime import datetime, timezone
from typing import Optional

from pymongo.database import Database
from pymongo.errors import PyMongoError

from medicamp.constant_file import PARTICIPANTS
from medicamp.controller.camp_controller import increment_participant_count
from medicamp.database import Repository, text_search, to_object_id
from medicamp.models.participant_model import ConfirmationStatus, PaymentStatus
from medicamp.response_model import StepReport

logger = logging.getLogger(__name__)

REGISTRATION_SEARCH_FIELDS = ["campName", "campFees", "location", "professionalName",
                              "paymentStatus", "confirmationStatus"]
REGISTRATION_STEPS = ["insertRegistration", "incrementParticipantCount"]


# ------------------ Add New Participant ------------------
async def add_participant_controller(db: Database, participant_data: dict) -> StepReport:
    """Store the registration, then count it on its camp.

    The caller checks that the camp exists first. If the camp disappears in
    between, the registration stays and the report shows the missed count.
    """
    report = StepReport(REGISTRATION_STEPS)

    registration = dict(participant_data)
    registration["paymentStatus"] = PaymentStatus.UNPAID.value
    registration["confirmationStatus"] = ConfirmationStatus.PENDING.value
    registration["registeredAt"] = datetime.now(timezone.utc)

    try:
        inserted = await Repository(db, PARTICIPANTS).insert_one(registration)
    except PyMongoError:
        logger.exception("Could not register %s for camp %s", registration["participantEmail"], registration["campId"])
        report.fail("insertRegistration", "registration could not be stored")
        return report
    report.inserted_id = inserted["insertedId"]
    report.record("insertRegistration", inserted)

    try:
        counted = await increment_participant_count(db, registration["campId"])
    except PyMongoError:
        logger.exception("Registration %s stored but camp %s not counted", report.inserted_id, registration["campId"])
        report.fail("incrementParticipantCount", "participant count could not be updated")
        return report
    if counted is None:
        logger.warning("Registration %s stored for missing camp %s", report.inserted_id, registration["campId"])
        report.fail("incrementParticipantCount", "camp not found")
        return report
    report.record("incrementParticipantCount", counted)

    logger.info("Registered %s for camp %s", registration["participantEmail"], registration["campName"])
    return report


# ------------------ Retrieve participant(s) ------------------
async def retrieve_registered_camps(db: Database, email: str, search: Optional[str] = None,
                                    page: int = 0, size: int = 0):
    query = {"participantEmail": email}
    query.update(text_search(REGISTRATION_SEARCH_FIELDS, search))
    return await Repository(db, PARTICIPANTS).find_many(
        query,
        sort=[("_id", -1)],
        skip=page * size if size else 0,
        limit=size,
    )


async def retrieve_participant_controller(db: Database, registration_id: str):
    return await Repository(db, PARTICIPANTS).find_one({"_id": to_object_id(registration_id)})


# ------------------ Confirm registration ------------------
async def confirm_registration_controller(db: Database, registration_id: str):
    result = await Repository(db, PARTICIPANTS).update_one(
        {"_id": to_object_id(registration_id)},
        {"$set": {"confirmationStatus": ConfirmationStatus.CONFIRMED.value}},
    )
    if not result["matchedCount"]:
        return None
    return result


# ------------------ Mark registration paid ------------------
async def mark_registration_paid(db: Database, registration_id: str):
    """Unpaid -> Paid. Already paid registrations match but are left as they are."""
    return await Repository(db, PARTICIPANTS).update_one(
        {"_id": to_object_id(registration_id)},
        {"$set": {"paymentStatus": PaymentStatus.PAID.value}},
    )


# ------------------ Cancel registration ------------------
async def cancel_registration_controller(db: Database, registration_id: str):
    return await Repository(db, PARTICIPANTS).delete_one({"_id": to_object_id(registration_id)})
