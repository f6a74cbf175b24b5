"""
Cross-collection reads behind the history, listing and dashboard routes.

Every report reads the collections it needs, joins them in memory and only
then hands the finished rows back. Empty inputs give zero-valued results.
Fees are text in the store and go through ``to_amount`` before any sum or
ordering, so a malformed fee counts as 0 instead of failing the report.
"""
from typing import Dict, List, Optional

from bson import ObjectId
from pymongo.database import Database

from medicamp.constant_file import USERS, CAMPS, PARTICIPANTS, PAYMENTS, FEEDBACKS
from medicamp.database import Repository, in_thread, matches_text, paginate, to_amount
from medicamp.models.participant_model import ConfirmationStatus

HISTORY_SEARCH_FIELDS = ["campName", "campFees", "paymentStatus", "confirmationStatus", "transactionId"]
PARTICIPANT_SEARCH_FIELDS = ["participantName", "campName", "campFees", "paymentStatus", "confirmationStatus"]


async def _registrations_by_id(db: Database, ids: List[str]) -> Dict[str, dict]:
    object_ids = [ObjectId(i) for i in ids if ObjectId.is_valid(i)]
    if not object_ids:
        return {}
    rows = await Repository(db, PARTICIPANTS).find_many({"_id": {"$in": object_ids}})
    return {row["_id"]: row for row in rows}


def _fee_total(docs) -> float:
    return sum(to_amount(doc.get("campFees")) for doc in docs)


# ------------------ Payment history ------------------
async def _history_rows(db: Database, email: str) -> List[dict]:
    payments = await Repository(db, PAYMENTS).find_many({"email": email}, sort=[("_id", -1)])
    registrations = await _registrations_by_id(db, [p.get("campId") for p in payments])

    rows = []
    for payment in payments:
        registration = registrations.get(payment.get("campId"), {})
        rows.append({
            "_id": payment["_id"],
            "transactionId": payment.get("transactionId"),
            "campId": payment.get("campId"),
            "campName": registration.get("campName", payment.get("campName")),
            "campFees": registration.get("campFees", payment.get("campFees")),
            "date": payment.get("date"),
            "paymentStatus": registration.get("paymentStatus", payment.get("paymentStatus")),
            "confirmationStatus": registration.get("confirmationStatus"),
        })
    return rows


async def retrieve_payment_history(db: Database, email: str, search: Optional[str] = None,
                                   page: int = 0, size: int = 0):
    rows = [r for r in await _history_rows(db, email) if matches_text(r, HISTORY_SEARCH_FIELDS, search)]
    return paginate(rows, page, size)


async def count_payment_history(db: Database, email: str, search: Optional[str] = None):
    rows = await _history_rows(db, email)
    return sum(1 for r in rows if matches_text(r, HISTORY_SEARCH_FIELDS, search))


# ------------------ Participant listing (organizer) ------------------
async def _participant_rows(db: Database) -> List[dict]:
    registrations = await Repository(db, PARTICIPANTS).find_many()
    registrations.sort(key=lambda r: (-to_amount(r.get("campFees")), r["_id"]))

    # later payments for the same registration win
    payments = {}
    for payment in await Repository(db, PAYMENTS).find_many(sort=[("_id", 1)]):
        payments[payment.get("campId")] = payment

    rows = []
    for registration in registrations:
        payment = payments.get(registration["_id"])
        row = dict(registration)
        row["transactionId"] = payment.get("transactionId") if payment else None
        row["paymentDate"] = payment.get("date") if payment else None
        rows.append(row)
    return rows


async def retrieve_participants_overview(db: Database, search: Optional[str] = None,
                                         page: int = 0, size: int = 0):
    rows = [r for r in await _participant_rows(db) if matches_text(r, PARTICIPANT_SEARCH_FIELDS, search)]
    return paginate(rows, page, size)


async def count_participants_overview(db: Database, search: Optional[str] = None):
    rows = await _participant_rows(db)
    return sum(1 for r in rows if matches_text(r, PARTICIPANT_SEARCH_FIELDS, search))


# ------------------ Dashboards ------------------
def _organizer_stats(db: Database):
    payments = list(db[PAYMENTS].find({}, {"campFees": 1}))
    return {
        "users": db[USERS].count_documents({}),
        "camps": db[CAMPS].count_documents({}),
        "payments": len(payments),
        "revenue": _fee_total(payments),
        "registrations": db[PARTICIPANTS].count_documents({}),
        "confirmed": db[PARTICIPANTS].count_documents(
            {"confirmationStatus": ConfirmationStatus.CONFIRMED.value}),
    }


def _participant_stats(db: Database, email: str):
    payments = list(db[PAYMENTS].find({"email": email}, {"campFees": 1}))
    return {
        "registrations": db[PARTICIPANTS].count_documents({"participantEmail": email}),
        "payments": len(payments),
        "totalPaid": _fee_total(payments),
        "confirmed": db[PARTICIPANTS].count_documents(
            {"participantEmail": email, "confirmationStatus": ConfirmationStatus.CONFIRMED.value}),
    }


async def get_organizer_stats(db: Database):
    return await in_thread(_organizer_stats, db)


async def get_participant_stats(db: Database, email: str):
    return await in_thread(_participant_stats, db, email)


# ------------------ Analytics ------------------
def _live_counts(db: Database, names: List[str]) -> Dict[str, int]:
    counts = {}
    for camp in db[CAMPS].find({"campName": {"$in": names}}, {"campName": 1, "participantCount": 1}).sort("_id", 1):
        counts.setdefault(camp["campName"], camp.get("participantCount") or 0)
    return counts


async def get_registration_analytics(db: Database, email: str):
    """The user's registrations with each camp's live participantCount.

    Camps are matched by campName, not by id.
    """
    registrations = await Repository(db, PARTICIPANTS).find_many({"participantEmail": email}, sort=[("_id", 1)])
    names = list({r.get("campName") for r in registrations if r.get("campName")})
    counts = await in_thread(_live_counts, db, names) if names else {}

    rows = []
    for registration in registrations:
        row = dict(registration)
        row["participantCount"] = counts.get(registration.get("campName"), 0)
        rows.append(row)
    return rows


# ------------------ Feedback summary ------------------
def _ratings(db: Database) -> List:
    return [doc.get("rating") for doc in db[FEEDBACKS].find({}, {"rating": 1})]


async def get_feedback_summary(db: Database):
    ratings = {str(star): 0 for star in range(1, 6)}
    total = 0
    for rating in await in_thread(_ratings, db):
        key = str(rating)
        if key in ratings:
            ratings[key] += 1
            total += int(key)
    count = sum(ratings.values())
    return {
        "count": count,
        "averageRating": round(total / count, 2) if count else 0,
        "ratings": ratings,
    }
