import logging
from datetime import datetime, timezone

from pymongo.database import Database
from pymongo.errors import PyMongoError

from medicamp.constant_file import PAYMENTS
from medicamp.controller.participant_controller import mark_registration_paid
from medicamp.database import Repository, to_object_id
from medicamp.models.participant_model import PaymentStatus
from medicamp.models.payment_model import PAYMENT_PENDING
from medicamp.response_model import StepReport

logger = logging.getLogger(__name__)

PAYMENT_STEPS = ["insertPayment", "markRegistrationPaid", "markPaymentPaid"]


# ------------------ Add New Payment ------------------
async def add_payment_controller(db: Database, payment_data: dict) -> StepReport:
    """Store the payment and flip both statuses to Paid.

    The three writes are independent; the report tells the caller which of
    them went through.
    """
    report = StepReport(PAYMENT_STEPS)
    payments = Repository(db, PAYMENTS)

    payment = dict(payment_data)
    payment["paymentStatus"] = PAYMENT_PENDING
    payment["date"] = payment.get("date") or datetime.now(timezone.utc).isoformat()

    try:
        inserted = await payments.insert_one(payment)
    except PyMongoError:
        logger.exception("Could not store payment %s", payment["transactionId"])
        report.fail("insertPayment", "payment could not be stored")
        return report
    report.inserted_id = inserted["insertedId"]
    report.record("insertPayment", inserted)

    try:
        flipped = await mark_registration_paid(db, payment["campId"])
    except PyMongoError:
        logger.exception("Payment %s stored but registration %s not updated",
                         report.inserted_id, payment["campId"])
        report.fail("markRegistrationPaid", "registration could not be updated")
        return report
    if not flipped["matchedCount"]:
        logger.warning("Payment %s stored for missing registration %s", report.inserted_id, payment["campId"])
        report.fail("markRegistrationPaid", "registration not found")
        return report
    report.record("markRegistrationPaid", flipped)

    try:
        settled = await payments.update_one(
            {"_id": to_object_id(report.inserted_id)},
            {"$set": {"paymentStatus": PaymentStatus.PAID.value}},
        )
    except PyMongoError:
        logger.exception("Payment %s could not be marked paid", report.inserted_id)
        report.fail("markPaymentPaid", "payment status could not be updated")
        return report
    report.record("markPaymentPaid", settled)

    logger.info("Payment %s settled for registration %s", report.inserted_id, payment["campId"])
    return report
