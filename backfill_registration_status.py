"""
Migration script to add paymentStatus and confirmationStatus to
registrations created before both fields existed
"""
import sys
import os

# Add the app directory to the path
app_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'app')
sys.path.insert(0, app_dir)

from medicamp.constant_file import PARTICIPANTS
from medicamp.database import connect
from medicamp.models.participant_model import ConfirmationStatus, PaymentStatus

def backfill_registration_status(db):
    """Default missing statuses to Unpaid / Pending, leave existing values alone"""
    payment = db[PARTICIPANTS].update_many(
        {"paymentStatus": {"$exists": False}},
        {"$set": {"paymentStatus": PaymentStatus.UNPAID.value}},
    )
    confirmation = db[PARTICIPANTS].update_many(
        {"confirmationStatus": {"$exists": False}},
        {"$set": {"confirmationStatus": ConfirmationStatus.PENDING.value}},
    )
    print(f"paymentStatus set on {payment.modified_count} registrations.")
    print(f"confirmationStatus set on {confirmation.modified_count} registrations.")
    return payment.modified_count, confirmation.modified_count

if __name__ == "__main__":
    try:
        backfill_registration_status(connect())
        print("✅ Migration completed successfully!")
    except Exception as e:
        print(f"❌ Migration failed: {str(e)}")
        sys.exit(1)
