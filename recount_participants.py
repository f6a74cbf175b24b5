"""
Script to recompute participantCount for every camp
Registrations only ever increment the counter and cancellations never
decrement it, so run this to bring the counters back to the number of
registrations that still exist
"""
import sys
import os

# Add the app directory to the path
app_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'app')
sys.path.insert(0, app_dir)

from medicamp.constant_file import CAMPS, PARTICIPANTS
from medicamp.database import connect

def recount_participants(db):
    """Set each camp's participantCount to its live registration count"""
    counts = {}
    for registration in db[PARTICIPANTS].find({}, {"campId": 1}):
        camp_id = str(registration.get("campId"))
        counts[camp_id] = counts.get(camp_id, 0) + 1

    updated_count = 0
    camps = list(db[CAMPS].find({}, {"participantCount": 1}))
    for camp in camps:
        live = counts.get(str(camp["_id"]), 0)
        if camp.get("participantCount") != live:
            db[CAMPS].update_one({"_id": camp["_id"]}, {"$set": {"participantCount": live}})
            updated_count += 1

    print(f"Recounted {updated_count} camps out of {len(camps)} total camps.")
    return updated_count

if __name__ == "__main__":
    print("Starting to recount participants...")
    try:
        count = recount_participants(connect())
        print(f"✅ Completed! {count} camps have a corrected participantCount.")
    except Exception as e:
        print(f"❌ Failed to recount participants: {str(e)}")
        sys.exit(1)
