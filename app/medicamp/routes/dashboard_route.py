from fastapi import APIRouter, Depends
from pymongo.database import Database

from medicamp.controller.report_controller import (get_organizer_stats, get_participant_stats,
                                                   get_registration_analytics)
from medicamp.database import get_db
from medicamp.security import Identity, verify_organizer, verify_owner

router = APIRouter()


@router.get("/organizer-stats", response_description="Organizer dashboard figures")
async def organizer_stats(db: Database = Depends(get_db), _: Identity = Depends(verify_organizer)):
    return await get_organizer_stats(db)


@router.get("/participant-stats/{email}", response_description="Participant dashboard figures")
async def participant_stats(email: str, db: Database = Depends(get_db), _: Identity = Depends(verify_owner)):
    return await get_participant_stats(db, email)


@router.get("/analytics/{email}", response_description="Registrations with live camp counts")
async def registration_analytics(email: str, db: Database = Depends(get_db), _: Identity = Depends(verify_owner)):
    return await get_registration_analytics(db, email)


__all__ = ["router"]
