from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pymongo.database import Database

from medicamp.constant_file import MAX_PAGE, MAX_PAGE_SIZE
from medicamp.controller.camp_controller import increment_participant_count, retrieve_camp
from medicamp.controller.participant_controller import *
from medicamp.controller.report_controller import count_participants_overview, retrieve_participants_overview
from medicamp.controller.user_controller import has_role
from medicamp.database import get_db
from medicamp.models.participant_model import ParticipantCreate, PaymentStatus
from medicamp.models.user_model import Role
from medicamp.security import FORBIDDEN, Identity, verify_organizer, verify_owner, verify_token

router = APIRouter()


async def _load_own_registration(db: Database, registration_id: str, identity: Identity):
    """Registration `registration_id`, visible to its participant and to organizers."""
    registration = await retrieve_participant_controller(db, registration_id)
    if not registration:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                            detail=f"Registration with id {registration_id} does not exist.")
    if registration.get("participantEmail") != identity.email and not await has_role(db, identity.email, Role.ORGANIZER):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN)
    return registration


# ----------------------- Organizer listing -----------------------
@router.get("/participants", response_description="All registrations with their payments")
async def get_participants(
    search: Optional[str] = None,
    page: int = Query(0, ge=0, le=MAX_PAGE),
    size: int = Query(0, ge=0, le=MAX_PAGE_SIZE),
    db: Database = Depends(get_db),
    _: Identity = Depends(verify_organizer),
):
    return await retrieve_participants_overview(db, search, page, size)


@router.get("/participants-count", response_description="Number of registrations matching a search")
async def get_participants_count(search: Optional[str] = None, db: Database = Depends(get_db),
                                 _: Identity = Depends(verify_organizer)):
    return {"count": await count_participants_overview(db, search)}


# ----------------------- Participant views -----------------------
@router.get("/registered-camps/{email}", response_description="Camps the user registered for")
async def get_registered_camps(
    email: str,
    search: Optional[str] = None,
    page: int = Query(0, ge=0, le=MAX_PAGE),
    size: int = Query(0, ge=0, le=MAX_PAGE_SIZE),
    db: Database = Depends(get_db),
    _: Identity = Depends(verify_owner),
):
    return await retrieve_registered_camps(db, email, search, page, size)


@router.get("/participant/{registration_id}", response_description="Get registration")
async def get_participant(registration_id: str, db: Database = Depends(get_db),
                          identity: Identity = Depends(verify_token)):
    return await _load_own_registration(db, registration_id, identity)


# ----------------------- Add Participant -----------------------
@router.post("/participants", response_description="Register for a camp")
async def add_participant(participant: ParticipantCreate, db: Database = Depends(get_db),
                          identity: Identity = Depends(verify_token)):
    if participant.participantEmail != identity.email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN)
    if not await retrieve_camp(db, participant.campId):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                            detail=f"Camp with id {participant.campId} does not exist.")
    report = await add_participant_controller(db, jsonable_encoder(participant))
    if not report.completed:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=report.to_dict())
    return report.to_dict()


@router.patch("/participant-count/{camp_id}", response_description="Count one more participant")
async def update_participant_count(camp_id: str, db: Database = Depends(get_db),
                                   _: Identity = Depends(verify_token)):
    result = await increment_participant_count(db, camp_id)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Camp with id {camp_id} does not exist.")
    return result


# ----------------------- Organizer actions -----------------------
@router.patch("/confirmation-status/{registration_id}", response_description="Confirm registration")
async def confirm_registration(registration_id: str, db: Database = Depends(get_db),
                               _: Identity = Depends(verify_organizer)):
    result = await confirm_registration_controller(db, registration_id)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                            detail=f"Registration with id {registration_id} does not exist.")
    return result


# ----------------------- Cancel -----------------------
@router.delete("/cancel-registration/{registration_id}", response_description="Cancel registration")
async def cancel_registration(registration_id: str, db: Database = Depends(get_db),
                              identity: Identity = Depends(verify_token)):
    registration = await _load_own_registration(db, registration_id, identity)
    if registration.get("paymentStatus") == PaymentStatus.PAID.value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail="Paid registrations cannot be cancelled.")
    return await cancel_registration_controller(db, registration_id)


__all__ = ["router"]
