from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from pymongo.database import Database

from medicamp.constant_file import MAX_PAGE, MAX_PAGE_SIZE
from medicamp.controller.camp_controller import *
from medicamp.database import get_db
from medicamp.models.camp_model import CampCreate
from medicamp.schema.camp_schema import CampUpdate
from medicamp.security import Identity, verify_organizer

router = APIRouter()


def _camp_not_found(camp_id: str):
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Camp with id {camp_id} does not exist.")


# ----------------------- LIST CAMPS -----------------------
@router.get("/camps", response_description="Search, sort and page camps")
async def get_camps(
    search: Optional[str] = None,
    sorted: Optional[str] = Query(None, description="participantCount | fees | campName"),
    page: int = Query(0, ge=0, le=MAX_PAGE),
    size: int = Query(0, ge=0, le=MAX_PAGE_SIZE),
    db: Database = Depends(get_db),
):
    return await retrieve_camps(db, search, sorted, page, size)


@router.get("/camps-count", response_description="Number of camps matching a search")
async def get_camps_count(search: Optional[str] = None, db: Database = Depends(get_db)):
    return {"count": await count_camps(db, search)}


@router.get("/popular-camps", response_description="Most registered camps")
async def get_popular_camps(db: Database = Depends(get_db)):
    return await retrieve_popular_camps(db)


@router.get("/affordable-camps", response_description="Cheapest camps")
async def get_affordable_camps(db: Database = Depends(get_db)):
    return await retrieve_affordable_camps(db)


@router.get("/camp/{camp_id}", response_description="Retrieve a camp")
async def get_camp(camp_id: str, db: Database = Depends(get_db)):
    camp = await retrieve_camp(db, camp_id)
    if not camp:
        raise _camp_not_found(camp_id)
    return camp


# ----------------------- ADD CAMP -----------------------
@router.post("/camps", response_description="Add camp")
async def add_camp_data(camp: CampCreate, db: Database = Depends(get_db),
                        identity: Identity = Depends(verify_organizer)):
    camp_data = camp.model_dump()
    camp_data["organizerEmail"] = camp_data.get("organizerEmail") or identity.email
    return await add_camp(db, camp_data)


# ----------------------- UPDATE CAMP -----------------------
@router.put("/update-camp/{camp_id}", response_description="Update camp details")
async def update_camp_data(camp_id: str, update_data: CampUpdate = Body(...),
                           db: Database = Depends(get_db),
                           _: Identity = Depends(verify_organizer)):
    update_dict = update_data.model_dump(exclude_none=True)
    if not update_dict:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Request body cannot be empty.")
    result = await update_camp(db, camp_id, update_dict)
    if result is None:
        raise _camp_not_found(camp_id)
    return result


# ----------------------- DELETE CAMP -----------------------
@router.delete("/delete-camp/{camp_id}", response_description="Delete camp")
async def delete_camp_data(camp_id: str, db: Database = Depends(get_db),
                           _: Identity = Depends(verify_organizer)):
    result = await delete_camp(db, camp_id)
    if result is None:
        raise _camp_not_found(camp_id)
    return result


__all__ = ["router"]
