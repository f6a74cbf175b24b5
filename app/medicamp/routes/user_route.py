from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from pymongo.database import Database

from medicamp.controller.user_controller import *
from medicamp.database import get_db
from medicamp.models.user_model import Role, UserCreate
from medicamp.schema.user_schema import ProfileUpdate
from medicamp.security import Identity, verify_organizer, verify_owner, verify_token

router = APIRouter()


# ----------------------- GET ALL USERS -----------------------
@router.get("/users", response_description="Retrieve all users")
async def get_users(search: Optional[str] = None, db: Database = Depends(get_db),
                    _: Identity = Depends(verify_organizer)):
    return await retrieve_users(db, search)


# ----------------------- ADD USER -----------------------
@router.post("/users", response_description="Add user on first sign in")
async def add_user_data(user: UserCreate, db: Database = Depends(get_db)):
    return await add_user(db, jsonable_encoder(user, exclude_none=True))


# ----------------------- ROLE CHECKS -----------------------
@router.get("/user/organizer/{email}", response_description="Is the user an organizer")
async def check_organizer(email: str, db: Database = Depends(get_db),
                          _: Identity = Depends(verify_owner)):
    return {"organizer": await has_role(db, email, Role.ORGANIZER)}


@router.get("/user/participant/{email}", response_description="Is the user a participant")
async def check_participant(email: str, db: Database = Depends(get_db),
                            _: Identity = Depends(verify_owner)):
    return {"participant": await has_role(db, email, Role.PARTICIPANT)}


# ----------------------- PROFILE -----------------------
@router.get("/organizer/{email}", response_description="Retrieve a profile")
async def get_profile(email: str, db: Database = Depends(get_db),
                      _: Identity = Depends(verify_token)):
    user = await retrieve_user_by_email(db, email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User with email {email} does not exist.")
    return user


async def _update_profile(request: Request, db: Database, user_id: str, email: str, update_data: ProfileUpdate):
    update_dict = update_data.model_dump(exclude_none=True)
    if not update_dict:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Request body cannot be empty.")

    result = await update_profile(db, user_id, email, update_dict)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No profile {user_id} for {email}.")
    request.app.state.role_cache.invalidate(email)
    return result


@router.patch("/organizer/update-profile/{user_id}", response_description="Update organizer profile")
async def update_organizer_profile(request: Request, user_id: str,
                                   update_data: ProfileUpdate = Body(...),
                                   db: Database = Depends(get_db),
                                   identity: Identity = Depends(verify_organizer)):
    return await _update_profile(request, db, user_id, identity.email, update_data)


@router.patch("/participant/update-profile/{user_id}", response_description="Update participant profile")
async def update_participant_profile(request: Request, user_id: str,
                                     update_data: ProfileUpdate = Body(...),
                                     db: Database = Depends(get_db),
                                     identity: Identity = Depends(verify_token)):
    return await _update_profile(request, db, user_id, identity.email, update_data)


__all__ = ["router"]
