from fastapi import APIRouter, Depends, HTTPException, status
from pymongo.database import Database

from medicamp.controller.image_controller import add_generated_image, retrieve_images
from medicamp.database import get_db
from medicamp.models.image_model import ImageRequest
from medicamp.security import FORBIDDEN, Identity, verify_owner, verify_token

router = APIRouter()


@router.get("/ai-images/{email}", response_description="Images generated by the user")
async def get_ai_images(email: str, db: Database = Depends(get_db), _: Identity = Depends(verify_owner)):
    return await retrieve_images(db, email)


@router.post("/generate", response_description="Generate, host and store an image")
async def generate_image(body: ImageRequest, db: Database = Depends(get_db),
                         identity: Identity = Depends(verify_token)):
    if body.email != identity.email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN)
    return await add_generated_image(db, body.email, body.prompt, body.category)


__all__ = ["router"]
