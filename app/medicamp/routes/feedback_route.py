from fastapi import APIRouter, Depends, HTTPException, status
from pymongo.database import Database

from medicamp.controller.feedback_controller import add_feedback_controller, retrieve_feedbacks_controller
from medicamp.controller.report_controller import get_feedback_summary
from medicamp.database import get_db
from medicamp.models.feedback_model import FeedbackCreate
from medicamp.security import FORBIDDEN, Identity, verify_token

router = APIRouter()


@router.get("/feedbacks", response_description="All feedback, newest first")
async def get_feedbacks(db: Database = Depends(get_db)):
    return await retrieve_feedbacks_controller(db)


@router.post("/feedbacks", response_description="Leave feedback")
async def add_feedback(feedback: FeedbackCreate, db: Database = Depends(get_db),
                       identity: Identity = Depends(verify_token)):
    if feedback.email != identity.email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN)
    return await add_feedback_controller(db, feedback.model_dump())


@router.get("/feedback-data", response_description="Rating summary")
async def get_feedback_data(db: Database = Depends(get_db)):
    return await get_feedback_summary(db)


__all__ = ["router"]
