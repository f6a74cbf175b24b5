from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class FeedbackCreate(BaseModel):
    email: EmailStr
    name: Optional[str] = None
    image: Optional[str] = None
    rating: int = Field(..., ge=1, le=5)
    feedback: str = Field(..., min_length=1)
    campName: Optional[str] = None
    # parsed so that feedback sorts by instant, not by the text the client sent
    date: Optional[datetime] = None
