from pydantic import BaseModel, EmailStr, Field


class ImageRequest(BaseModel):
    email: EmailStr
    prompt: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
