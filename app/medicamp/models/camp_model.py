from pydantic import BaseModel, Field, field_validator
from typing import Optional


class CampCreate(BaseModel):
    campName: str = Field(..., min_length=1)
    image: Optional[str] = None
    fees: str = Field(..., description="Camp fee, kept as text")
    dateTime: str
    location: str
    professionalName: str
    description: Optional[str] = ""
    organizerEmail: Optional[str] = None

    @field_validator("fees", mode="before")
    @classmethod
    def fees_as_text(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v
