from pydantic import BaseModel, field_validator
from typing import Optional

class CampUpdate(BaseModel):
    campName: Optional[str] = None
    image: Optional[str] = None
    fees: Optional[str] = None
    dateTime: Optional[str] = None
    location: Optional[str] = None
    professionalName: Optional[str] = None
    description: Optional[str] = None

    class Config:
        extra = "ignore"

    @field_validator("fees", mode="before")
    @classmethod
    def fees_as_text(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v
