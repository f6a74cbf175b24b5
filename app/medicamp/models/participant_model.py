from enum import Enum
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional


class PaymentStatus(str, Enum):
    UNPAID = "Unpaid"
    PAID = "Paid"


class ConfirmationStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"


class ParticipantCreate(BaseModel):
    campId: str
    campName: str
    campFees: str
    location: Optional[str] = None
    professionalName: Optional[str] = None
    participantName: str
    participantEmail: EmailStr
    age: Optional[int] = Field(None, ge=0)
    phone: Optional[str] = None
    gender: Optional[str] = None
    emergencyContact: Optional[str] = None

    @field_validator("campFees", mode="before")
    @classmethod
    def fees_as_text(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v
