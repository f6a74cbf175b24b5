from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional


# Payment records go through Pending only while the registration is being flipped
PAYMENT_PENDING = "Pending"


class PaymentCreate(BaseModel):
    email: EmailStr
    campId: str = Field(..., description="Id of the registration being paid for")
    campName: str
    campFees: str
    transactionId: str
    date: Optional[str] = None

    @field_validator("campFees", mode="before")
    @classmethod
    def fees_as_text(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class PaymentIntentRequest(BaseModel):
    price: float = Field(..., gt=0)
