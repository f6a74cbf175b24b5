from enum import Enum
from pydantic import BaseModel, EmailStr
from typing import Optional


class Role(str, Enum):
    ORGANIZER = "Organizer"
    PARTICIPANT = "Participant"


class UserCreate(BaseModel):
    email: EmailStr
    name: Optional[str] = None
    image: Optional[str] = None
    contact: Optional[str] = None
