from pydantic import BaseModel
from typing import Optional

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    image: Optional[str] = None
    contact: Optional[str] = None

    class Config:
        extra = "ignore"
