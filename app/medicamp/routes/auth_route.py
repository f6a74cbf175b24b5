from fastapi import APIRouter, Request, Response
from pydantic import BaseModel, EmailStr

from medicamp.constant_file import AUTH_COOKIE_NAME, TOKEN_EXPIRE_HOURS
from medicamp.cryptography import issue_token

router = APIRouter()


class TokenRequest(BaseModel):
    email: EmailStr


# ----------------------- ISSUE TOKEN -----------------------
@router.post("/jwt-access", response_description="Issue a session token")
async def jwt_access(request: Request, response: Response, body: TokenRequest):
    token = issue_token({"email": body.email}, request.app.state.token_secret)
    if AUTH_COOKIE_NAME:
        response.set_cookie(
            AUTH_COOKIE_NAME, token,
            max_age=TOKEN_EXPIRE_HOURS * 3600,
            httponly=True, secure=True, samesite="none",
        )
    return {"token": token}


__all__ = ["router"]
