"""
Access gates for the HTTP layer.

``verify_token`` authenticates the caller from a bearer token (or the session
cookie when ``AUTH_COOKIE_NAME`` is configured). ``verify_organizer`` then
looks the caller up in the users collection and requires the Organizer role.
``verify_owner`` restricts email-scoped routes to the caller's own records.
All three raise before the wrapped handler runs and never write anything.
"""
import logging
import time
from typing import Dict, Optional, Tuple

from fastapi import Depends, HTTPException, Request, status
from pydantic import BaseModel
from pymongo.database import Database

from medicamp.constant_file import AUTH_COOKIE_NAME, USERS
from medicamp.cryptography import TokenError, verify_token as decode_token
from medicamp.database import get_db, in_thread
from medicamp.models.user_model import Role

logger = logging.getLogger(__name__)

UNAUTHORIZED = "unauthorized access"
FORBIDDEN = "forbidden access"


class Identity(BaseModel):
    email: str


class RoleCache:
    """Per-email role memo. A ttl of 0 turns it off."""

    def __init__(self, ttl: float = 0):
        self.ttl = ttl
        self._entries: Dict[str, Tuple[str, float]] = {}

    def get(self, email: str) -> Optional[str]:
        if not self.ttl:
            return None
        entry = self._entries.get(email)
        if not entry:
            return None
        role, expires_at = entry
        if expires_at < time.monotonic():
            self._entries.pop(email, None)
            return None
        return role

    def set(self, email: str, role: str):
        if self.ttl and role:
            now = time.monotonic()
            # drop every expired entry, not only the one being replaced
            self._entries = {k: v for k, v in self._entries.items() if v[1] >= now}
            self._entries[email] = (role, now + self.ttl)

    def __len__(self) -> int:
        return len(self._entries)

    def invalidate(self, email: Optional[str] = None):
        if email is None:
            self._entries.clear()
        else:
            self._entries.pop(email, None)


def _extract_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization")
    if header:
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()
    if AUTH_COOKIE_NAME:
        return request.cookies.get(AUTH_COOKIE_NAME)
    return None


# ----------------------- Authenticate -----------------------
async def verify_token(request: Request) -> Identity:
    token = _extract_token(request)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=UNAUTHORIZED)
    try:
        claims = decode_token(token, request.app.state.token_secret)
    except TokenError as e:
        logger.info("Rejected token on %s %s: %s", request.method, request.url.path, e)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=UNAUTHORIZED)

    request.state.email = claims["email"]
    return Identity(email=claims["email"])


# ----------------------- Authorize -----------------------
async def verify_organizer(
    request: Request,
    identity: Identity = Depends(verify_token),
    db: Database = Depends(get_db),
) -> Identity:
    cache: RoleCache = request.app.state.role_cache
    role = cache.get(identity.email)
    if role is None:
        user = await in_thread(db[USERS].find_one, {"email": identity.email}, {"role": 1})
        role = user.get("role") if user else None
        cache.set(identity.email, role)

    if role != Role.ORGANIZER.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN)
    return identity


async def verify_owner(email: str, identity: Identity = Depends(verify_token)) -> Identity:
    if identity.email != email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN)
    return identity
