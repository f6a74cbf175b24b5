from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from medicamp.constant_file import ACCESS_TOKEN_SECRET, TOKEN_ALGORITHM, TOKEN_EXPIRE_HOURS


class TokenError(Exception):
    """Malformed, expired, badly signed or claim-less session token."""


def issue_token(claims: dict, secret: str = ACCESS_TOKEN_SECRET,
                expires_hours: int = TOKEN_EXPIRE_HOURS) -> str:
    to_encode = {"email": claims["email"]}
    expire = datetime.now(timezone.utc) + timedelta(hours=expires_hours)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, secret, algorithm=TOKEN_ALGORITHM)


def verify_token(token: str, secret: str = ACCESS_TOKEN_SECRET) -> dict:
    try:
        payload = jwt.decode(token, secret, algorithms=[TOKEN_ALGORITHM])
    except JWTError as e:
        raise TokenError(str(e))
    if not payload.get("email"):
        raise TokenError("token carries no email claim")
    return payload
