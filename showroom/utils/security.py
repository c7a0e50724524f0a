from datetime import datetime, timedelta, UTC

import jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from constants import ACCESS_TOKEN_EXPIRE_MINUTES, APP_SECRET, AUTH_ALGORITHM

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenPayload(BaseModel):
    id: int
    username: str
    role: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(payload: TokenPayload, expires_delta: timedelta = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = payload.model_dump()
    claims["exp"] = datetime.now(UTC) + expires_delta
    return jwt.encode(claims, APP_SECRET, algorithm=AUTH_ALGORITHM)


def decode_access_token(token: str) -> TokenPayload:
    """Raises jwt.PyJWTError on a bad signature or an expired token."""
    claims = jwt.decode(token, APP_SECRET, algorithms=[AUTH_ALGORITHM])
    return TokenPayload(**claims)
