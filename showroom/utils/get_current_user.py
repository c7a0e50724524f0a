from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jwt import PyJWTError
from pydantic import ValidationError as PydanticValidationError

from showroom.models.user import UserRole
from showroom.utils.exceptions import AuthenticationError, AuthorizationError, credentials_exception
from showroom.utils.security import TokenPayload, decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)


def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> TokenPayload:
    # verification is stateless, the claims are trusted until the token expires
    if token is None:
        raise AuthenticationError("Access token required")

    try:
        return decode_access_token(token)
    except (PyJWTError, PydanticValidationError):
        raise credentials_exception


def require_admin(user: TokenPayload = Depends(get_current_user)) -> TokenPayload:
    if user.role != UserRole.admin.value:
        raise AuthorizationError("Admin access required")
    return user
