import logging

from fastapi import Depends
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from constants import MIN_PASSWORD_LENGTH
from showroom.models.user import UserModel, UserRole
from showroom.repositories.user import UserRepository, get_user_repository
from showroom.utils.exceptions import AuthenticationError, ValidationError
from showroom.utils.security import TokenPayload, create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


class TokenResponse(BaseModel):
    token: str
    user: TokenPayload


class AuthService:
    def __init__(self, users: UserRepository):
        self.users = users

    def login(self, username: str, password: str) -> TokenResponse:
        user = self.users.find_by_username(username)
        # same error for unknown user and wrong password
        if not user or not verify_password(password, user.password_hash):
            logger.info(f"Failed login attempt for username {username}")
            raise AuthenticationError(INVALID_CREDENTIALS)

        return self._issue_token(user)

    def register(self, username: str, password: str) -> TokenResponse:
        self._check_username_available(username)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

        user = self._create_user(username, password, UserRole.user)
        return self._issue_token(user)

    def create_admin(self, username: str, password: str) -> UserModel:
        self._check_username_available(username)
        user = self._create_user(username, password, UserRole.admin)
        logger.info(f"Admin user {username} created")
        return user

    def _check_username_available(self, username: str):
        if self.users.find_by_username(username):
            raise ValidationError("Username already exists")

    def _create_user(self, username: str, password: str, role: UserRole) -> UserModel:
        try:
            return self.users.create(username, hash_password(password), role)
        except IntegrityError:
            # lost a race against a concurrent registration with the same name
            raise ValidationError("Username already exists")

    @staticmethod
    def _issue_token(user: UserModel) -> TokenResponse:
        payload = TokenPayload(id=user.id, username=user.username, role=user.role.value)
        return TokenResponse(token=create_access_token(payload), user=payload)


def get_auth_service(users: UserRepository = Depends(get_user_repository)) -> AuthService:
    return AuthService(users)
