from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from showroom.services.auth import AuthService, TokenResponse, get_auth_service
from showroom.utils.exceptions import ValidationError
from showroom.utils.get_current_user import get_current_user
from showroom.utils.responses import ApiResponse, MessageResponse, success_response
from showroom.utils.security import TokenPayload

router = APIRouter(tags=["Authentication"], prefix="/api/auth")


class CredentialsSubmission(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

    def require(self) -> tuple[str, str]:
        if not self.username or not self.password:
            raise ValidationError("Username and password required")
        return self.username, self.password


@router.post("/login", response_model=ApiResponse[TokenResponse])
def login(input: CredentialsSubmission, auth: AuthService = Depends(get_auth_service)):
    username, password = input.require()
    return success_response(auth.login(username, password))


@router.post("/register", response_model=ApiResponse[TokenResponse], status_code=status.HTTP_201_CREATED)
def register(input: CredentialsSubmission, auth: AuthService = Depends(get_auth_service)):
    username, password = input.require()
    return success_response(auth.register(username, password))


# bootstrap only, keep it behind the network edge in production
@router.post("/create-admin", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_admin(input: CredentialsSubmission, auth: AuthService = Depends(get_auth_service)):
    username, password = input.require()
    auth.create_admin(username, password)
    return MessageResponse(message="Admin user created successfully")


@router.get("/me", response_model=ApiResponse[TokenPayload])
def get_me(user: TokenPayload = Depends(get_current_user)):
    return success_response(user)
