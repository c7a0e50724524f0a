from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope of every successful JSON answer: {"success": true, "data": ...}."""
    success: bool = True
    data: Optional[T] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


def success_response(data: Any = None) -> dict:
    # left as a dict so the route's response_model validates ORM objects from attributes
    return {"success": True, "data": data}


def error_response(message: str) -> dict:
    return ErrorResponse(error=message).model_dump()
