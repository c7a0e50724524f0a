from fastapi import APIRouter
from pydantic import BaseModel

from showroom.utils.responses import ApiResponse, success_response

router = APIRouter(tags=["Utilities"], prefix="/api")


class HealthResponse(BaseModel):
    status: str = 'ok'


@router.get("/health", response_model=ApiResponse[HealthResponse])
async def health():
    return success_response(HealthResponse(status="ok"))
