from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from showroom.models.vehicle import CRITICAL_FIELDS
from showroom.services.ai_description import AIDescriptionService, VehicleDescriptionInput, get_ai_service
from showroom.services.vehicle import VehicleService, get_vehicle_service
from showroom.utils.exceptions import ValidationError
from showroom.utils.get_current_user import require_admin
from showroom.utils.responses import ApiResponse, success_response
from showroom.utils.security import TokenPayload

router = APIRouter(tags=["AI"], prefix="/api/ai")


class DescriptionResponse(BaseModel):
    description: str


@router.post("/generate-description", response_model=ApiResponse[DescriptionResponse])
def generate_description(
        vehicle_data: dict[str, Any] = Body(...),
        user: TokenPayload = Depends(require_admin),
        ai: AIDescriptionService = Depends(get_ai_service),
):
    for field in CRITICAL_FIELDS:
        if vehicle_data.get(field) in (None, ""):
            raise ValidationError(f"{field} is required")

    try:
        vehicle = VehicleDescriptionInput.model_validate(vehicle_data)
    except PydanticValidationError as e:
        error = e.errors()[0]
        raise ValidationError(f"{error['loc'][0]}: {error['msg']}")

    return success_response(DescriptionResponse(description=ai.generate_description(vehicle)))


@router.post("/regenerate-description/{vehicle_id}", response_model=ApiResponse[DescriptionResponse])
def regenerate_description(
        vehicle_id: int,
        user: TokenPayload = Depends(require_admin),
        service: VehicleService = Depends(get_vehicle_service),
):
    return success_response(DescriptionResponse(description=service.regenerate_description(vehicle_id)))
