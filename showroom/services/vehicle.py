import logging
from decimal import Decimal
from typing import Optional

from fastapi import Depends
from pydantic import BaseModel, Field

from showroom.mixins.orm import DeleteResponse
from showroom.models.vehicle import CRITICAL_FIELDS, VehicleModel, VehicleType
from showroom.repositories.vehicle import VehicleRepository, get_vehicle_repository
from showroom.services.ai_description import AIDescriptionService, VehicleDescriptionInput, get_ai_service
from showroom.services.image_storage import ImageStorage, get_image_storage
from showroom.utils.exceptions import NotFoundError
from showroom.utils.vehicle_query import VehicleFilter, count_pages

logger = logging.getLogger(__name__)


class VehicleCreate(BaseModel):
    type: VehicleType
    brand: str = Field(min_length=1, max_length=50)
    model: str = Field(min_length=1, max_length=100)
    color: str = Field(min_length=1, max_length=30)
    engine_size: str = Field(min_length=1, max_length=20)
    year: int
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    description: Optional[str] = None
    images: list[str] = []

    def description_input(self) -> VehicleDescriptionInput:
        return VehicleDescriptionInput(**self.model_dump(include=set(CRITICAL_FIELDS)))


class VehicleUpdate(BaseModel):
    """Partial update, same limits as VehicleCreate. Fields left as None are not touched."""
    type: Optional[VehicleType] = None
    brand: Optional[str] = Field(None, min_length=1, max_length=50)
    model: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, min_length=1, max_length=30)
    engine_size: Optional[str] = Field(None, min_length=1, max_length=20)
    year: Optional[int] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    description: Optional[str] = None


class VehicleService:
    def __init__(self, repository: VehicleRepository, ai: AIDescriptionService, storage: ImageStorage):
        self.repository = repository
        self.ai = ai
        self.storage = storage

    def create_vehicle(self, data: VehicleCreate) -> VehicleModel:
        # never blocks creation, the ai service falls back to template text
        ai_description = self.ai.generate_description(data.description_input())
        return self.repository.create({**data.model_dump(), "ai_description": ai_description})

    def get_vehicles(self, filters: VehicleFilter) -> dict:
        total, items = self.repository.count_and_list(filters)
        return {
            "items": items,
            "currentPage": filters.page,
            "totalPages": count_pages(total, filters.limit),
            "totalItems": total,
            "limit": filters.limit,
        }

    def get_vehicle(self, vehicle_id: int) -> VehicleModel:
        vehicle = self.repository.find_by_id(vehicle_id)
        if not vehicle:
            raise NotFoundError("Vehicle not found")
        return vehicle

    def update_vehicle(self, vehicle_id: int, values: dict) -> VehicleModel:
        """
        Apply a partial update. Keys that are absent or None are left alone.
        The AI description is regenerated from the merged values when one of
        the critical fields changes, and stored in the same update.
        """
        vehicle = self.get_vehicle(vehicle_id)
        values = {key: value for key, value in values.items() if value is not None}

        if self._critical_fields_changed(vehicle, values):
            merged = vehicle.description_fields()
            merged.update({field: values[field] for field in CRITICAL_FIELDS if field in values})
            values["ai_description"] = self.ai.generate_description(VehicleDescriptionInput(**merged))

        return self.repository.update(vehicle, values)

    def delete_vehicle(self, vehicle_id: int) -> DeleteResponse:
        vehicle = self.get_vehicle(vehicle_id)
        images = list(vehicle.images or [])

        # row first, then files; a file that fails to go is only logged
        self.repository.delete(vehicle)
        deleted = self.storage.delete_all(images)
        if deleted < len(images):
            logger.warning(f"Vehicle {vehicle_id} deleted, {len(images) - deleted} image(s) left behind")

        return DeleteResponse(message="Vehicle deleted successfully")

    def regenerate_description(self, vehicle_id: int) -> str:
        vehicle = self.get_vehicle(vehicle_id)
        description = self.ai.generate_description(VehicleDescriptionInput(**vehicle.description_fields()))
        self.repository.update(vehicle, {"ai_description": description})
        return description

    @staticmethod
    def _critical_fields_changed(vehicle: VehicleModel, values: dict) -> bool:
        return any(
            field in values and values[field] != getattr(vehicle, field)
            for field in CRITICAL_FIELDS
        )


def get_vehicle_service(
        repository: VehicleRepository = Depends(get_vehicle_repository),
        ai: AIDescriptionService = Depends(get_ai_service),
        storage: ImageStorage = Depends(get_image_storage),
) -> VehicleService:
    return VehicleService(repository, ai, storage)
