import logging
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from showroom.mixins.orm import DeleteResponse
from showroom.models.vehicle import VehicleModel, VehicleType
from showroom.services.image_storage import ImageStorage, get_image_storage
from showroom.services.vehicle import VehicleCreate, VehicleService, VehicleUpdate, get_vehicle_service
from showroom.utils.exceptions import ValidationError
from showroom.utils.generate_schemas import generate_page_schema, generate_read_schema
from showroom.utils.get_current_user import require_admin
from showroom.utils.responses import ApiResponse, success_response
from showroom.utils.security import TokenPayload
from showroom.utils.vehicle_query import VehicleFilter

logger = logging.getLogger(__name__)

ReadSchema = generate_read_schema(VehicleModel)
PageSchema = generate_page_schema(VehicleModel, ReadSchema)

router = APIRouter(tags=["Vehicles"], prefix="/api/vehicles")


class UploadImagesResponse(BaseModel):
    filenames: list[str]


def _validate(schema: type[BaseModel], values: dict) -> BaseModel:
    try:
        return schema.model_validate(values)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise ValidationError(f"{field}: {error['msg']}")


@router.get("", response_model=ApiResponse[PageSchema])
def get_vehicles(
        type: Optional[VehicleType] = None,
        brand: Optional[str] = None,
        model: Optional[str] = None,
        color: Optional[str] = None,
        min_price: Optional[Decimal] = Query(None, alias="minPrice"),
        max_price: Optional[Decimal] = Query(None, alias="maxPrice"),
        min_year: Optional[int] = Query(None, alias="minYear"),
        max_year: Optional[int] = Query(None, alias="maxYear"),
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
        sort_by: str = Query("created_at", alias="sortBy"),
        sort_order: str = Query("DESC", alias="sortOrder"),
        service: VehicleService = Depends(get_vehicle_service),
):
    filters = VehicleFilter(
        type=type,
        brand=brand,
        model=model,
        color=color,
        min_price=min_price,
        max_price=max_price,
        min_year=min_year,
        max_year=max_year,
        search=search,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return success_response(service.get_vehicles(filters))


@router.post("/upload", response_model=ApiResponse[UploadImagesResponse])
def upload_images(
        images: Optional[list[UploadFile]] = File(None),
        user: TokenPayload = Depends(require_admin),
        storage: ImageStorage = Depends(get_image_storage),
):
    if not images or not any(image.filename for image in images):
        raise ValidationError("No images uploaded")
    return success_response(UploadImagesResponse(filenames=storage.save_all(images)))


@router.get("/{vehicle_id}", response_model=ApiResponse[ReadSchema])
def get_vehicle(vehicle_id: int, service: VehicleService = Depends(get_vehicle_service)):
    return success_response(service.get_vehicle(vehicle_id))


@router.post("", response_model=ApiResponse[ReadSchema], status_code=status.HTTP_201_CREATED)
def create_vehicle(
        type: str = Form(...),
        brand: str = Form(...),
        model: str = Form(...),
        color: str = Form(...),
        engine_size: str = Form(...),
        year: str = Form(...),
        price: str = Form(...),
        description: Optional[str] = Form(None),
        images: Optional[list[UploadFile]] = File(None),
        user: TokenPayload = Depends(require_admin),
        service: VehicleService = Depends(get_vehicle_service),
        storage: ImageStorage = Depends(get_image_storage),
):
    data: VehicleCreate = _validate(VehicleCreate, {
        "type": type,
        "brand": brand,
        "model": model,
        "color": color,
        "engine_size": engine_size,
        "year": year,
        "price": price,
        "description": description,
    })

    data.images = storage.save_all(images)
    try:
        return success_response(service.create_vehicle(data))
    except Exception:
        storage.delete_all(data.images)
        raise


@router.put("/{vehicle_id}", response_model=ApiResponse[ReadSchema])
def update_vehicle(
        vehicle_id: int,
        type: Optional[str] = Form(None),
        brand: Optional[str] = Form(None),
        model: Optional[str] = Form(None),
        color: Optional[str] = Form(None),
        engine_size: Optional[str] = Form(None),
        year: Optional[str] = Form(None),
        price: Optional[str] = Form(None),
        description: Optional[str] = Form(None),
        images: Optional[list[UploadFile]] = File(None),
        user: TokenPayload = Depends(require_admin),
        service: VehicleService = Depends(get_vehicle_service),
        storage: ImageStorage = Depends(get_image_storage),
):
    patch = _validate(VehicleUpdate, {
        "type": type,
        "brand": brand,
        "model": model,
        "color": color,
        "engine_size": engine_size,
        "year": year,
        "price": price,
        "description": description,
    })
    values = patch.model_dump(exclude_none=True)

    # fail fast on a missing vehicle before anything is stored
    service.get_vehicle(vehicle_id)

    # new uploads replace the image list, previous files stay where they are
    new_images = storage.save_all(images)
    if new_images:
        values["images"] = new_images

    try:
        return success_response(service.update_vehicle(vehicle_id, values))
    except Exception:
        storage.delete_all(new_images)
        raise


@router.delete("/{vehicle_id}", response_model=ApiResponse[DeleteResponse])
def delete_vehicle(
        vehicle_id: int,
        user: TokenPayload = Depends(require_admin),
        service: VehicleService = Depends(get_vehicle_service),
):
    return success_response(service.delete_vehicle(vehicle_id))
