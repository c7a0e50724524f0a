from datetime import UTC, datetime, timedelta
from itertools import count
from typing import Optional

from showroom.models.vehicle import VehicleModel
from showroom.services.ai_description import VehicleDescriptionInput
from showroom.utils.vehicle_query import SEARCHABLE_FIELDS, SUBSTRING_FIELDS, VehicleFilter, build_order_by, get_offset


class InMemoryVehicleRepository:
    """Keeps vehicles in a dict, mirrors the SQLAlchemy repository contract."""

    def __init__(self):
        self.vehicles: dict[int, VehicleModel] = {}
        self.deleted: list[int] = []
        self._ids = count(1)
        self._clock = datetime(2024, 1, 1, tzinfo=UTC)

    def find(self) -> list[VehicleModel]:
        return sorted(self.vehicles.values(), key=lambda vehicle: vehicle.id)

    def find_by_id(self, vehicle_id: int) -> Optional[VehicleModel]:
        return self.vehicles.get(vehicle_id)

    def create(self, values: dict) -> VehicleModel:
        self._clock += timedelta(seconds=1)
        vehicle = VehicleModel(id=next(self._ids), created_at=self._clock, updated_at=self._clock, **values)
        self.vehicles[vehicle.id] = vehicle
        return vehicle

    def update(self, vehicle: VehicleModel, values: dict) -> VehicleModel:
        for field, value in values.items():
            setattr(vehicle, field, value)
        return vehicle

    def delete(self, vehicle: VehicleModel) -> None:
        del self.vehicles[vehicle.id]
        self.deleted.append(vehicle.id)

    def count_and_list(self, filters: VehicleFilter) -> tuple[int, list[VehicleModel]]:
        build_order_by(filters)
        matches = [vehicle for vehicle in self.vehicles.values() if _matches(vehicle, filters)]
        matches.sort(
            key=lambda vehicle: (getattr(vehicle, filters.sort_by), vehicle.id),
            reverse=filters.sort_order.upper() == "DESC",
        )
        offset = max(get_offset(filters.page, filters.limit), 0)
        return len(matches), matches[offset:offset + max(filters.limit, 0)]


def _contains(value, term) -> bool:
    return value is not None and term.lower() in value.lower()


def _matches(vehicle: VehicleModel, filters: VehicleFilter) -> bool:
    if filters.type and vehicle.type != filters.type:
        return False
    for field in SUBSTRING_FIELDS:
        term = getattr(filters, field)
        if term and not _contains(getattr(vehicle, field), term):
            return False
    if filters.min_price is not None and vehicle.price < filters.min_price:
        return False
    if filters.max_price is not None and vehicle.price > filters.max_price:
        return False
    if filters.min_year is not None and vehicle.year < filters.min_year:
        return False
    if filters.max_year is not None and vehicle.year > filters.max_year:
        return False
    if filters.search and not any(_contains(getattr(vehicle, field), filters.search) for field in SEARCHABLE_FIELDS):
        return False
    return True


class StubAIService:
    def __init__(self, text: str = "Generated copy"):
        self.text = text
        self.calls: list[VehicleDescriptionInput] = []

    def generate_description(self, vehicle: VehicleDescriptionInput) -> str:
        self.calls.append(vehicle)
        return f"{self.text} #{len(self.calls)} for {vehicle.brand} {vehicle.model}"


class RecordingStorage:
    def __init__(self, failing: set[str] = None):
        self.failing = failing or set()
        self.deleted: list[str] = []
        self.saved: list[str] = []

    def save_all(self, files) -> list[str]:
        names = [f"stored-{file.filename}" for file in files or [] if file.filename]
        self.saved.extend(names)
        return names

    def delete(self, filename: str) -> bool:
        self.deleted.append(filename)
        return filename not in self.failing

    def delete_all(self, filenames) -> int:
        return sum(1 for filename in filenames or [] if self.delete(filename))
