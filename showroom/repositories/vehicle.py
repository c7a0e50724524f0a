import logging
import traceback
from typing import Optional, Protocol

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db import get_db
from showroom.models.vehicle import VehicleModel
from showroom.utils.vehicle_query import VehicleFilter, apply_filters, build_order_by, get_offset

logger = logging.getLogger(__name__)


class VehicleRepository(Protocol):
    def find(self) -> list[VehicleModel]: ...

    def find_by_id(self, vehicle_id: int) -> Optional[VehicleModel]: ...

    def create(self, values: dict) -> VehicleModel: ...

    def update(self, vehicle: VehicleModel, values: dict) -> VehicleModel: ...

    def delete(self, vehicle: VehicleModel) -> None: ...

    def count_and_list(self, filters: VehicleFilter) -> tuple[int, list[VehicleModel]]: ...


class SQLAlchemyVehicleRepository:
    def __init__(self, db: Session):
        self.db = db

    def find(self) -> list[VehicleModel]:
        return self.db.query(VehicleModel).order_by(VehicleModel.id).all()

    def find_by_id(self, vehicle_id: int) -> Optional[VehicleModel]:
        return self.db.get(VehicleModel, vehicle_id)

    def create(self, values: dict) -> VehicleModel:
        instance = VehicleModel(**values)
        self.db.add(instance)
        self._commit()
        self.db.refresh(instance)
        return instance

    def update(self, vehicle: VehicleModel, values: dict) -> VehicleModel:
        for field, value in values.items():
            if hasattr(vehicle, field):
                setattr(vehicle, field, value)
        self._commit()
        self.db.refresh(vehicle)
        return vehicle

    def delete(self, vehicle: VehicleModel) -> None:
        self.db.delete(vehicle)
        self._commit()

    def count_and_list(self, filters: VehicleFilter) -> tuple[int, list[VehicleModel]]:
        # order is resolved first so a bad sort field fails before touching the database
        order_by = build_order_by(filters)
        query = apply_filters(self.db.query(VehicleModel), filters)

        total = query.count()
        items = (
            query.order_by(*order_by)
            .offset(max(get_offset(filters.page, filters.limit), 0))
            .limit(max(filters.limit, 0))
            .all()
        )
        return total, items

    def _commit(self):
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error(f"Error writing vehicle: {traceback.format_exc()}")
            raise


def get_vehicle_repository(db: Session = Depends(get_db)) -> SQLAlchemyVehicleRepository:
    return SQLAlchemyVehicleRepository(db)
