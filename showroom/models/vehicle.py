import enum

from sqlalchemy import JSON, Column, Enum, Integer, Numeric, String, Text

from db import Base
from showroom.mixins.orm import ORMBaseMixin


class VehicleType(str, enum.Enum):
    car = "Car"
    bike = "Bike"
    suv = "SUV"
    truck = "Truck"
    van = "Van"

    def __str__(self):
        return self.value


# fields that feed the generated ai_description
CRITICAL_FIELDS = ('type', 'brand', 'model', 'year', 'color', 'engine_size', 'price')


class VehicleModel(Base, ORMBaseMixin):
    __tablename__ = 'vehicles'

    id = Column(Integer, primary_key=True)
    type = Column(
        Enum(VehicleType, values_callable=lambda options: [option.value for option in options]),
        nullable=False,
        index=True,
    )
    brand = Column(String(50), nullable=False, index=True)
    model = Column(String(100), nullable=False)
    color = Column(String(30), nullable=False)
    engine_size = Column(String(20), nullable=False)
    year = Column(Integer, nullable=False, index=True)
    price = Column(Numeric(12, 2), nullable=False, index=True)
    description = Column(Text, nullable=True)
    ai_description = Column(Text, nullable=True)
    images = Column(JSON, nullable=True)

    def description_fields(self) -> dict:
        return {field: getattr(self, field) for field in CRITICAL_FIELDS}
