import math
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel as PydanticModel
from sqlalchemy import and_, or_
from sqlalchemy.orm import Query

from showroom.mixins.orm import OrderDirection
from showroom.models.vehicle import VehicleModel, VehicleType
from showroom.utils.exceptions import InvalidQueryError

SEARCHABLE_FIELDS = ("brand", "model", "color", "description", "ai_description")
SUBSTRING_FIELDS = ("brand", "model", "color")
SORTABLE_FIELDS = (
    "id", "type", "brand", "model", "color", "engine_size", "year", "price", "created_at", "updated_at",
)


class VehicleFilter(PydanticModel):
    type: Optional[VehicleType] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    search: Optional[str] = None
    # page and limit are not clamped, they are echoed back as given
    page: int = 1
    limit: int = 10
    sort_by: str = "created_at"
    sort_order: str = OrderDirection.desc.value


def build_conditions(filters: VehicleFilter) -> list:
    """
    Translate a filter set into a list of SQLAlchemy boolean expressions.
    All returned conditions are meant to be AND-ed together.

    @param filters: The requested filters.
    @return: The list of conditions, empty when nothing is filtered.
    """
    conditions = []

    if filters.type:
        conditions.append(VehicleModel.type == filters.type)

    for field in SUBSTRING_FIELDS:
        value = getattr(filters, field)
        if value:
            conditions.append(getattr(VehicleModel, field).icontains(value, autoescape=True))

    # range bounds are inclusive, either side optional
    if filters.min_price is not None:
        conditions.append(VehicleModel.price >= filters.min_price)
    if filters.max_price is not None:
        conditions.append(VehicleModel.price <= filters.max_price)
    if filters.min_year is not None:
        conditions.append(VehicleModel.year >= filters.min_year)
    if filters.max_year is not None:
        conditions.append(VehicleModel.year <= filters.max_year)

    if filters.search:
        conditions.append(
            or_(*[
                getattr(VehicleModel, field).icontains(filters.search, autoescape=True)
                for field in SEARCHABLE_FIELDS
            ])
        )

    return conditions


def build_order_by(filters: VehicleFilter) -> list:
    if filters.sort_by not in SORTABLE_FIELDS:
        raise InvalidQueryError(
            f'Cannot sort by "{filters.sort_by}", expected one of: {", ".join(SORTABLE_FIELDS)}'
        )

    try:
        direction = OrderDirection(filters.sort_order.upper())
    except ValueError:
        raise InvalidQueryError(f'Invalid sort order "{filters.sort_order}", expected ASC or DESC')

    column = getattr(VehicleModel, filters.sort_by)
    if direction == OrderDirection.asc:
        return [column.asc(), VehicleModel.id.asc()]
    return [column.desc(), VehicleModel.id.desc()]


def get_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def count_pages(total_items: int, limit: int) -> int:
    # limit <= 0 would divide by zero or go negative, report no pages instead
    if limit <= 0 or total_items == 0:
        return 0
    return math.ceil(total_items / limit)


def apply_filters(query: Query, filters: VehicleFilter) -> Query:
    conditions = build_conditions(filters)
    if conditions:
        query = query.filter(and_(*conditions))
    return query
