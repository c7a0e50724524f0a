from typing import Optional

from pydantic import BaseModel as PydanticModel
from pydantic import create_model, ConfigDict

from db import Base as DBModel
from showroom.utils import random_string

# never exposed through the API, never accepted from clients
SECRET_FIELDS = ["password_hash"]


def generate_read_schema(model: [DBModel], exclude: [str] = None) -> [PydanticModel]:
    # unique name per schema, fastapi complains about duplicate model names otherwise
    schema_name = model.__name__.replace("Model", "Read") + "-" + random_string()
    fields = _get_fields(model, exclude=SECRET_FIELDS + (exclude or []))

    return create_model(schema_name, **fields, __config__=ConfigDict(from_attributes=True))


def generate_page_schema(model: [DBModel], read_schema: [PydanticModel] = None) -> [PydanticModel]:
    schema_name = model.__name__.replace("Model", "Page") + "-" + random_string()
    if not read_schema:
        read_schema = generate_read_schema(model)

    return create_model(
        schema_name,
        items=(list[read_schema], ...),
        currentPage=(int, ...),
        totalPages=(int, ...),
        totalItems=(int, ...),
        limit=(int, ...),
        __config__=ConfigDict(from_attributes=True),
    )


def _get_fields(model: DBModel, exclude: [str] = None) -> dict:
    fields = {}

    for column in model.__table__.columns:
        if exclude and column.name in exclude:
            continue

        col_type = column.type.python_type
        # json type can be both object and list
        if col_type == dict:
            col_type = dict | list

        if column.nullable:
            col_type = Optional[col_type]
            default = None
        else:
            default = ...

        fields[column.name] = (col_type, default)

    return fields
