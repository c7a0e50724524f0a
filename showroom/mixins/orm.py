import enum
from datetime import UTC, datetime

from pydantic import BaseModel as PydanticModel
from sqlalchemy import Column, DateTime


class OrderDirection(str, enum.Enum):
    asc = "ASC"
    desc = "DESC"


class DeleteResponse(PydanticModel):
    message: str = ""


class ORMBaseMixin(object):
    created_at = Column(DateTime, default=lambda x: datetime.now(UTC))
    updated_at = Column(
        DateTime,
        default=lambda x: datetime.now(UTC),
        onupdate=lambda x: datetime.now(UTC),
    )

    def __repr__(self):
        if hasattr(self, "username"):
            identifier = getattr(self, "username", None)
        elif hasattr(self, "brand") and hasattr(self, "model"):
            identifier = f"{self.brand} {self.model}"
        else:
            identifier = ""

        if hasattr(self, "id"):
            return f"<{self.__class__.__name__.replace('Model', '')}: {identifier} (id {self.id})>"

        return f"<{self.__class__.__name__.replace('Model', '')}: {identifier}>"

    def __str__(self):
        return self.__repr__()
