import enum

from sqlalchemy import Column, Enum, Integer, String

from db import Base
from showroom.mixins.orm import ORMBaseMixin


class UserRole(str, enum.Enum):
    admin = "admin"
    user = "user"

    def __str__(self):
        return self.value


class UserModel(Base, ORMBaseMixin):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    username = Column(String(50), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.user)
