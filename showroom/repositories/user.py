from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from db import get_db
from showroom.models.user import UserModel, UserRole


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_username(self, username: str) -> Optional[UserModel]:
        return self.db.query(UserModel).filter(UserModel.username == username).first()

    def create(self, username: str, password_hash: str, role: UserRole) -> UserModel:
        user = UserModel(username=username, password_hash=password_hash, role=role)
        self.db.add(user)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(user)
        return user


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)
