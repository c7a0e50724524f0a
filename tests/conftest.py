import os

# must be set before constants is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_SECRET"] = "test-secret"
os.environ["FILESYSTEM"] = "local"
os.environ["AI_PROVIDER"] = "grok"
os.environ.pop("CLAMAV_HOST", None)

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from db import SessionLocal
from main import app
from showroom.models.user import UserRole
from showroom.models.vehicle import VehicleModel, VehicleType
from showroom.repositories.user import UserRepository
from showroom.services.ai_description import get_ai_service
from showroom.services.image_storage import ImageStorage, get_image_storage
from showroom.utils.db_manager import drop_database, init_database
from showroom.utils.security import TokenPayload, create_access_token, hash_password
from tests.fakes import StubAIService


@pytest.fixture
def db():
    drop_database()
    init_database()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def ai_service():
    return StubAIService()


@pytest.fixture
def storage(tmp_path):
    return ImageStorage(filesystem="local", local_directory=str(tmp_path / "uploads"))


@pytest.fixture
def client(db, ai_service, storage):
    app.dependency_overrides[get_ai_service] = lambda: ai_service
    app.dependency_overrides[get_image_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _token_for(db, username: str, role: UserRole) -> str:
    user = UserRepository(db).create(username, hash_password("secret123"), role)
    return create_access_token(TokenPayload(id=user.id, username=user.username, role=role.value))


@pytest.fixture
def admin_headers(db):
    return {"Authorization": f"Bearer {_token_for(db, 'admin', UserRole.admin)}"}


@pytest.fixture
def user_headers(db):
    return {"Authorization": f"Bearer {_token_for(db, 'customer', UserRole.user)}"}


@pytest.fixture
def make_vehicle(db):
    def make(**overrides) -> VehicleModel:
        values = {
            "type": VehicleType.car,
            "brand": "Toyota",
            "model": "Camry",
            "color": "Silver",
            "engine_size": "2.5L",
            "year": 2022,
            "price": Decimal("25000.00"),
            "description": None,
            "ai_description": "Existing copy",
            "images": [],
        }
        values.update(overrides)
        vehicle = VehicleModel(**values)
        db.add(vehicle)
        db.commit()
        db.refresh(vehicle)
        return vehicle

    return make
