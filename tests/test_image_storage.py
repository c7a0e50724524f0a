from datetime import UTC, datetime, timedelta
from unittest.mock import Mock

import pytest

from constants import PRESIGN_EXPIRATION
from showroom.services import image_storage
from showroom.services.image_storage import ImageStorage, guess_content_type, randomize_file_name


@pytest.fixture
def s3(monkeypatch):
    client = Mock()
    client.generate_presigned_url.return_value = "https://bucket.s3.example/car.jpg?signature"
    monkeypatch.setattr(image_storage, "S3", client)
    return client


@pytest.fixture
def azure(monkeypatch):
    service_client = Mock()
    service_client.account_name = "showroom"
    service_client.credential.account_key = "account-key"
    blob_service = Mock()
    blob_service.from_connection_string.return_value = service_client
    generate_blob_sas = Mock(return_value="sv=sas-token")
    monkeypatch.setattr(image_storage, "BlobServiceClient", blob_service)
    monkeypatch.setattr(image_storage, "generate_blob_sas", generate_blob_sas)
    monkeypatch.setattr(image_storage, "AZURE_STORAGE_CONTAINER", "vehicles")
    return generate_blob_sas


def test_s3_url_uses_configured_expiration(s3):
    storage = ImageStorage(filesystem="s3", presign_expiration=timedelta(minutes=10))

    assert storage.presigned_url("car.jpg") == "https://bucket.s3.example/car.jpg?signature"
    assert s3.generate_presigned_url.call_args.kwargs["ExpiresIn"] == 600


def test_azure_url_uses_configured_expiration(azure):
    storage = ImageStorage(filesystem="azure", presign_expiration=timedelta(minutes=10))

    before = datetime.now(UTC)
    url = storage.presigned_url("car.jpg")

    assert url == "https://showroom.blob.core.windows.net/vehicles/car.jpg?sv=sas-token"
    expiry = azure.call_args.kwargs["expiry"]
    assert before + timedelta(minutes=10) <= expiry <= datetime.now(UTC) + timedelta(minutes=10)


def test_both_providers_share_the_default_expiration(s3, azure):
    ImageStorage(filesystem="s3").presigned_url("car.jpg")
    before = datetime.now(UTC)
    ImageStorage(filesystem="azure").presigned_url("car.jpg")

    assert s3.generate_presigned_url.call_args.kwargs["ExpiresIn"] == int(PRESIGN_EXPIRATION.total_seconds())
    assert azure.call_args.kwargs["expiry"] - before < PRESIGN_EXPIRATION + timedelta(seconds=5)
    assert azure.call_args.kwargs["expiry"] - before >= PRESIGN_EXPIRATION


def test_randomized_name_keeps_extension():
    name = randomize_file_name("../My Car!.JPG")

    assert name.startswith("My-Car-")
    assert name.endswith(".jpg")
    assert "/" not in name


@pytest.mark.parametrize("name, content_type", [
    ("a.png", "image/png"),
    ("a.JPEG", "image/jpeg"),
    ("a.bin", "application/octet-stream"),
])
def test_guess_content_type(name, content_type):
    assert guess_content_type(name) == content_type


def test_delete_missing_local_file_reports_false(tmp_path):
    storage = ImageStorage(filesystem="local", local_directory=str(tmp_path))

    assert storage.delete("nowhere.jpg") is False
    assert storage.delete_all(["nowhere.jpg", "gone.png"]) == 0
