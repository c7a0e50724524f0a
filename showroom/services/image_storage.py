import io
import logging
import os
import re
from datetime import datetime, timedelta, UTC
from typing import Optional

from azure.storage.blob import BlobSasPermissions, BlobServiceClient, generate_blob_sas
from clamd import ClamdNetworkSocket
from fastapi import UploadFile

from constants import (
    AZURE_STORAGE_CONNECTION_STRING,
    AZURE_STORAGE_CONTAINER,
    CLAMAV_HOST,
    FILESYSTEM,
    MAX_IMAGES_PER_VEHICLE,
    PRESIGN_EXPIRATION,
    S3,
    S3_BUCKET,
    UPLOAD_DIRECTORY,
    UPLOAD_SIZE_LIMIT,
)
from showroom.utils import random_string
from showroom.utils.exceptions import PayloadTooLargeError, ValidationError

logger = logging.getLogger(__name__)

IMAGE_CONTENT_TYPES = {
    ".gif": "image/gif",
    ".jpeg": "image/jpeg",
    ".jpg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
}


def randomize_file_name(filename: str, length: int = 10) -> str:
    file_name_part, file_ext = os.path.splitext(os.path.basename(filename))
    file_name_part = re.sub(r"[^A-Za-z0-9_-]+", "-", file_name_part).strip("-") or "image"
    return f"{file_name_part}-{random_string(length)}{file_ext.lower()}"


def guess_content_type(filename: str) -> str:
    extension = os.path.splitext(filename)[1].lower()
    return IMAGE_CONTENT_TYPES.get(extension, "application/octet-stream")


class ImageStorage:
    """
    Stores vehicle images on local disk, S3 or Azure Blob Storage and hands
    back the generated file names, which are what vehicles record.
    """

    def __init__(
            self,
            filesystem: str = FILESYSTEM,
            local_directory: str = UPLOAD_DIRECTORY,
            size_limit_mb: float = UPLOAD_SIZE_LIMIT,
            max_files: int = MAX_IMAGES_PER_VEHICLE,
            presign_expiration: timedelta = PRESIGN_EXPIRATION,
    ):
        self.filesystem = filesystem
        self.local_directory = local_directory
        self.size_limit_mb = size_limit_mb
        self.max_files = max_files
        self.presign_expiration = presign_expiration

    def save_all(self, files: Optional[list[UploadFile]]) -> list[str]:
        files = [file for file in files or [] if file.filename]
        if len(files) > self.max_files:
            raise ValidationError(f"At most {self.max_files} images can be uploaded at once")
        # validate everything first so a bad file does not leave the others stored
        contents = [self._read_validated(file) for file in files]
        return [self._store(file.filename, content) for file, content in zip(files, contents)]

    def delete(self, filename: str) -> bool:
        """Best effort removal, failures are logged and reported as False."""
        try:
            if self.filesystem == "s3":
                S3.delete_object(Bucket=S3_BUCKET, Key=filename)
            elif self.filesystem == "azure":
                self._container_client().get_blob_client(filename).delete_blob()
            else:
                os.remove(self.local_path(filename))
            return True
        except FileNotFoundError:
            logger.error(f"Image {filename} could not be deleted: file not found")
        except Exception as e:
            logger.error(f"Image {filename} could not be deleted: {e}")
        return False

    def delete_all(self, filenames: Optional[list[str]]) -> int:
        return sum(1 for filename in filenames or [] if self.delete(filename))

    def local_path(self, filename: str) -> str:
        return os.path.join(self.local_directory, os.path.basename(filename))

    def presigned_url(self, filename: str) -> str:
        if self.filesystem == "s3":
            return S3.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": S3_BUCKET, "Key": filename},
                ExpiresIn=int(self.presign_expiration.total_seconds()),
            )

        blob_service_client = BlobServiceClient.from_connection_string(AZURE_STORAGE_CONNECTION_STRING)
        account_key = blob_service_client.credential.account_key
        account_name = blob_service_client.account_name
        sas_token = generate_blob_sas(
            blob_name=filename,
            account_name=account_name,
            account_key=account_key,
            container_name=AZURE_STORAGE_CONTAINER,
            permission=BlobSasPermissions(read=True),
            expiry=datetime.now(UTC) + self.presign_expiration,
        )
        return f"https://{account_name}.blob.core.windows.net/{AZURE_STORAGE_CONTAINER}/{filename}?{sas_token}"

    def _read_validated(self, file: UploadFile) -> bytes:
        extension = os.path.splitext(file.filename)[1].lower()
        if extension not in IMAGE_CONTENT_TYPES:
            raise ValidationError(f"Only image files are allowed: {file.filename}")

        content = file.file.read()
        file_size = len(content) / 1024 / 1024
        if file_size > self.size_limit_mb:
            raise PayloadTooLargeError(f"File size limit of {self.size_limit_mb}MB exceeded")

        if CLAMAV_HOST:
            clamav = ClamdNetworkSocket(CLAMAV_HOST, 3310)
            scan_result = clamav.instream(io.BytesIO(content))
            if scan_result['stream'][0] != 'OK':
                raise ValidationError(f"File infected: {file.filename}")

        return content

    def _store(self, original_filename: str, content: bytes) -> str:
        new_filename = randomize_file_name(original_filename)

        if self.filesystem == "s3":
            S3.upload_fileobj(
                io.BytesIO(content),
                S3_BUCKET,
                new_filename,
                ExtraArgs={
                    "ContentType": guess_content_type(new_filename),
                    "Metadata": {"original_filename": original_filename},
                },
            )
        elif self.filesystem == "azure":
            self._container_client().get_blob_client(new_filename).upload_blob(content)
        else:
            os.makedirs(self.local_directory, exist_ok=True)
            with open(self.local_path(new_filename), "wb") as f:
                f.write(content)

        logger.debug(f"Stored image {original_filename} as {new_filename} ({self.filesystem})")
        return new_filename

    @staticmethod
    def _container_client():
        blob_service_client = BlobServiceClient.from_connection_string(AZURE_STORAGE_CONNECTION_STRING)
        return blob_service_client.get_container_client(AZURE_STORAGE_CONTAINER)


def get_image_storage() -> ImageStorage:
    return ImageStorage()
