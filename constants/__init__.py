import datetime
import os

import boto3
from dotenv import load_dotenv

load_dotenv()

# Database
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", 5432)
DB_NAME = os.getenv("DB_NAME")
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

# General settings
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")
APP_SECRET = os.getenv("APP_SECRET", "your-secret-key")
AUTH_ALGORITHM = os.getenv("AUTH_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))
MIN_PASSWORD_LENGTH = int(os.getenv("MIN_PASSWORD_LENGTH", 6))

# Uploads
FILESYSTEM = os.getenv("FILESYSTEM", "local")
UPLOAD_DIRECTORY = os.getenv("UPLOAD_DIRECTORY", "uploads")
UPLOAD_SIZE_LIMIT = float(os.getenv("UPLOAD_SIZE_LIMIT", 5))  # unit: Megabyte
MAX_IMAGES_PER_VEHICLE = int(os.getenv("MAX_IMAGES_PER_VEHICLE", 5))
# lifetime of signed S3 and Azure download urls
PRESIGN_EXPIRATION = datetime.timedelta(
    minutes=int(os.getenv("PRESIGN_EXPIRATION_MINUTES", 5))
)

# ClamAV (Optional)
CLAMAV_HOST = os.getenv("CLAMAV_HOST", None)

# AWS S3 (Optional)
S3_BUCKET = os.getenv("S3_BUCKET")
AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID")
AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY")
AWS_REGION = os.getenv("AWS_REGION")
S3 = boto3.client(
    "s3",
    aws_access_key_id=AWS_ACCESS_KEY_ID,
    aws_secret_access_key=AWS_SECRET_ACCESS_KEY,
    region_name=AWS_REGION,
)

# Azure Blob Storage (Optional)
AZURE_STORAGE_CONNECTION_STRING = os.getenv("AZURE_STORAGE_CONNECTION_STRING")
AZURE_STORAGE_CONTAINER = os.getenv("AZURE_STORAGE_CONTAINER")

# AI description generation
AI_PROVIDER = os.getenv("AI_PROVIDER", "grok")
AI_REQUEST_TIMEOUT = float(os.getenv("AI_REQUEST_TIMEOUT", 15))  # unit: second
AI_MAX_TOKENS = int(os.getenv("AI_MAX_TOKENS", 300))
AI_TEMPERATURE = float(os.getenv("AI_TEMPERATURE", 0.7))
