"""Image storage for entity attachments (local disk or S3)."""
import os
import uuid
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import boto3
from botocore.exceptions import ClientError
from fastapi import UploadFile

from app.config import settings
from app.core.errors import AppError, StorageError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


def _image_extension(filename: Optional[str]) -> str:
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise ValidationError("Only image files are allowed (jpg, jpeg, png, gif, webp)")
    return ext


def _stored_name(prefix: str, ext: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}{ext}"


class LocalImageStorage:
    """Writes images under uploads_dir; paths are served by StaticFiles at uploads_url_prefix."""

    def __init__(self, uploads_dir: Optional[str] = None, url_prefix: Optional[str] = None):
        self.uploads_dir = uploads_dir or settings.uploads_dir
        self.url_prefix = (url_prefix or settings.uploads_url_prefix).rstrip("/")
        os.makedirs(self.uploads_dir, exist_ok=True)

    def upload_file(self, file_content: bytes, filename: str, prefix: str = "image") -> str:
        ext = _image_extension(filename)
        name = _stored_name(prefix, ext)
        try:
            with open(os.path.join(self.uploads_dir, name), "wb") as fh:
                fh.write(file_content)
        except OSError as e:
            logger.error(f"Failed to write upload {name}: {str(e)}")
            raise StorageError("Failed to store image")
        return f"{self.url_prefix}/{name}"

    def delete_file(self, path: str) -> bool:
        """Delete a stored image by the path upload_file returned"""
        name = os.path.basename(path)
        try:
            os.remove(os.path.join(self.uploads_dir, name))
            return True
        except OSError as e:
            logger.error(f"Failed to delete upload {name}: {str(e)}")
            return False


class S3ImageStorage:
    def __init__(self):
        if not settings.s3_configured:
            raise ValueError("AWS S3 credentials and bucket name must be configured")

        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region
        )
        self.bucket_name = settings.s3_bucket_name
        self.public_url = (
            settings.s3_public_url
            or f"https://{self.bucket_name}.s3.{settings.aws_region}.amazonaws.com"
        ).rstrip("/")

    def upload_file(self, file_content: bytes, filename: str, prefix: str = "image") -> str:
        """Upload image to S3 and return its public URL"""
        ext = _image_extension(filename)
        key = f"uploads/{_stored_name(prefix, ext)}"
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=file_content,
                ContentType=CONTENT_TYPES[ext]
            )
        except ClientError as e:
            logger.error(f"Failed to upload file to S3: {str(e)}")
            raise StorageError("Failed to store image")
        return f"{self.public_url}/{key}"

    def delete_file(self, path: str) -> bool:
        """Delete file from S3 by the URL upload_file returned"""
        key = path[len(self.public_url) + 1:] if path.startswith(self.public_url) else path
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            logger.error(f"Failed to delete file from S3: {str(e)}")
            return False


def get_image_storage():
    if settings.s3_configured:
        return S3ImageStorage()
    return LocalImageStorage()


async def save_upload(storage, image: Optional[UploadFile], prefix: str) -> Optional[str]:
    """Persist an optional uploaded image and return its path/URL, or None when absent"""
    if image is None or not image.filename:
        return None
    _image_extension(image.filename)
    content = await image.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise ValidationError(f"Image exceeds the {settings.max_upload_bytes // (1024 * 1024)}MB limit")
    return storage.upload_file(content, image.filename, prefix)


@asynccontextmanager
async def stored_image(storage, image: Optional[UploadFile], prefix: str) -> AsyncIterator[Optional[str]]:
    """Save the upload for the duration of a write; the file is removed if the write is rejected"""
    image_path = await save_upload(storage, image, prefix)
    try:
        yield image_path
    except AppError:
        if image_path:
            storage.delete_file(image_path)
        raise
