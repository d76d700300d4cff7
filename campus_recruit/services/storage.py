"""
Upload storage - resumes and profile images.

Backends:
- local: files under settings.upload_dir, served by the app at /uploads/...
         URLs are relative (/uploads/<folder>/<name>) and are made absolute
         when handed to companies
- s3:    objects in settings.s3_bucket_name, absolute https URLs

Both return {url, public_id, format} from upload() and accept that dict in delete().
"""

import logging
import os
import uuid
from typing import Dict

import boto3

from campus_recruit.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _split_extension(filename: str) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def _object_key(uploaded: Dict[str, str]) -> str:
    fmt = uploaded.get("format")
    return f"{uploaded['public_id']}.{fmt}" if fmt else uploaded["public_id"]


class LocalStorage:
    def __init__(self, upload_dir: str):
        self.upload_dir = upload_dir

    def upload(self, content: bytes, filename: str, content_type: str, folder: str) -> Dict[str, str]:
        ext = _split_extension(filename)
        stem = uuid.uuid4().hex
        name = f"{stem}.{ext}" if ext else stem

        target_dir = os.path.join(self.upload_dir, folder)
        os.makedirs(target_dir, exist_ok=True)
        with open(os.path.join(target_dir, name), "wb") as f:
            f.write(content)

        logger.info("Stored %s (%d bytes) in %s", filename, len(content), target_dir)
        return {"url": f"/uploads/{folder}/{name}", "public_id": f"{folder}/{stem}", "format": ext}

    def delete(self, uploaded: Dict[str, str]) -> None:
        path = os.path.join(self.upload_dir, *_object_key(uploaded).split("/"))
        if os.path.exists(path):
            os.remove(path)
            logger.info("Removed %s", path)


class S3Storage:
    def __init__(self, settings: Settings):
        self.bucket = settings.s3_bucket_name
        self.region = settings.aws_region
        self.client = boto3.client(
            "s3",
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id or None,
            aws_secret_access_key=settings.aws_secret_access_key or None,
        )

    def upload(self, content: bytes, filename: str, content_type: str, folder: str) -> Dict[str, str]:
        ext = _split_extension(filename)
        stem = uuid.uuid4().hex
        key = f"{folder}/{stem}.{ext}" if ext else f"{folder}/{stem}"

        self.client.put_object(
            Bucket=self.bucket, Key=key, Body=content, ContentType=content_type
        )

        logger.info("Uploaded %s to s3://%s/%s", filename, self.bucket, key)
        return {
            "url": f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}",
            "public_id": f"{folder}/{stem}",
            "format": ext,
        }

    def delete(self, uploaded: Dict[str, str]) -> None:
        key = _object_key(uploaded)
        self.client.delete_object(Bucket=self.bucket, Key=key)
        logger.info("Removed s3://%s/%s", self.bucket, key)


_storage = None


def get_storage():
    """Get or create the configured storage backend (singleton)."""
    global _storage
    if _storage is None:
        settings = get_settings()
        if settings.storage_type == "s3":
            _storage = S3Storage(settings)
        else:
            _storage = LocalStorage(settings.upload_dir)
    return _storage


def set_storage(storage) -> None:
    global _storage
    _storage = storage
