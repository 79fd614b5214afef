"""
MinIO Storage Service

Production implementation backed by MinIO or any S3-compatible store.
Buckets are expected to allow anonymous reads so stored assets can be
linked from public menu pages.

Author: Khalil Bannouri
Version: 1.0.0
"""

import asyncio
import io
import logging

from minio import Minio
from minio.error import S3Error

from menucup.core.config import get_settings
from menucup.services.storage.base import BaseStorageService, StorageResult

logger = logging.getLogger(__name__)
settings = get_settings()


class MinioStorageService(BaseStorageService):
    """Object storage using the MinIO client."""

    def __init__(self):
        self.client = Minio(
            settings.minio_endpoint,
            access_key=settings.minio_access_key,
            secret_key=settings.minio_secret_key,
            secure=settings.minio_secure,
            region=settings.minio_region,  # Explicit region to avoid lookup
        )
        scheme = "https" if settings.minio_secure else "http"
        self.public_base = (
            settings.storage_public_url or f"{scheme}://{settings.minio_endpoint}"
        ).rstrip("/")
        self._ensure_buckets(
            settings.restaurant_assets_bucket,
            settings.menu_items_bucket,
        )
        logger.info(f"MinioStorageService initialized ({settings.minio_endpoint})")

    def _ensure_buckets(self, *buckets: str) -> None:
        for bucket in buckets:
            try:
                if not self.client.bucket_exists(bucket):
                    self.client.make_bucket(bucket)
                    logger.info(f"Created bucket {bucket}")
            except S3Error as exc:
                logger.warning(f"MinIO bucket check failed for {bucket}: {exc}")

    @property
    def provider_name(self) -> str:
        return "minio"

    def _exists(self, bucket: str, object_name: str) -> bool:
        try:
            self.client.stat_object(bucket, object_name)
            return True
        except S3Error as exc:
            if exc.code in ("NoSuchKey", "NoSuchObject", "ResourceNotFound"):
                return False
            raise

    def _put(self, bucket: str, object_name: str, content: bytes, content_type: str) -> None:
        self.client.put_object(
            bucket,
            object_name,
            io.BytesIO(content),
            length=len(content),
            content_type=content_type,
        )

    async def upload(
        self,
        bucket: str,
        object_name: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> StorageResult:
        try:
            if not upsert and await asyncio.to_thread(self._exists, bucket, object_name):
                return StorageResult(
                    success=False,
                    bucket=bucket,
                    object_name=object_name,
                    error_message="The resource already exists",
                )
            await asyncio.to_thread(self._put, bucket, object_name, content, content_type)
        except S3Error as e:
            logger.error(f"MinIO upload failed for {bucket}/{object_name}: {e}")
            return StorageResult(
                success=False,
                bucket=bucket,
                object_name=object_name,
                error_message=str(e),
            )

        logger.info(f"Stored {bucket}/{object_name} ({len(content)} bytes)")
        return StorageResult(
            success=True,
            bucket=bucket,
            object_name=object_name,
            public_url=self.get_public_url(bucket, object_name),
        )

    def get_public_url(self, bucket: str, object_name: str) -> str:
        return f"{self.public_base}/{bucket}/{object_name}"

    async def health_check(self) -> bool:
        try:
            await asyncio.to_thread(self.client.bucket_exists, settings.restaurant_assets_bucket)
            return True
        except Exception as e:
            logger.error(f"MinIO health check failed: {e}")
            return False
