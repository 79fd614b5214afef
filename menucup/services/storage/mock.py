"""
Mock Storage Service

Keeps uploaded objects in memory for development. Objects are served
by the application itself under /storage/{bucket}/{object}.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
import random
from typing import Optional

from menucup.services.storage.base import BaseStorageService, StorageResult

logger = logging.getLogger(__name__)


class MockStorageService(BaseStorageService):
    """In-memory object storage."""

    def __init__(self, base_url: str, failure_rate: float = 0.0):
        self.base_url = base_url.rstrip("/")
        self.failure_rate = failure_rate
        self.objects: dict[tuple[str, str], tuple[bytes, str]] = {}
        logger.info(f"MockStorageService initialized (failure_rate={failure_rate:.0%})")

    @property
    def provider_name(self) -> str:
        return "mock"

    def _should_fail(self) -> bool:
        return random.random() < self.failure_rate

    async def upload(
        self,
        bucket: str,
        object_name: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> StorageResult:
        if self._should_fail():
            logger.warning(f"Mock upload failed (simulated): {bucket}/{object_name}")
            return StorageResult(
                success=False,
                bucket=bucket,
                object_name=object_name,
                error_message="Simulated storage failure",
            )

        key = (bucket, object_name)
        if key in self.objects and not upsert:
            return StorageResult(
                success=False,
                bucket=bucket,
                object_name=object_name,
                error_message="The resource already exists",
            )

        self.objects[key] = (content, content_type)
        logger.info(f"Mock stored {bucket}/{object_name} ({len(content)} bytes)")
        return StorageResult(
            success=True,
            bucket=bucket,
            object_name=object_name,
            public_url=self.get_public_url(bucket, object_name),
        )

    def get_object(self, bucket: str, object_name: str) -> Optional[tuple[bytes, str]]:
        """Return (content, content_type) or None."""
        return self.objects.get((bucket, object_name))

    def get_public_url(self, bucket: str, object_name: str) -> str:
        return f"{self.base_url}/storage/{bucket}/{object_name}"

    async def health_check(self) -> bool:
        return True
