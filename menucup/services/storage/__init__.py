"""
Storage Service Factory

Returns the in-memory mock or the MinIO-backed storage service
based on ENV_MODE.

Usage:
    from menucup.services.storage import get_storage_service

    storage = get_storage_service()
    result = await storage.upload("menu-items", "abc/photo.png", data, "image/png")

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from functools import lru_cache

from menucup.core.config import get_settings
from menucup.services.storage.base import BaseStorageService, StorageResult, Upload
from menucup.services.storage.mock import MockStorageService
from menucup.services.storage.minio import MinioStorageService

logger = logging.getLogger(__name__)


@lru_cache()
def get_storage_service() -> BaseStorageService:
    """Get the configured storage service."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Storage Service: Using MockStorageService (development mode)")
        return MockStorageService(base_url=settings.app_base_url)
    else:
        logger.info(f"Storage Service: Using MinioStorageService ({settings.env_mode.value} mode)")
        return MinioStorageService()


def reset_storage_service() -> None:
    """Clear the cached service instance."""
    get_storage_service.cache_clear()


__all__ = [
    "get_storage_service",
    "reset_storage_service",
    "BaseStorageService",
    "MockStorageService",
    "MinioStorageService",
    "StorageResult",
    "Upload",
]
