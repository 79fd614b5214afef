"""
Object Storage Service Abstract Base Class

Defines the interface for uploading restaurant assets (logos, backgrounds,
QR codes) and item photos to bucket storage and resolving public URLs.

Author: Khalil Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class StorageResult:
    """
    Standardized result from an upload.

    Attributes:
        success: Whether the object was stored
        bucket: Target bucket name
        object_name: Path of the object inside the bucket
        public_url: URL guests can load the object from
        error_message: Error description if the upload failed
    """
    success: bool
    bucket: Optional[str] = None
    object_name: Optional[str] = None
    public_url: Optional[str] = None
    error_message: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "bucket": self.bucket,
            "object_name": self.object_name,
            "public_url": self.public_url,
            "error_message": self.error_message,
        }


@dataclass
class Upload:
    """File content received from a form."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def extension(self) -> str:
        if "." not in self.filename:
            return "bin"
        return self.filename.rsplit(".", 1)[-1].lower()


class BaseStorageService(ABC):
    """Abstract base class for object storage services."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def upload(
        self,
        bucket: str,
        object_name: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> StorageResult:
        """
        Store an object.

        Args:
            bucket: Bucket name
            object_name: Path inside the bucket
            content: Raw bytes
            content_type: MIME type
            upsert: Overwrite an existing object instead of failing

        Returns:
            StorageResult with the public URL on success
        """
        pass

    @abstractmethod
    def get_public_url(self, bucket: str, object_name: str) -> str:
        """Public URL for an object."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check service connectivity."""
        pass
