"""
Cloudinary Service - relay transient resume uploads to durable storage
"""
import asyncio
import logging
from typing import Any, Dict

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader

from ..config import Settings
from ..exceptions import OutboundTimeoutError, StorageUploadError
from ..schemas.document import StoredBlob, UploadedDocument
from .retry import call_with_retry

logger = logging.getLogger(__name__)

# Errors Cloudinary answers with a 4xx; another attempt would get the same answer
CLIENT_ERRORS = (
    cloudinary.exceptions.AuthorizationRequired,
    cloudinary.exceptions.BadRequest,
    cloudinary.exceptions.NotAllowed,
    cloudinary.exceptions.NotFound,
    cloudinary.exceptions.AlreadyExists,
)


def is_transient_upload_error(exc: BaseException) -> bool:
    """The SDK wraps socket and HTTP failures in cloudinary.exceptions.Error"""
    return not isinstance(exc, CLIENT_ERRORS)


def configure_cloudinary(settings: Settings) -> bool:
    """Initialize Cloudinary SDK from app settings"""
    cloud_name = settings.cloudinary_cloud_name
    api_key = settings.cloudinary_api_key
    api_secret = settings.cloudinary_api_secret

    if not all([cloud_name, api_key, api_secret]):
        logger.warning("Cloudinary credentials not configured. Resume uploads will fail.")
        return False

    cloudinary.config(
        cloud_name=cloud_name,
        api_key=api_key,
        api_secret=api_secret,
        secure=True
    )
    logger.info(f"Cloudinary initialized: {cloud_name}")
    return True


class CloudinaryBlobStore:
    """Uploads documents as raw resources under a fixed folder."""

    def __init__(self, settings: Settings):
        self.folder = settings.storage_folder
        self.timeout = settings.storage_timeout_seconds
        self.retries = settings.outbound_retries
        self.backoff = settings.retry_backoff_seconds

    def _upload_sync(self, path: str) -> Dict[str, Any]:
        return cloudinary.uploader.upload(
            path,
            folder=self.folder,
            resource_type="raw",  # For non-image/video files
        )

    async def upload(self, document: UploadedDocument) -> StoredBlob:
        """
        Upload a local document to Cloudinary

        Args:
            document: The transient local copy

        Returns:
            StoredBlob with the durable secure URL

        Raises:
            StorageUploadError on any upload failure
            OutboundTimeoutError when every attempt ran past the deadline
        """
        try:
            result = await call_with_retry(
                lambda: asyncio.to_thread(self._upload_sync, document.path),
                stage="blob upload",
                timeout=self.timeout,
                retries=self.retries,
                backoff=self.backoff,
                transient=(cloudinary.exceptions.Error, ConnectionError),
                is_transient=is_transient_upload_error,
            )
        except OutboundTimeoutError:
            raise
        except Exception as e:
            logger.error(f"Failed to upload document {document.stored_name}: {e}")
            raise StorageUploadError(f"Upload of {document.stored_name} failed: {e}") from e

        url = result.get("secure_url")
        if not url:
            raise StorageUploadError(f"Cloudinary returned no URL for {document.stored_name}")

        logger.info(f"Uploaded {document.stored_name} to Cloudinary as {result.get('public_id')}")
        return StoredBlob(
            url=url,
            folder=self.folder,
            resource_type="raw",
            public_id=result.get("public_id"),
            size=result.get("bytes"),
        )
