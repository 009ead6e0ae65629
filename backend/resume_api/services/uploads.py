"""
Transient local storage for incoming resume uploads.

Files are written under ``<epoch-ms>-<original name>`` and removed once the
request finishes, whatever the outcome. Content, MIME type and size are not
checked here; any binary is accepted and forwarded.
"""
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aiofiles
from fastapi import UploadFile

from ..exceptions import MissingFileError
from ..schemas.document import UploadedDocument

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def ensure_upload_dir(upload_dir: str) -> str:
    """Create the transient directory if it does not exist yet"""
    os.makedirs(upload_dir, exist_ok=True)
    return upload_dir


def build_stored_name(original_name: str, now_ms: Optional[int] = None) -> str:
    """Collision-resistant local name: arrival time in epoch millis plus the original name."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    # Drop any client-supplied directory components
    base = os.path.basename(original_name.replace("\\", "/")) or "upload"
    return f"{now_ms}-{base}"


async def save_upload(file: Optional[UploadFile], upload_dir: str) -> UploadedDocument:
    """
    Write an uploaded file to the transient directory.

    Args:
        file: FastAPI UploadFile, or None when the request had no file part
        upload_dir: Directory for transient files (created if missing)

    Returns:
        UploadedDocument describing the local copy

    Raises:
        MissingFileError if no file was supplied
    """
    if file is None or not file.filename:
        raise MissingFileError("No file uploaded")

    ensure_upload_dir(upload_dir)
    stored_name = build_stored_name(file.filename)
    path = os.path.join(upload_dir, stored_name)

    size = 0
    try:
        async with aiofiles.open(path, "wb") as out:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                await out.write(chunk)
    except Exception:
        # Partial writes must not outlive the request either
        if os.path.exists(path):
            os.remove(path)
        raise

    logger.info(f"Stored upload {stored_name} ({size} bytes, {file.content_type})")
    return UploadedDocument(
        stored_name=stored_name,
        original_name=file.filename,
        path=path,
        size=size,
        content_type=file.content_type,
    )


def discard(document: UploadedDocument) -> None:
    """Delete the local copy; a file that is already gone is fine"""
    try:
        os.remove(document.path)
        logger.info(f"Deleted transient file {document.stored_name}")
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error(f"Failed to delete transient file {document.path}: {e}")


@asynccontextmanager
async def transient_upload(file: Optional[UploadFile], upload_dir: str) -> AsyncIterator[UploadedDocument]:
    """Save the upload for the duration of the block and delete it on every exit path."""
    document = await save_upload(file, upload_dir)
    try:
        yield document
    finally:
        discard(document)
