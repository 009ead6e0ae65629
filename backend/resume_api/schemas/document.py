from pydantic import BaseModel
from typing import Optional


class UploadedDocument(BaseModel):
    """A received file held in transient local storage for one request."""
    stored_name: str
    original_name: str
    path: str
    size: int
    content_type: Optional[str] = None


class StoredBlob(BaseModel):
    """Durable copy of an upload in the blob store; only the URL is kept."""
    url: str
    folder: str
    resource_type: str = "raw"
    public_id: Optional[str] = None
    size: Optional[int] = None
