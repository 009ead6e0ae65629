import sys
from pathlib import Path
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from resume_api.config import Settings
from resume_api.main import create_app
from resume_api.routers.resume import get_pipeline
from resume_api.schemas.document import StoredBlob, UploadedDocument
from resume_api.services.gemini_client import CompletionRequest
from resume_api.services.pipeline import ResumePipeline

ATS_RESPONSE = (
    '{"job_position":"Engineer","ats_score":"82%","matched_keywords":["Go"],'
    '"missing_keywords":["Rust"],"suggestions":[],"recommendations":[]}'
)


class FakeBlobStore:
    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.uploaded: List[UploadedDocument] = []
        self.existed_during_upload: List[bool] = []

    async def upload(self, document: UploadedDocument) -> StoredBlob:
        self.uploaded.append(document)
        self.existed_during_upload.append(Path(document.path).exists())
        if self.error:
            raise self.error
        return StoredBlob(
            url=f"https://res.cloudinary.com/demo/raw/upload/resumes/{document.stored_name}",
            folder="resumes",
            public_id=f"resumes/{document.stored_name}",
        )


class FakeFetcher:
    def __init__(self, content: bytes = b"%PDF-1.4 fake", error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.urls: List[str] = []

    async def fetch(self, url: str) -> bytes:
        self.urls.append(url)
        if self.error:
            raise self.error
        return self.content


class FakeCompletion:
    def __init__(self, text: str = ATS_RESPONSE, error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.requests: List[CompletionRequest] = []

    async def complete(self, request: CompletionRequest) -> str:
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.text


@pytest.fixture()
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "files"


@pytest.fixture()
def settings(upload_dir: Path) -> Settings:
    return Settings(
        upload_dir=str(upload_dir),
        cloudinary_cloud_name="demo",
        cloudinary_api_key="key",
        cloudinary_api_secret="secret",
        gemini_api_key="gemini-key",
        retry_backoff_seconds=0,
    )


@pytest.fixture()
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture()
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture()
def completion() -> FakeCompletion:
    return FakeCompletion()


@pytest.fixture()
def pipeline(blob_store: FakeBlobStore, fetcher: FakeFetcher, completion: FakeCompletion) -> ResumePipeline:
    return ResumePipeline(blob_store, fetcher, completion)


@pytest.fixture()
def app(settings: Settings, pipeline: ResumePipeline):
    application = create_app(settings)
    application.dependency_overrides[get_pipeline] = lambda: pipeline
    return application


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def pdf_bytes() -> bytes:
    """Roughly 10KB of PDF-looking bytes; nothing downstream parses them."""
    header = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\n"
    trailer = b"\n%%EOF\n"
    return header + b"0" * (10 * 1024 - len(header) - len(trailer)) + trailer
