"""
Resume pipeline: relay the transient upload to the blob store, fetch it back,
ask the completion service for the variant's artifact and parse the answer.
"""
import logging
from typing import Any, Protocol

from ..config import Settings
from ..exceptions import ResumePipelineError
from ..schemas.document import StoredBlob, UploadedDocument
from .cloudinary_service import CloudinaryBlobStore
from .document_fetch import DocumentFetcher
from .gemini_client import CompletionRequest, GeminiCompletionService
from .prompts import TaskVariant, get_template
from .response_parser import parse_artifact

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    async def upload(self, document: UploadedDocument) -> StoredBlob: ...


class Fetcher(Protocol):
    async def fetch(self, url: str) -> bytes: ...


class CompletionService(Protocol):
    async def complete(self, request: CompletionRequest) -> str: ...


class ResumePipeline:
    def __init__(
        self,
        blob_store: BlobStore,
        fetcher: Fetcher,
        completion: CompletionService,
        validate_artifacts: bool = True,
    ):
        self.blob_store = blob_store
        self.fetcher = fetcher
        self.completion = completion
        self.validate_artifacts = validate_artifacts

    async def run(self, document: UploadedDocument, variant: TaskVariant) -> Any:
        """
        Produce the structured artifact for one uploaded document.

        The caller owns ``document`` and deletes it afterwards; the local file
        stays in place until this returns.

        Raises:
            ResumePipelineError (or a subclass) for any stage failure
        """
        template = get_template(variant)
        try:
            blob = await self.blob_store.upload(document)
            attachment = await self.fetcher.fetch(blob.url)
            text = await self.completion.complete(
                CompletionRequest(instruction=template.instruction, attachment=attachment)
            )
            model = template.artifact_model if self.validate_artifacts else None
            artifact = parse_artifact(text, model)
        except ResumePipelineError as e:
            logger.error(f"{variant.value} pipeline failed for {document.stored_name}: {type(e).__name__}: {e}")
            raise
        except Exception as e:
            logger.exception(f"Unexpected error in {variant.value} pipeline for {document.stored_name}")
            raise ResumePipelineError(str(e)) from e

        logger.info(f"{variant.value} artifact ready for {document.stored_name}")
        return artifact


def build_pipeline(settings: Settings) -> ResumePipeline:
    return ResumePipeline(
        blob_store=CloudinaryBlobStore(settings),
        fetcher=DocumentFetcher(settings),
        completion=GeminiCompletionService(settings),
        validate_artifacts=settings.validate_artifacts,
    )
