from .cloudinary_service import CloudinaryBlobStore, configure_cloudinary
from .document_fetch import DocumentFetcher
from .gemini_client import CompletionRequest, GeminiCompletionService
from .pipeline import ResumePipeline, build_pipeline
from .prompts import TASK_TEMPLATES, TaskVariant, get_template
from .response_parser import parse_artifact, strip_code_fences
from .uploads import ensure_upload_dir, save_upload, transient_upload

__all__ = [
    # Blob relay
    "CloudinaryBlobStore",
    "configure_cloudinary",
    "DocumentFetcher",
    # Completion
    "CompletionRequest",
    "GeminiCompletionService",
    "TASK_TEMPLATES",
    "TaskVariant",
    "get_template",
    "parse_artifact",
    "strip_code_fences",
    # Orchestration
    "ResumePipeline",
    "build_pipeline",
    # Ingress
    "ensure_upload_dir",
    "save_upload",
    "transient_upload",
]
