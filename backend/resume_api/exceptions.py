class ResumePipelineError(Exception):
    """Raised when a resume request cannot be turned into an artifact."""


class MissingFileError(ResumePipelineError):
    """Raised when the request carries no file part."""


class StorageUploadError(ResumePipelineError):
    """Raised when the blob store rejects or fails the upload."""


class DocumentFetchError(ResumePipelineError):
    """Raised when the stored document cannot be downloaded again."""


class CompletionServiceError(ResumePipelineError):
    """Raised when the generative completion call fails or returns nothing."""


class ResponseFormatError(ResumePipelineError):
    """Raised when the completion text is not valid JSON after fence stripping."""


class ArtifactValidationError(ResponseFormatError):
    """Raised when parsed JSON does not match the task variant's shape."""


class OutboundTimeoutError(ResumePipelineError):
    """Raised when every attempt of an outbound call ran past its deadline."""

    def __init__(self, stage: str, timeout: float) -> None:
        super().__init__(f"{stage} timed out after {timeout}s")
        self.stage = stage
        self.timeout = timeout
