"""
Gemini completion service: one prompt plus one inline PDF attachment in,
plain text out.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..config import Settings
from ..exceptions import CompletionServiceError, OutboundTimeoutError
from .retry import call_with_retry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionRequest:
    """Instruction text and the document it applies to, for one outbound call."""
    instruction: str
    attachment: bytes
    mime_type: str = "application/pdf"

    def to_contents(self) -> list:
        # The SDK base64-encodes inline data on the wire
        return [
            types.Part.from_text(text=self.instruction),
            types.Part.from_bytes(data=self.attachment, mime_type=self.mime_type),
        ]


class GeminiCompletionService:
    def __init__(self, settings: Settings, client: Optional[genai.Client] = None):
        self.model = settings.gemini_model
        self.timeout = settings.completion_timeout_seconds
        self.retries = settings.outbound_retries
        self.backoff = settings.retry_backoff_seconds
        self._api_key = settings.gemini_api_key
        self._client = client

    def _get_client(self) -> genai.Client:
        """Get the Gemini client, initializing lazily if needed."""
        if self._client is None:
            if not self._api_key:
                raise CompletionServiceError("Gemini API not configured. Please set GEMINI_API_KEY.")
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def complete(self, request: CompletionRequest) -> str:
        """
        Send the instruction and attachment to Gemini and return the response text.

        Raises:
            CompletionServiceError if the call fails or the model returns no text
            OutboundTimeoutError if every attempt ran past the deadline
        """
        client = self._get_client()
        logger.info(
            f"Requesting completion from {self.model} "
            f"({len(request.attachment)} byte {request.mime_type} attachment)"
        )

        try:
            response = await call_with_retry(
                lambda: client.aio.models.generate_content(
                    model=self.model,
                    contents=request.to_contents(),
                ),
                stage="completion",
                timeout=self.timeout,
                retries=self.retries,
                backoff=self.backoff,
                transient=(genai_errors.ServerError, httpx.TransportError),
            )
        except OutboundTimeoutError:
            raise
        except httpx.TimeoutException as e:
            raise OutboundTimeoutError("completion", self.timeout) from e
        except (genai_errors.APIError, httpx.HTTPError) as e:
            raise CompletionServiceError(f"Gemini request failed: {e}") from e

        text = response.text
        if not text:
            raise CompletionServiceError("Gemini returned an empty response")
        return text
