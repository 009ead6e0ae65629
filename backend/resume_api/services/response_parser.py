"""
Turn completion text into a structured artifact.
"""
import json
import logging
from typing import Any, Optional, Type

from pydantic import BaseModel, ValidationError

from ..exceptions import ArtifactValidationError, ResponseFormatError

logger = logging.getLogger(__name__)

LEADING_FENCE = "```json"
TRAILING_FENCE = "```"


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json and a trailing ``` marker, then trim whitespace."""
    if text.startswith(LEADING_FENCE):
        text = text[len(LEADING_FENCE):]
    if text.endswith(TRAILING_FENCE):
        text = text[:-len(TRAILING_FENCE)]
    return text.strip()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_artifact(text: str, model: Optional[Type[BaseModel]] = None) -> Any:
    """
    Parse completion text as JSON.

    Args:
        text: Raw completion text, possibly fenced
        model: When given, the parsed value must validate against it

    Returns:
        The parsed JSON value, unchanged by validation

    Raises:
        ResponseFormatError if the text is not JSON after fence stripping
        ArtifactValidationError if it does not match ``model``
    """
    payload = strip_code_fences(text)
    try:
        data = json.loads(payload, parse_constant=_reject_constant)
        # Lone surrogates parse but cannot be sent back as UTF-8
        json.dumps(data, allow_nan=False, ensure_ascii=False).encode("utf-8")
    except (ValueError, UnicodeEncodeError) as e:
        logger.warning(f"Failed to parse JSON response: {e}; raw response: {payload[:500]}...")
        raise ResponseFormatError(f"Completion response is not valid JSON: {e}") from e

    if model is not None:
        try:
            model.model_validate(data)
        except ValidationError as e:
            raise ArtifactValidationError(
                f"Completion response does not match {model.__name__}: {e.error_count()} error(s)"
            ) from e
    return data
