"""
Deadline and bounded-retry wrapper for outbound calls (blob store, document
fetch, completion service).
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from ..exceptions import OutboundTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    stage: str,
    timeout: float,
    retries: int = 1,
    backoff: float = 1.0,
    transient: Tuple[Type[BaseException], ...] = (),
    is_transient: Optional[Callable[[BaseException], bool]] = None,
) -> T:
    """
    Await ``operation()`` under a deadline, retrying a bounded number of times.

    Args:
        operation: Zero-argument factory returning a fresh awaitable per attempt
        stage: Name used in logs and in OutboundTimeoutError
        timeout: Per-attempt deadline in seconds
        retries: Extra attempts after the first one
        backoff: Base sleep between attempts, multiplied by the attempt number
        transient: Exception types worth another attempt
        is_transient: Narrows ``transient`` further; a caught error it rejects is raised at once

    Returns:
        Whatever the operation returns

    Raises:
        OutboundTimeoutError if the last attempt ran past its deadline;
        the operation's own exception if it is not transient or attempts ran out
    """
    attempts = retries + 1
    for attempt in range(1, attempts + 1):
        try:
            return await asyncio.wait_for(operation(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{stage} attempt {attempt}/{attempts} timed out after {timeout}s")
            if attempt == attempts:
                raise OutboundTimeoutError(stage, timeout)
        except transient as e:
            logger.warning(f"{stage} attempt {attempt}/{attempts} failed: {e}")
            if attempt == attempts or (is_transient is not None and not is_transient(e)):
                raise
        await asyncio.sleep(backoff * attempt)
