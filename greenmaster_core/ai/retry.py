# =============================================================================
# greenmaster_core/ai/retry.py
# Bounded exponential-backoff retry for AI provider calls
# =============================================================================

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Callable, TypeVar

import openai

from greenmaster_core.errors import GreenMasterError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Provider messages that indicate a rate limit or a server-side failure
TRANSIENT_SIGNATURE_RE = re.compile(r"\b(?:429|500|502|503|504|INTERNAL|UNAVAILABLE)\b")


def is_transient(error: BaseException) -> bool:
    """True for rate limits and 5xx responses; everything else is permanent."""
    if isinstance(error, GreenMasterError):
        return False
    if isinstance(error, (openai.RateLimitError, openai.InternalServerError)):
        return True
    status = getattr(error, "status_code", None)
    if isinstance(status, int):
        return status == 429 or status >= 500
    message = str(error)
    return TRANSIENT_SIGNATURE_RE.search(message) is not None


@dataclass
class RetryPolicy:
    """
    Retry an operation on transient failures.

    Attempt ``n`` (0-based) that fails transiently waits ``base_delay * 2**n``
    seconds before the next one. The last failure is re-raised unchanged.
    """
    max_attempts: int = 3
    base_delay: float = 1.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def run(self, operation: Callable[[], T], description: str = "AI request") -> T:
        for attempt in range(self.max_attempts):
            try:
                return operation()
            except Exception as e:
                if not is_transient(e) or attempt == self.max_attempts - 1:
                    raise
                delay = self.base_delay * (2 ** attempt)
                logger.warning(
                    f"{description} failed (attempt {attempt + 1}/{self.max_attempts}): {e}. "
                    f"Retrying in {delay:.1f}s"
                )
                self.sleep(delay)
        raise RuntimeError("RetryPolicy.max_attempts must be at least 1")
