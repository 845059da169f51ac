"""Retry logic for transient LLM failures.

Retries only on ``LLMTransientError`` (connection drops, timeouts, rate
limiting). Any other adapter error is raised immediately. An empty
narrative is a valid result and is never retried.
"""

import logging
import time
from typing import List

from llm_synthesis.adapter import BaseLLMAdapter, LLMTransientError

logger = logging.getLogger(__name__)


class LLMRetryExhaustedError(Exception):
    """Raised when every attempt failed with a transient error.

    Attributes:
        attempts: Total number of attempts made (initial + retries).
        last_error: The transient error from the final attempt.
        history: Transient errors from every failed attempt.
    """

    def __init__(
        self,
        attempts: int,
        last_error: LLMTransientError,
        history: List[LLMTransientError],
    ) -> None:
        self.attempts = attempts
        self.last_error = last_error
        self.history = history
        super().__init__(
            f"LLM generation failed after {attempts} attempt(s). "
            f"Last error: {last_error}"
        )


def generate_with_retry(
    adapter: BaseLLMAdapter,
    prompt: str,
    max_retries: int = 0,
    backoff_seconds: float = 1.0,
) -> str:
    """Generate narrative text, retrying transient adapter failures.

    Args:
        adapter: An LLM adapter implementing ``generate(prompt) -> str``.
        prompt: The fully formatted prompt string.
        max_retries: Maximum number of *additional* attempts after the
            first failure. Total attempts = 1 + max_retries.
        backoff_seconds: Base delay between attempts, doubled each time.

    Returns:
        The narrative text returned by the adapter.

    Raises:
        LLMRetryExhaustedError: If all attempts fail with transient errors.
    """
    errors: List[LLMTransientError] = []
    total_attempts = 1 + max_retries

    for attempt in range(1, total_attempts + 1):
        try:
            text = adapter.generate(prompt)
        except LLMTransientError as exc:
            errors.append(exc)
            logger.warning(
                "Narrative attempt %d/%d failed: %s",
                attempt,
                total_attempts,
                exc,
            )
            if attempt < total_attempts:
                time.sleep(backoff_seconds * (2 ** (attempt - 1)))
            continue

        if attempt > 1:
            logger.info("Narrative generated on attempt %d/%d", attempt, total_attempts)
        return text

    raise LLMRetryExhaustedError(
        attempts=total_attempts,
        last_error=errors[-1],
        history=errors,
    )
