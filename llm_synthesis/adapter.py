"""LLM adapters for narrative report generation.

Provides a base interface and concrete adapters for OpenAI-compatible
APIs and a deterministic mock for testing.
"""

import os
from abc import ABC, abstractmethod
from typing import List, Optional

from llm_synthesis.prompt_builder import parse_requested_sections


class LLMTransientError(Exception):
    """Raised by adapters for failures worth another attempt.

    Covers connection drops, timeouts and rate limiting. Anything else an
    adapter raises is treated as permanent.
    """


class BaseLLMAdapter(ABC):
    """Abstract base for all LLM adapters."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Send a prompt to the LLM and return the raw response text.

        Args:
            prompt: The fully formatted prompt string.

        Returns:
            Free-text narrative returned by the model. May be empty.
        """


class OpenAILLMAdapter(BaseLLMAdapter):
    """Adapter for OpenAI-compatible chat completion APIs."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        max_tokens: int = 4096,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> None:
        """Initialise the OpenAI adapter.

        Args:
            model: Model identifier.
            max_tokens: Maximum tokens in the completion.
            api_key: OpenAI API key. Falls back to OPENAI_API_KEY env var.
            base_url: Optional base URL for OpenAI-compatible endpoints.
        """
        import openai

        resolved_key = api_key or os.environ.get("OPENAI_API_KEY", "")
        client_kwargs: dict = {"api_key": resolved_key}
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = openai.OpenAI(**client_kwargs)
        self._transient_errors = (
            openai.APIConnectionError,
            openai.APITimeoutError,
            openai.RateLimitError,
            openai.InternalServerError,
        )
        self._model = model
        self._max_tokens = max_tokens

    def generate(self, prompt: str) -> str:
        """Call the OpenAI chat completion API.

        Args:
            prompt: The fully formatted prompt string.

        Returns:
            Raw string content from the model response, or "" when the
            model returned no content.

        Raises:
            LLMTransientError: On connection, timeout, rate-limit or
                5xx failures.
        """
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self._max_tokens,
                stream=False,
            )
        except self._transient_errors as exc:
            raise LLMTransientError(str(exc)) from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


class MockLLMAdapter(BaseLLMAdapter):
    """Deterministic adapter that echoes the requested sections.

    Used for local runs and CI pipelines where no LLM API is available.
    Every requested section title appears on its own line followed by a
    fixed number of body lines, so document layout can be exercised
    end to end.
    """

    def __init__(self, lines_per_section: int = 6) -> None:
        self._lines_per_section = lines_per_section

    def generate(self, prompt: str) -> str:
        """Return a fixed narrative built from the prompt's section list.

        Args:
            prompt: Prompt produced by ``SynthesisPromptBuilder``.

        Returns:
            Narrative text with one header line per requested section.
        """
        lines: List[str] = []
        for section in parse_requested_sections(prompt):
            lines.append(section)
            for index in range(1, self._lines_per_section + 1):
                lines.append(f"Mock finding {index} for {section.lower()}.")
            lines.append("")
        return "\n".join(lines)
