"""Async narrative generator used by the report pipeline."""

import asyncio
from functools import lru_cache
from typing import Optional, Protocol, Sequence

from app.config import LLMSettings, get_llm_settings
from app.domain.competitor import CompetitorRecord
from llm_synthesis.adapter import BaseLLMAdapter, MockLLMAdapter, OpenAILLMAdapter
from llm_synthesis.prompt_builder import SynthesisPromptBuilder
from llm_synthesis.retry import generate_with_retry


class NarrativeService(Protocol):
    async def generate(
        self,
        records: Sequence[CompetitorRecord],
        sections: Sequence[str],
        report_format: str,
    ) -> str:
        ...


class NarrativeGenerator:
    """Builds the report prompt and runs the adapter off the event loop."""

    def __init__(
        self,
        adapter: BaseLLMAdapter,
        prompt_builder: Optional[SynthesisPromptBuilder] = None,
        max_retries: int = 0,
    ) -> None:
        self._adapter = adapter
        self._prompt_builder = prompt_builder or SynthesisPromptBuilder()
        self._max_retries = max_retries

    async def generate(
        self,
        records: Sequence[CompetitorRecord],
        sections: Sequence[str],
        report_format: str,
    ) -> str:
        prompt = self._prompt_builder.build_report_prompt(records, sections, report_format)
        return await asyncio.to_thread(
            generate_with_retry,
            self._adapter,
            prompt,
            self._max_retries,
        )


def build_adapter(settings: LLMSettings) -> BaseLLMAdapter:
    """Instantiate the adapter named by ``LLM_ADAPTER``."""
    if settings.adapter == "mock":
        return MockLLMAdapter()
    if settings.adapter == "openai":
        return OpenAILLMAdapter(
            model=settings.model,
            max_tokens=settings.max_tokens,
            api_key=settings.api_key,
            base_url=settings.base_url,
        )
    raise ValueError(f"Unknown LLM adapter {settings.adapter!r}.")


@lru_cache(maxsize=1)
def get_narrative_generator() -> NarrativeGenerator:
    settings = get_llm_settings()
    return NarrativeGenerator(
        adapter=build_adapter(settings),
        max_retries=settings.max_retries,
    )
