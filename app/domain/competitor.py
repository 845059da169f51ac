"""
app/domain/competitor.py

Structured marketing data extracted for one competitor.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ImageAnalysis(BaseModel):
    """
    Vision summary for one image found on a competitor site.
    """

    model_config = ConfigDict(frozen=True)

    labels: list[str] = Field(default_factory=list)
    text: str = ""
    logos: list[str] = Field(default_factory=list)
    dominant_colors: str = ""


class CompetitorRecord(BaseModel):
    """
    One scraped competitor.

    Every list field defaults to empty; absent data is an empty sequence.
    Records are immutable once built and travel through the cache as JSON.
    """

    model_config = ConfigDict(frozen=True)

    name: str = ""
    product_names: list[str] = Field(default_factory=list)
    product_descriptions: list[str] = Field(default_factory=list)
    pricing: list[str] = Field(default_factory=list)
    contact_info: str = ""
    social_links: list[str] = Field(default_factory=list)
    headlines: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    images: list[ImageAnalysis] = Field(default_factory=list)

    def to_cache_value(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_cache_value(cls, value: str) -> "CompetitorRecord":
        return cls.model_validate_json(value)
