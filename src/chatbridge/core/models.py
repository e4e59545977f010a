"""Model capability metadata."""

from __future__ import annotations

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class ModelInfo(BaseModel):
    """Static capability and pricing metadata for a model."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_tokens: int = Field(-1, description="Maximum completion tokens; -1 means provider default.")
    context_window: int = Field(128_000, gt=0, description="Total context window in tokens.")
    supports_images: bool = Field(True, description="Whether image content blocks are accepted.")
    supports_computer_use: bool = Field(False, description="Whether computer-use tools are supported.")
    supports_prompt_cache: bool = Field(False, description="Whether the provider caches prompt prefixes.")
    input_price: float = Field(0.0, ge=0, description="USD per million input tokens.")
    output_price: float = Field(0.0, ge=0, description="USD per million output tokens.")
    cache_writes_price: float | None = Field(None, ge=0, description="USD per million cache-write tokens.")
    cache_reads_price: float | None = Field(None, ge=0, description="USD per million cache-read tokens.")
    description: str | None = Field(None, description="Free-form note shown to users.")


OPENAI_MODEL_INFO_SANE_DEFAULTS = ModelInfo(
    max_tokens=-1,
    context_window=128_000,
    supports_images=True,
    supports_prompt_cache=False,
    input_price=0,
    output_price=0,
)


class ModelSelection(NamedTuple):
    """Model identifier paired with its metadata."""

    id: str
    info: ModelInfo


__all__ = ["ModelInfo", "ModelSelection", "OPENAI_MODEL_INFO_SANE_DEFAULTS"]
