"""Configuration for OpenAI-compatible completion adapters."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

from .core.models import ModelInfo
from .core.retry import RetryPolicy

AZURE_OPENAI_DEFAULT_API_VERSION = "2024-08-01-preview"
AZURE_BASE_URL_MARKER = "azure.com"

ENV_BASE_URL = "OPENAI_BASE_URL"
ENV_API_KEY = "OPENAI_API_KEY"
ENV_MODEL_ID = "OPENAI_MODEL_ID"
ENV_AZURE_API_VERSION = "AZURE_OPENAI_API_VERSION"


@dataclass(frozen=True, slots=True)
class AdapterConfig:
    """Connection and model settings captured once per adapter.

    Attributes
    ----------
    base_url:
        Root URL of the OpenAI-compatible API. A URL containing ``azure.com``
        (in any letter case) selects the Azure OpenAI transport.
    api_key:
        Credential passed through to the transport untouched.
    model_id:
        Model or deployment identifier sent with every request.
    model_info:
        Capability metadata for :attr:`model_id`. When omitted the adapter
        reports :data:`~chatbridge.core.models.OPENAI_MODEL_INFO_SANE_DEFAULTS`.
    azure_api_version:
        Overrides :data:`AZURE_OPENAI_DEFAULT_API_VERSION` for Azure
        deployments; ignored otherwise.
    retry:
        Policy applied by :meth:`OpenAICompletionAdapter.create_message`.
    """

    base_url: str | None = None
    api_key: str | None = None
    model_id: str | None = None
    model_info: ModelInfo | None = None
    azure_api_version: str | None = None
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    @property
    def is_azure(self) -> bool:
        return AZURE_BASE_URL_MARKER in (self.base_url or "").lower()

    @property
    def resolved_api_version(self) -> str:
        return self.azure_api_version or AZURE_OPENAI_DEFAULT_API_VERSION

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        model_info: ModelInfo | None = None,
        retry: RetryPolicy | None = None,
    ) -> "AdapterConfig":
        """Build a config from ``OPENAI_*`` environment variables.

        Blank values are treated as unset.
        """

        source = os.environ if environ is None else environ

        def read(name: str) -> str | None:
            value = source.get(name)
            if value is None:
                return None
            value = value.strip()
            return value or None

        return cls(
            base_url=read(ENV_BASE_URL),
            api_key=read(ENV_API_KEY),
            model_id=read(ENV_MODEL_ID),
            model_info=model_info,
            azure_api_version=read(ENV_AZURE_API_VERSION),
            retry=retry or RetryPolicy(),
        )
