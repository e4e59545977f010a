from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from chatbridge import AdapterConfig  # noqa: E402

OPENAI_ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_MODEL_ID",
    "OPENAI_API_VERSION",
    "AZURE_OPENAI_API_KEY",
    "AZURE_OPENAI_API_VERSION",
    "AZURE_OPENAI_ENDPOINT",
)


@pytest.fixture(autouse=True)
def isolate_openai_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host credentials from leaking into transport construction."""

    for name in OPENAI_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_config():
    def _make(model_id: str | None = "gpt-4o", **overrides) -> AdapterConfig:
        values = {"base_url": "https://api.example.com/v1", "api_key": "sk-test", "model_id": model_id}
        values.update(overrides)
        return AdapterConfig(**values)

    return _make
