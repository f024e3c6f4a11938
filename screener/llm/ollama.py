"""Ollama local LLM provider (OpenAI-compatible API)."""

import os
from types import ModuleType
from typing import Any

from screener.llm.base import import_sdk
from screener.llm.openai import OpenAIProvider

_OLLAMA_BASE_URL = "http://localhost:11434/v1"


class OllamaProvider(OpenAIProvider):
    """Chat completions against a local Ollama instance. No API key needed."""

    @property
    def provider_id(self) -> str:
        return "ollama"

    @property
    def default_model(self) -> str:
        return "llama3"

    @property
    def env_var(self) -> None:
        return None

    def _sdk(self) -> ModuleType:
        return import_sdk("openai", "openai", "openai", purpose="Ollama (OpenAI-compatible API)")

    def _client(self, openai: ModuleType, api_key: str) -> Any:
        base_url = os.environ.get("OLLAMA_BASE_URL", _OLLAMA_BASE_URL)
        return openai.OpenAI(base_url=base_url, api_key="ollama")
