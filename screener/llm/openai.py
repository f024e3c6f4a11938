"""OpenAI LLM provider, also the base for OpenAI-compatible servers."""

import logging
from types import ModuleType
from typing import Any

from screener.llm.base import LLMProvider, import_sdk

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """LLM provider using the OpenAI chat completions API."""

    @property
    def provider_id(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return "gpt-4o-mini"

    @property
    def env_var(self) -> str | None:
        return "OPENAI_API_KEY"

    def _sdk(self) -> ModuleType:
        return import_sdk("openai", "openai", "openai")

    def _client(self, openai: ModuleType, api_key: str) -> Any:
        return openai.OpenAI(api_key=api_key)

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
    ) -> str:
        api_key = self.api_key()
        client = self._client(self._sdk(), api_key)
        use_model = model or self.default_model

        logger.debug("%s request (%s, %d chars)", self.provider_id, use_model, len(prompt))
        response = client.chat.completions.create(
            model=use_model,
            messages=[
                {"role": "system", "content": self.system_prompt(system)},
                {"role": "user", "content": prompt},
            ],
        )

        return response.choices[0].message.content  # type: ignore[no-any-return]
