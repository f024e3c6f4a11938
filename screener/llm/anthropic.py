"""Anthropic Claude LLM provider."""

import logging

from screener.llm.base import LLMProvider, import_sdk

logger = logging.getLogger(__name__)


class AnthropicProvider(LLMProvider):
    """LLM provider using the Anthropic Claude API."""

    @property
    def provider_id(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return "claude-sonnet-4-20250514"

    @property
    def env_var(self) -> str:
        return "ANTHROPIC_API_KEY"

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
    ) -> str:
        api_key = self.api_key()
        anthropic = import_sdk("anthropic", "anthropic", "anthropic")

        client = anthropic.Anthropic(api_key=api_key)
        use_model = model or self.default_model

        logger.debug("Anthropic request (%s, %d chars)", use_model, len(prompt))
        message = client.messages.create(
            model=use_model,
            max_tokens=1024,
            system=self.system_prompt(system),
            messages=[{"role": "user", "content": prompt}],
        )

        return message.content[0].text  # type: ignore[no-any-return]
