"""Google Gemini LLM provider (google-genai SDK)."""

import logging

from screener.llm.base import LLMProvider, import_sdk

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """LLM provider using the Google Gemini API (google-genai SDK)."""

    @property
    def provider_id(self) -> str:
        return "gemini"

    @property
    def default_model(self) -> str:
        return "gemini-2.5-flash"

    @property
    def env_var(self) -> str:
        return "GOOGLE_API_KEY"

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
    ) -> str:
        api_key = self.api_key()
        genai = import_sdk("google.genai", "google-genai", "gemini")
        genai_types = import_sdk("google.genai.types", "google-genai", "gemini")

        use_model = model or self.default_model

        logger.debug("Gemini request (%s, %d chars)", use_model, len(prompt))
        client = genai.Client(api_key=api_key)
        response = client.models.generate_content(
            model=use_model,
            contents=prompt,
            config=genai_types.GenerateContentConfig(
                system_instruction=self.system_prompt(system),
                response_mime_type="application/json",
            ),
        )

        return response.text  # type: ignore[no-any-return]
