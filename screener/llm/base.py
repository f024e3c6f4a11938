"""Abstract base class for LLM providers and shared response parsing."""

import importlib
import json
import os
import re
from abc import ABC, abstractmethod
from types import ModuleType
from typing import Any

SYSTEM_PROMPT = (
    "You are an experienced technical recruiter screening résumés against job "
    "postings. Answer strictly from the text you are given and never invent "
    "facts about the candidate.\n\n"
    "Return ONLY a JSON object (no markdown, no explanation) matching the "
    "fields requested in the user message."
)


def parse_json_response(raw_text: str) -> Any:
    """Parse an LLM response text into a JSON value.

    Handles markdown-wrapped JSON (```json ... ```) and plain JSON.
    Raises ValueError on malformed responses.
    """
    cleaned = re.sub(r"^```(?:json)?\s*\n?", "", raw_text.strip())
    cleaned = re.sub(r"\n?```\s*$", "", cleaned)

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        msg = f"Failed to parse LLM response as JSON: {e}"
        raise ValueError(msg) from e


def import_sdk(module: str, package: str, extra: str, purpose: str = "semantic screening") -> ModuleType:
    """Import an optional provider SDK, naming the extra that installs it."""
    try:
        return importlib.import_module(module)
    except ImportError:
        msg = f"{package} is required for {purpose}. Install with: pip install 'resume-screener[{extra}]'"
        raise ImportError(msg) from None


class LLMProvider(ABC):
    """Base class that every LLM provider must implement."""

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique identifier for this provider (e.g. 'anthropic')."""

    @abstractmethod
    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
    ) -> str:
        """Send a prompt to the LLM and return the raw response text.

        Args:
            prompt: The user message.
            model: Override the provider's default model. None uses default.
            system: Override the system prompt. None falls back to SYSTEM_PROMPT.

        Returns:
            Raw text response from the LLM (expected to be JSON).
        """

    @property
    @abstractmethod
    def default_model(self) -> str:
        """The default model ID used when no override is specified."""

    @property
    @abstractmethod
    def env_var(self) -> str | None:
        """Environment variable name for the API key, or None if not needed."""

    def api_key(self) -> str:
        """Read the API key named by ``env_var``.

        Raises:
            ValueError: If the variable is unset or empty.
        """
        if self.env_var is None:
            return ""
        key = os.environ.get(self.env_var)
        if not key:
            msg = f"{self.env_var} environment variable is required"
            raise ValueError(msg)
        return key

    @staticmethod
    def system_prompt(system: str | None) -> str:
        return system if system is not None else SYSTEM_PROMPT
