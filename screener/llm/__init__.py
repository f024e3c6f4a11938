"""LLM provider registry with lazy loading.

Usage:
    from screener.llm import get_provider, parse_json_response

    provider = get_provider("gemini")
    raw = provider.complete(prompt, system=instructions)
    data = parse_json_response(raw)

Provider SDKs are optional extras and are imported only when a provider is
actually used.
"""

import importlib

from screener.llm.base import LLMProvider, parse_json_response

__all__ = ["LLMProvider", "available_providers", "get_provider", "parse_json_response"]

# Lazy registry: maps provider name → (module_path, class_name)
_REGISTRY: dict[str, tuple[str, str]] = {
    "anthropic": ("screener.llm.anthropic", "AnthropicProvider"),
    "openai": ("screener.llm.openai", "OpenAIProvider"),
    "gemini": ("screener.llm.gemini", "GeminiProvider"),
    "ollama": ("screener.llm.ollama", "OllamaProvider"),
}


def get_provider(name: str) -> LLMProvider:
    """Instantiate and return an LLM provider by name.

    Raises:
        ValueError: If the provider name is unknown.
    """
    if name not in _REGISTRY:
        valid = ", ".join(sorted(_REGISTRY))
        msg = f"Unknown LLM provider '{name}'. Available: {valid}"
        raise ValueError(msg)

    module_path, class_name = _REGISTRY[name]
    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)
    return cls()  # type: ignore[no-any-return]


def available_providers() -> list[str]:
    """Return sorted list of registered provider names."""
    return sorted(_REGISTRY)
