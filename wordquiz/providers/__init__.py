from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wordquiz.config import Settings
    from wordquiz.providers.base import LLMProvider


def create_llm(settings: Settings) -> LLMProvider:
    """Build the provider named by ``settings.llm_provider``.

    SDK-backed providers are imported lazily so only the selected one's
    dependency has to be importable.
    """
    s = settings
    if s.llm_provider == "gemini":
        from wordquiz.providers.llm_gemini import GeminiProvider
        return GeminiProvider(model=s.llm_model, base_url=s.gemini_url, timeout=s.llm_timeout)
    elif s.llm_provider == "ollama":
        from wordquiz.providers.llm_ollama import OllamaProvider
        return OllamaProvider(base_url=s.ollama_url, model=s.llm_model, timeout=s.llm_timeout)
    elif s.llm_provider == "anthropic":
        from wordquiz.providers.llm_anthropic import AnthropicProvider
        return AnthropicProvider(model=s.llm_model, timeout=s.llm_timeout)
    elif s.llm_provider == "openai":
        from wordquiz.providers.llm_openai import OpenAIProvider
        return OpenAIProvider(model=s.llm_model, timeout=s.llm_timeout)
    raise ValueError(f"Unknown LLM provider: {s.llm_provider}")
