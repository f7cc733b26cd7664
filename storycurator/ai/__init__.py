"""
AI Module
=========

Provider construction for content curation.
"""

from typing import Optional

from ..config.settings import AISettings, AIProvider as ConfigAIProvider
from ..utils.logging import get_logger_for_component
from .providers import AIProvider, AIError, GroqProvider, OpenAIProvider


def create_provider(settings: AISettings) -> Optional[AIProvider]:
    """Build the configured provider.

    Returns None when the provider has no API key; curation then always
    takes the fallback path.
    """
    logger = get_logger_for_component("ai")
    api_key = settings.get_api_key()
    if not api_key:
        logger.warning(f"No API key for AI provider '{settings.provider.value}'; curation will use fallback")
        return None

    model = settings.get_model()
    if settings.provider == ConfigAIProvider.OPENAI:
        return OpenAIProvider(api_key, model, temperature=settings.temperature,
                              base_url=settings.openai_base_url)
    return GroqProvider(api_key, model, temperature=settings.temperature)


__all__ = [
    'AIProvider',
    'AIError',
    'GroqProvider',
    'OpenAIProvider',
    'create_provider',
]
