"""
AI Providers Module
==================

Chat-completion backends used by content curation.
"""

from .base import AIProvider, AIError
from .groq_provider import GroqProvider
from .openai_provider import OpenAIProvider

__all__ = [
    'AIProvider',
    'AIError',
    'GroqProvider',
    'OpenAIProvider',
]
