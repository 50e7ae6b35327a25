"""
External API Clients Package

This package contains clients for external services:
- LLM: OpenAI-compatible chat-completions client used by the diagram agents
"""

from .llm import CompletionClient, get_completion_client

__all__ = [
    'CompletionClient',
    'get_completion_client',
]
