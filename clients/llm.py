"""
Completion Client for Whiteboard AI

Async client for an OpenAI-compatible chat-completions endpoint. Diagram
agents only need "prompt in, text out", so an instance is awaited directly:

    client = CompletionClient()
    text = await client("Generate a mind map ...")
"""

import asyncio
import aiohttp
import json
import logging
from typing import Dict, List, Optional

from config.settings import config
from services.error_handler import (
    ErrorHandler,
    LLMAccessDeniedError,
    LLMContentFilterError,
    LLMProviderError,
    LLMRateLimitError,
    LLMTimeoutError,
    LLMValidationError,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a whiteboard assistant. You produce structured content for an "
    "infinite canvas and always answer with the JSON requested, nothing else."
)


def _error_detail(error_text: str) -> str:
    """Provider error message from a JSON error body, or the raw text."""
    try:
        data = json.loads(error_text)
    except json.JSONDecodeError:
        return error_text
    if isinstance(data, dict) and isinstance(data.get('error'), dict):
        return data['error'].get('message') or error_text
    return error_text


class CompletionClient:
    """Async client for OpenAI-compatible chat-completions APIs"""

    provider = 'openai-compatible'

    def __init__(self, api_url: str = None, api_key: str = None, model: str = None,
                 temperature: float = None, max_tokens: int = None,
                 timeout: float = None, max_retries: int = None):
        self.api_url = api_url or config.LLM_API_URL
        self.api_key = api_key if api_key is not None else config.LLM_API_KEY
        self.model = model or config.LLM_MODEL
        self.temperature = config.LLM_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or config.LLM_MAX_TOKENS
        self.timeout = timeout or config.LLM_TIMEOUT
        self.max_retries = config.LLM_MAX_RETRIES if max_retries is None else max_retries

    async def __call__(self, prompt: str) -> str:
        """Complete one prompt, retrying transport errors; returns the content text."""
        return await ErrorHandler.with_retry(self.complete, prompt, max_retries=self.max_retries)

    async def complete(self, prompt: str, system_prompt: str = SYSTEM_PROMPT) -> str:
        """Single completion attempt."""
        messages = config.prepare_llm_messages(system_prompt, prompt)
        return await self.chat_completion(messages)

    async def chat_completion(self, messages: List[Dict], temperature: Optional[float] = None,
                              max_tokens: Optional[int] = None) -> str:
        """
        Send chat completion request

        Args:
            messages: List of message dictionaries with 'role' and 'content'
            temperature: Sampling temperature, None uses the configured value
            max_tokens: Maximum tokens in response, None uses the configured value

        Returns:
            Response content as string
        """
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.max_tokens,
            "stream": False,
        }
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.post(self.api_url, json=payload, headers=headers) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(f"Completion API error {response.status}: {error_text[:500]}")
                        self._raise_for_status(response.status, _error_detail(error_text))

                    data = await response.json()
        except asyncio.TimeoutError as e:
            logger.error(f"Completion API timeout after {self.timeout}s")
            raise LLMTimeoutError(f"Completion API timeout after {self.timeout}s") from e

        choices = data.get('choices') if isinstance(data, dict) else None
        if not choices or not isinstance(choices[0], dict):
            raise LLMValidationError("Completion response has no choices")
        choice = choices[0]
        if choice.get('finish_reason') == 'content_filter':
            raise LLMContentFilterError("Completion stopped by content filter")

        message = choice.get('message')
        if not isinstance(message, dict) or not isinstance(message.get('content'), str):
            raise LLMValidationError("Completion response has no message content")

        # Empty text is returned as is; the agents fall back on it
        content = message['content']
        if not content.strip():
            logger.warning("Completion returned empty content")
        usage = data.get('usage', {})
        logger.debug(f"Completion received: {len(content)} chars, usage {usage}")
        return content

    def _raise_for_status(self, status: int, detail: str):
        if status == 429:
            raise LLMRateLimitError(f"Rate limit: {detail}")
        if status in (401, 403):
            raise LLMAccessDeniedError(f"Access denied: {detail}", provider=self.provider, status_code=status)
        raise LLMProviderError(f"Completion API error ({status}): {detail}", provider=self.provider, status_code=status)


_default_client: Optional[CompletionClient] = None


def get_completion_client() -> CompletionClient:
    """Process-wide client built from configuration."""
    global _default_client
    if _default_client is None:
        _default_client = CompletionClient()
    return _default_client
