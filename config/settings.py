"""
Whiteboard AI Configuration Module
==================================

This module provides centralized configuration management for the Whiteboard AI
service. It handles environment variable loading, validation, and provides a
clean interface for accessing configuration values throughout the application.

Features:
- Dynamic environment variable loading with .env support
- Property-based configuration access for real-time updates
- Validation for required and optional settings
- Default values for all configuration options
- Layout strategy selection for generated flow diagrams

Environment Variables:
- LLM_API_KEY: Required for live content generation
- See env.example for complete configuration options

Usage:
    from config.settings import config
    api_key = config.LLM_API_KEY
    is_valid = config.validate_llm_config()
"""

from dotenv import load_dotenv
import os
import time
from pathlib import Path
from typing import Optional
import logging

logger = logging.getLogger(__name__)

load_dotenv()  # Load environment variables from .env file

SUPPORTED_LANGUAGES = ('fr', 'en')
FLOW_LAYOUT_STRATEGIES = ('sequence', 'layered')


class Config:
    """
    Centralized configuration management for the Whiteboard AI service.
    Values are cached for a short period so a burst of requests reads a
    consistent snapshot of the environment.
    """
    def __init__(self):
        self._cache = {}
        self._cache_timestamp = 0
        self._cache_duration = 30  # Cache for 30 seconds
        self._version = None  # Cached version from VERSION file

    @property
    def VERSION(self) -> str:
        """
        Application version - read from VERSION file (single source of truth).
        Cached after first read.
        """
        if self._version is None:
            try:
                version_file = Path(__file__).parent.parent / 'VERSION'
                self._version = version_file.read_text().strip()
            except OSError as e:
                logger.warning(f"Failed to read VERSION file: {e}")
                self._version = "0.0.0"
        return self._version

    def _get_cached_value(self, key: str, default=None):
        current_time = time.time()
        if current_time - self._cache_timestamp > self._cache_duration:
            self._cache.clear()
            self._cache_timestamp = current_time
        if key not in self._cache:
            self._cache[key] = os.environ.get(key, default)
        return self._cache[key]

    def clear_cache(self):
        """Drop cached values so the next read sees the current environment."""
        self._cache.clear()
        self._cache_timestamp = 0

    # ============================================================================
    # COMPLETION SERVICE
    # ============================================================================

    @property
    def LLM_API_KEY(self) -> Optional[str]:
        api_key = self._get_cached_value('LLM_API_KEY')
        if not api_key or not isinstance(api_key, str):
            return None
        return api_key.strip()

    @property
    def LLM_API_URL(self) -> str:
        """OpenAI-compatible chat completions endpoint"""
        return self._get_cached_value('LLM_API_URL', 'https://api.openai.com/v1/chat/completions')

    @property
    def LLM_MODEL(self) -> str:
        return self._get_cached_value('LLM_MODEL', 'gpt-4o-mini')

    @property
    def LLM_TEMPERATURE(self) -> float:
        """Sampling temperature, clamped to [0.0, 2.0]"""
        try:
            value = float(self._get_cached_value('LLM_TEMPERATURE', '0.7'))
        except ValueError:
            logger.warning("Invalid LLM_TEMPERATURE, using 0.7")
            return 0.7
        return max(0.0, min(2.0, value))

    @property
    def LLM_MAX_TOKENS(self) -> int:
        try:
            return int(self._get_cached_value('LLM_MAX_TOKENS', '1500'))
        except ValueError:
            logger.warning("Invalid LLM_MAX_TOKENS, using 1500")
            return 1500

    @property
    def LLM_TIMEOUT(self) -> float:
        """Total request timeout in seconds"""
        try:
            timeout = float(self._get_cached_value('LLM_TIMEOUT', '45'))
            if timeout < 5 or timeout > 300:
                logger.warning(f"LLM_TIMEOUT {timeout}s out of range, using 45s")
                return 45.0
            return timeout
        except ValueError:
            logger.warning("Invalid LLM_TIMEOUT, using 45s")
            return 45.0

    @property
    def LLM_MAX_RETRIES(self) -> int:
        try:
            return max(1, int(self._get_cached_value('LLM_MAX_RETRIES', '2')))
        except ValueError:
            logger.warning("Invalid LLM_MAX_RETRIES, using 2")
            return 2

    # ============================================================================
    # SERVER
    # ============================================================================

    @property
    def HOST(self) -> str:
        return self._get_cached_value('HOST', '0.0.0.0')

    @property
    def PORT(self) -> int:
        try:
            return int(self._get_cached_value('PORT', '9527'))
        except ValueError:
            logger.warning("Invalid PORT, using 9527")
            return 9527

    @property
    def DEBUG(self) -> bool:
        return self._get_cached_value('DEBUG', 'False').lower() == 'true'

    @property
    def LOG_LEVEL(self) -> str:
        level = self._get_cached_value('LOG_LEVEL', 'INFO').upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            return 'INFO'
        return level

    @property
    def VERBOSE_LOGGING(self) -> bool:
        return self._get_cached_value('VERBOSE_LOGGING', 'False').lower() == 'true'

    # ============================================================================
    # WHITEBOARD GENERATION
    # ============================================================================

    @property
    def DEFAULT_LANGUAGE(self) -> str:
        """Language for fallback content and user-facing messages"""
        language = self._get_cached_value('DEFAULT_LANGUAGE', 'fr').lower()
        if language not in SUPPORTED_LANGUAGES:
            logger.warning(f"Unsupported DEFAULT_LANGUAGE '{language}', using 'fr'")
            return 'fr'
        return language

    @property
    def FLOW_LAYOUT_STRATEGY(self) -> str:
        """'sequence' stacks flow nodes in input order, 'layered' layers them by connections"""
        strategy = self._get_cached_value('FLOW_LAYOUT_STRATEGY', 'sequence').lower()
        if strategy not in FLOW_LAYOUT_STRATEGIES:
            logger.warning(f"Unknown FLOW_LAYOUT_STRATEGY '{strategy}', using 'sequence'")
            return 'sequence'
        return strategy

    # ============================================================================
    # VALIDATION AND HELPERS
    # ============================================================================

    def validate_llm_config(self) -> bool:
        """
        Validate completion service configuration.

        Returns:
            bool: True if an API key and an http(s) endpoint are configured
        """
        if not self.LLM_API_KEY:
            logger.error("LLM_API_KEY not configured")
            return False
        if not self.LLM_API_URL.startswith(('http://', 'https://')):
            logger.error(f"Invalid LLM_API_URL: {self.LLM_API_URL}")
            return False
        return True

    def prepare_llm_messages(self, system_prompt: str, user_prompt: str) -> list:
        """
        Centralized message preparation for the completion client.

        Args:
            system_prompt: The system/instruction prompt (may be empty)
            user_prompt: The user's input prompt

        Returns:
            list: Messages array ready for a chat completion request
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})
        return messages

    def print_config_summary(self):
        """Log a summary of the active configuration (secrets masked)."""
        logger.info("Configuration Summary:")
        logger.info(f"   Version: {self.VERSION}")
        logger.info(f"   Server: {self.HOST}:{self.PORT} (debug={self.DEBUG})")
        logger.info(f"   LLM endpoint: {self.LLM_API_URL}")
        logger.info(f"   LLM model: {self.LLM_MODEL}")
        logger.info(f"   LLM API key: {'set' if self.LLM_API_KEY else 'missing'}")
        logger.info(f"   Default language: {self.DEFAULT_LANGUAGE}")
        logger.info(f"   Flow layout: {self.FLOW_LAYOUT_STRATEGY}")


# Create global configuration instance
config = Config()
