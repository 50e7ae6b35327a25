"""
Configuration Package

Environment-driven settings for the Whiteboard AI service
(Config class and the shared config instance).
"""

from .settings import Config, config, SUPPORTED_LANGUAGES, FLOW_LAYOUT_STRATEGIES

__all__ = [
    'Config',
    'config',
    'SUPPORTED_LANGUAGES',
    'FLOW_LAYOUT_STRATEGIES',
]
