"""
Core agent functionality for Whiteboard AI

This module contains the base agent class, the intent classifier, the
layout engine, the materializer and common utilities used by all agents.
"""

from .base_agent import BaseAgent, DiagramBuild
from .intent_classifier import Intent, classify, is_creation_request
from .agent_utils import *

__all__ = ['BaseAgent', 'DiagramBuild', 'Intent', 'classify', 'is_creation_request']
