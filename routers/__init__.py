"""
Whiteboard AI FastAPI Routers
=============================

This package contains all FastAPI route modules organized by functionality.

Routers:
- whiteboard.py: Intent classification and diagram generation endpoints
"""

__all__ = [
    "whiteboard",
]
