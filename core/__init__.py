"""
Core package: configuration, security, persistence plumbing, errors and middleware.
Kept apart from the API and service layers so each can be built and tested alone.
"""

from core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
