"""
Configuration layer - Settings and constants
"""

from api_recommender.config.settings import settings, Settings, PROJECT_ROOT, resolve_path

__all__ = [
    "settings",
    "Settings",
    "PROJECT_ROOT",
    "resolve_path",
]
