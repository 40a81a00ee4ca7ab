"""
Configuration Package
Provides centralized configuration for all services.
"""

from .settings import Settings, settings

__all__ = [
    'Settings',
    'settings',
]
