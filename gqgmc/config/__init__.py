# config/__init__.py
"""
Configuration package for the GQ GMC driver.

This package provides configuration management and settings for the driver.
"""

from gqgmc.config.settings import Settings, SettingsError, settings

__all__ = [
    'Settings',
    'SettingsError',
    'settings'
]
