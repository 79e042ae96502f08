"""
Configuration Management Module
"""
from .settings import (
    Settings,
    FetchSettings,
    ResolverSettings,
    CompatibilitySettings,
    get_settings,
    get_fetch_settings,
    get_resolver_settings,
    get_compatibility_settings,
)

__all__ = [
    "Settings",
    "FetchSettings",
    "ResolverSettings",
    "CompatibilitySettings",
    "get_settings",
    "get_fetch_settings",
    "get_resolver_settings",
    "get_compatibility_settings",
]
