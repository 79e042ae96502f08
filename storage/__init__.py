"""
Storage Module
Per-run version cache
"""
from .version_cache import VersionCache

__all__ = [
    "VersionCache",
]
