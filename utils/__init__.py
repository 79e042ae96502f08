"""
Utils Module
Shared helpers: logging and exceptions
"""
from .logger import setup_logger
from .exceptions import (
    TopicPackError,
    ConfigurationError,
    SkillClosureLimitError,
    FetchError,
    LogicError,
    IncompatibleTopicError,
)

__all__ = [
    "setup_logger",
    "TopicPackError",
    "ConfigurationError",
    "SkillClosureLimitError",
    "FetchError",
    "LogicError",
    "IncompatibleTopicError",
]
