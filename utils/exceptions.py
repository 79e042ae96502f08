"""
Custom Exceptions
Exception hierarchy for topic pack resolution
"""
from typing import Sequence


class TopicPackError(Exception):
    """Base exception for the topic pack resolver"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(TopicPackError):
    """Invalid or pathological configuration"""
    pass


class SkillClosureLimitError(ConfigurationError):
    """The skill closure kept growing past the configured number of rounds"""

    def __init__(self, message: str, rounds: int = None, **kwargs):
        super().__init__(message, kwargs)
        self.rounds = rounds


class FetchError(TopicPackError):
    """Remote fetch failed at the transport level"""

    def __init__(self, message: str, structure: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.structure = structure


class LogicError(TopicPackError):
    """An internal invariant was violated (programming error, never data error)"""
    pass


class IncompatibleTopicError(TopicPackError):
    """No version of a topic has a fully compatible closure"""

    def __init__(self, topic_id: str, failures: Sequence = ()):
        self.topic_id = topic_id
        self.failures = list(failures)
        report = "\n".join(f"- {failure}" for failure in self.failures)
        super().__init__(
            f"Failed to load complete topic pack with ID: {topic_id}. "
            f"Encountered failures:\n{report}."
        )
