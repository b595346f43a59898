"""Error taxonomy for the topic tool.

Every class here maps to process exit status 1. Failures reported by the
broker are not exceptions at this layer; they come back as a failed
:class:`~kafka_topics.domain.models.request.OperationResult`.
"""
from __future__ import annotations


class TopicToolError(Exception):
    """Base class for errors detected before any admin call is made."""

    exit_code: int = 1


class UsageError(TopicToolError):
    """Missing, conflicting or malformed command-line options."""


class MalformedPropertyError(UsageError):
    """A ``key=value`` token that does not split into a key and a value.

    Attributes
    ----------
    option : str
        The option group the token came from, e.g. ``--topic-props``.
    token : str
        The offending token as typed.
    """

    def __init__(self, option: str, token: str) -> None:
        self.option = option
        self.token = token
        super().__init__(f"Wrong option for {option}! MUST follow with key=value format!")


class AdminConfigError(TopicToolError):
    """An admin-client property whose value has the wrong type."""

    def __init__(self, key: str, value: str, expected: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Wrong value for admin config '{key}': expected {expected}, got '{value}'")
