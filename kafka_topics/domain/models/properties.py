"""Parsing of ``key=value`` property tokens into an ordered, read-only map."""
from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from kafka_topics.core.exceptions import MalformedPropertyError

PropertyMap = Mapping[str, str]


def split_property(token: str, option: str) -> tuple[str, str]:
    """Split one ``key=value`` token.

    The token must contain exactly one ``=`` with a non-empty key and a
    non-empty value on either side of it.
    """
    key, sep, value = token.partition("=")
    if not sep or not key or not value or "=" in value:
        raise MalformedPropertyError(option, token)
    return key, value


def parse_properties(tokens: Iterable[str] | None, option: str) -> PropertyMap:
    """Build a PropertyMap from tokens in command-line order.

    A repeated key keeps its first position and takes the last value.
    """
    props: dict[str, str] = {}
    for token in tokens or ():
        key, value = split_property(token, option)
        props[key] = value
    return MappingProxyType(props)
