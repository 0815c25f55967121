# flowstate/core/messages.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Generic, Mapping, Optional

from flowstate.core.errors import ConfigurationError
from flowstate.interfaces.protocols import require_identity
from flowstate.interfaces.types import EventID


class Message(Generic[EventID]):
    """
    One inbound event occurrence: the event identity plus optional string
    headers carrying context for guards and actions to inspect.
    """

    __slots__ = ("_payload", "_headers")

    def __init__(self, payload: EventID, headers: Optional[Mapping[str, str]] = None) -> None:
        """
        :param payload: The event identity this message carries.
        :param headers: Optional non-empty mapping of string keys to string values.
        :raises ConfigurationError: If headers is empty or holds non-string items.
        """
        self._payload = require_identity(payload, "event")
        if headers is None:
            self._headers = None
        else:
            if not headers:
                raise ConfigurationError("Message headers must be non-empty when present")
            for key, value in headers.items():
                _check_header(key, value)
            self._headers = MappingProxyType(dict(headers))

    @property
    def payload(self) -> EventID:
        """The event identity."""
        return self._payload

    @property
    def headers(self) -> Optional[Mapping[str, str]]:
        """Read-only view of the headers, or None if the message has none."""
        return self._headers

    def get_header(self, key: str) -> Optional[str]:
        """
        Look up a single header.

        :param key: Header name.
        :return: The header value, or None if absent.
        """
        if self._headers is None:
            return None
        return self._headers.get(key)

    def __repr__(self) -> str:
        headers = dict(self._headers) if self._headers is not None else None
        return f"Message(payload={self._payload!r}, headers={headers!r})"


class MessageBuilder(Generic[EventID]):
    """
    Fluent builder for messages. Headers may be added repeatedly; a later
    value for the same key replaces the earlier one.
    """

    def __init__(self) -> None:
        self._payload: Optional[EventID] = None
        self._headers: Dict[str, str] = {}

    def payload(self, payload: EventID) -> "MessageBuilder[EventID]":
        self._payload = require_identity(payload, "event")
        return self

    def add_header(self, key: str, value: str) -> "MessageBuilder[EventID]":
        _check_header(key, value)
        self._headers[key] = value
        return self

    def build(self) -> Message[EventID]:
        """
        :raises ConfigurationError: If no payload was set.
        """
        if self._payload is None:
            raise ConfigurationError("Message payload absent")
        return Message(self._payload, self._headers or None)


def _check_header(key: object, value: object) -> None:
    if not isinstance(key, str) or not isinstance(value, str):
        raise ConfigurationError(f"Message headers must map str to str, got {key!r}: {value!r}")
