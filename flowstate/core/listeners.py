# flowstate/core/listeners.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List, Union

from flowstate.core.errors import ConfigurationError
from flowstate.interfaces.protocols import StateMachineListener
from flowstate.interfaces.types import ListenerFunc

if TYPE_CHECKING:
    from flowstate.core.transitions import Transition

Listener = Union[StateMachineListener, ListenerFunc]


class ListenerRegistry:
    """
    Ordered collection of observers notified after each committed transition.
    Listeners may be StateMachineListener objects or plain callables taking
    the transition. Registering the same listener twice notifies it twice.
    """

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def register(self, listener: Listener) -> None:
        """
        Append a listener.

        :param listener: Object with an on_transition method, or a callable.
        :raises ConfigurationError: If the listener is neither.
        """
        if not isinstance(listener, StateMachineListener) and not callable(listener):
            raise ConfigurationError(f"Listener must implement on_transition or be callable, got {listener!r}")
        self._listeners.append(listener)

    def notify_all(self, transition: "Transition") -> None:
        """
        Call every listener in registration order. Exceptions propagate to
        the caller and stop notification of the remaining listeners.
        """
        for listener in self._listeners:
            if isinstance(listener, StateMachineListener):
                listener.on_transition(transition)
            else:
                listener(transition)

    def __len__(self) -> int:
        return len(self._listeners)

    def __iter__(self) -> Iterator[Listener]:
        return iter(list(self._listeners))
