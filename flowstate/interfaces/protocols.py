# flowstate/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from __future__ import annotations

from collections.abc import Hashable
from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

from flowstate.core.errors import ConfigurationError
from flowstate.interfaces.types import Rejection

if TYPE_CHECKING:
    from flowstate.core.messages import Message
    from flowstate.core.state_machine import StateMachine
    from flowstate.core.transitions import Transition


@runtime_checkable
class Identity(Protocol):
    """
    Contract for state and event identity values.

    Runtime Invariants:
    - Equal identities hash equally and never change after creation.
    - repr() is stable so diagnostics are reproducible.

    Enum members, strings and ints all satisfy it.
    """

    def __eq__(self, other: object) -> bool: ...

    def __hash__(self) -> int: ...

    def __repr__(self) -> str: ...


@runtime_checkable
class StateMachineListener(Protocol):
    """
    Observer notified after a transition commits.

    Error Handling:
    - Exceptions raised here are not caught by the machine; they propagate
      to the caller of send_event after the state change has committed.
    """

    def on_transition(self, transition: "Transition") -> None: ...


@runtime_checkable
class DiagnosticHook(Protocol):
    """
    Observer of rejected events and guard/action failures.

    Both methods are optional on concrete hooks; missing ones are skipped.
    """

    def on_rejected(
        self,
        machine: "StateMachine",
        message: "Message",
        reason: Rejection,
        transition: Optional["Transition"],
    ) -> None: ...

    def on_error(
        self,
        machine: "StateMachine",
        message: "Message",
        transition: "Transition",
        error: BaseException,
    ) -> None: ...


def require_identity(value: Any, kind: str) -> Any:
    """
    Check that a value can serve as a state or event identity.

    :param value: The candidate identity.
    :param kind: "state" or "event", used in the error message.
    :return: The value unchanged.
    :raises ConfigurationError: If the value is None or unhashable.
    """
    if value is None:
        raise ConfigurationError(f"{kind} identity must not be None")
    if not isinstance(value, Hashable):
        raise ConfigurationError(f"{kind} identity must be hashable, got {type(value).__name__}")
    try:
        hash(value)
    except TypeError as e:
        raise ConfigurationError(f"{kind} identity must be hashable: {e}") from e
    return value
