# flowstate/core/state_machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Dict, Generic, Iterable, List, Optional, Sequence, Tuple

from flowstate.core.errors import ConfigurationError, TransitionError
from flowstate.core.hooks import HookManager, LoggingHook
from flowstate.core.listeners import Listener, ListenerRegistry
from flowstate.core.messages import Message
from flowstate.core.states import State
from flowstate.core.transitions import Transition
from flowstate.interfaces.protocols import DiagnosticHook
from flowstate.interfaces.types import EventID, Rejection, StateID

logger = logging.getLogger(__name__)


class StateMachine(Generic[StateID, EventID]):
    """
    A flat, synchronous finite state machine.

    The machine starts in its initial state and moves between states only
    inside send_event. Once the terminal state is reached it accepts no
    further events. If a guard or action fails, the failure is recorded as a
    sticky error and the machine rejects every later event; it must be
    discarded and rebuilt by the host.

    Instances are not thread-safe. Callers sharing a machine across threads
    must serialize access themselves.
    """

    def __init__(
        self,
        initial_state: State[StateID],
        terminal_state: State[StateID],
        transitions: Iterable[Transition[StateID, EventID]],
        name: str = "statemachine",
        hooks: Optional[List[DiagnosticHook]] = None,
    ) -> None:
        """
        Usually constructed through StateMachineBuilder.

        :param initial_state: The state in which this machine begins.
        :param terminal_state: The sink state; reaching it stops the machine.
        :param transitions: Transitions in priority order. Duplicates by
            (source, target, event) are dropped, first occurrence wins.
        :param name: Label used in diagnostics.
        :param hooks: Diagnostic hooks. None installs a LoggingHook; an empty
            list disables diagnostics.
        :raises ConfigurationError: If a state is missing or no transitions are given.
        """
        if not isinstance(initial_state, State):
            raise ConfigurationError("StateMachine must have an initial state")
        if not isinstance(terminal_state, State):
            raise ConfigurationError("StateMachine must have a terminal state")

        self._name = name
        self._initial_state = initial_state
        self._terminal_state = terminal_state
        self._current_state = initial_state
        self._error: Optional[str] = None
        self._transitions_by_event = _index_transitions(transitions)
        if not self._transitions_by_event:
            raise ConfigurationError("StateMachine must have at least one transition")
        self._listeners = ListenerRegistry()
        self._hooks = HookManager([LoggingHook()] if hooks is None else hooks)

    @property
    def name(self) -> str:
        return self._name

    @property
    def initial_state(self) -> State[StateID]:
        return self._initial_state

    @property
    def terminal_state(self) -> State[StateID]:
        return self._terminal_state

    @property
    def current_state(self) -> State[StateID]:
        """Get the current active state."""
        return self._current_state

    @property
    def error(self) -> Optional[str]:
        """The sticky error recorded by a failed guard or action, if any."""
        return self._error

    @property
    def hook_manager(self) -> HookManager:
        return self._hooks

    def is_running(self) -> bool:
        """True until the terminal state is reached."""
        return self._current_state != self._terminal_state

    def has_error(self) -> bool:
        return self._error is not None

    def register_listener(self, listener: Listener) -> None:
        """
        Register an observer to be notified after every committed transition.

        :param listener: StateMachineListener or callable taking the transition.
        """
        self._listeners.register(listener)

    def all_transitions(self) -> List[Transition[StateID, EventID]]:
        """All transitions, grouped by event in the order events were first seen."""
        return [t for group in self._transitions_by_event.values() for t in group]

    def transitions_for(self, event: EventID) -> Tuple[Transition[StateID, EventID], ...]:
        """Transitions triggered by an event, in evaluation order."""
        return self._transitions_by_event.get(event, ())

    def send_event(self, message: Message[EventID]) -> bool:
        """
        Offer an event to the machine.

        Only the first transition for the event whose source is the current
        state is considered; if its guard rejects, no alternative is tried.

        :param message: The event and its headers.
        :return: True if a transition committed, False if the event was rejected.
        """
        if self._error is not None:
            return self._reject(message, Rejection.MACHINE_ERROR)
        if not self.is_running():
            return self._reject(message, Rejection.NOT_RUNNING)

        candidates = self._transitions_by_event.get(message.payload)
        if not candidates:
            return self._reject(message, Rejection.UNKNOWN_EVENT)

        transition = self._select(candidates)
        if transition is None:
            return self._reject(message, Rejection.NO_TRANSITION)

        try:
            if not transition.evaluate_guard(message):
                return self._reject(message, Rejection.GUARD_REJECTED, transition)
        except TransitionError as e:
            return self._fail(message, transition, e, Rejection.GUARD_FAILED)

        try:
            transition.execute_action(message)
        except TransitionError as e:
            return self._fail(message, transition, e, Rejection.ACTION_FAILED)

        self._current_state = transition.target
        logger.debug("%s: %r committed", self._name, transition)
        self._listeners.notify_all(transition)
        return True

    def _select(self, candidates: Sequence[Transition[StateID, EventID]]) -> Optional[Transition[StateID, EventID]]:
        for transition in candidates:
            if transition.source == self._current_state:
                return transition
        return None

    def _reject(
        self, message: Message[EventID], reason: Rejection, transition: Optional[Transition[StateID, EventID]] = None
    ) -> bool:
        self._hooks.execute_on_rejected(self, message, reason, transition)
        return False

    def _fail(
        self, message: Message[EventID], transition: Transition[StateID, EventID], error: TransitionError, reason: Rejection
    ) -> bool:
        self._error = str(error)
        self._hooks.execute_on_error(self, message, transition, error)
        return self._reject(message, reason, transition)

    def __repr__(self) -> str:
        return (
            f"StateMachine(name={self._name!r}, current={self._current_state!r}, "
            f"terminal={self._terminal_state!r}, error={self._error!r})"
        )


def _index_transitions(
    transitions: Iterable[Transition[StateID, EventID]],
) -> Dict[EventID, Tuple[Transition[StateID, EventID], ...]]:
    """Group transitions by event, dropping duplicates while keeping insertion order."""
    grouped: Dict[EventID, List[Transition[StateID, EventID]]] = {}
    for transition in transitions:
        if not isinstance(transition, Transition):
            raise ConfigurationError(f"Expected a Transition, got {transition!r}")
        group = grouped.setdefault(transition.event, [])
        if transition in group:
            logger.debug("Dropping duplicate transition %r", transition)
            continue
        group.append(transition)
    return {event: tuple(group) for event, group in grouped.items()}
