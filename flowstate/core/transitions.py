# flowstate/core/transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Generic, Optional

from flowstate.core.errors import ConfigurationError, TransitionError
from flowstate.core.messages import Message
from flowstate.core.states import State
from flowstate.interfaces.protocols import require_identity
from flowstate.interfaces.types import Action, EventID, Guard, Stage, StateID


class StateContext(Generic[StateID, EventID]):
    """
    What a guard or action sees while a transition is being evaluated: the
    transition itself, the message that triggered it and the current stage.
    """

    __slots__ = ("_transition", "_message", "_stage")

    def __init__(self, transition: "Transition[StateID, EventID]", message: Message[EventID], stage: Stage) -> None:
        self._transition = transition
        self._message = message
        self._stage = stage

    @property
    def transition(self) -> "Transition[StateID, EventID]":
        return self._transition

    @property
    def message(self) -> Message[EventID]:
        return self._message

    @property
    def stage(self) -> Stage:
        return self._stage


class Transition(Generic[StateID, EventID]):
    """
    An edge from a source state to a target state, triggered by an event and
    optionally gated by a guard and accompanied by an action.

    Two transitions are equal when source, target and event are equal; the
    guard and action take no part in equality or hashing.
    """

    __slots__ = ("_source", "_target", "_event", "_guard", "_action")

    def __init__(
        self,
        source: State[StateID],
        target: State[StateID],
        event: EventID,
        guard: Optional[Guard] = None,
        action: Optional[Action] = None,
    ) -> None:
        """
        :param source: The origin State of this transition.
        :param target: The destination State of this transition.
        :param event: Identity of the event that triggers it.
        :param guard: Predicate taking a StateContext; the transition is only taken if it returns True.
        :param action: Callable taking a StateContext, run before the state change commits.
        :raises ConfigurationError: If a field has the wrong type.
        """
        _check_state(source, "source")
        _check_state(target, "target")
        if guard is not None and not callable(guard):
            raise ConfigurationError(f"guard must be callable, got {guard!r}")
        if action is not None and not callable(action):
            raise ConfigurationError(f"action must be callable, got {action!r}")
        self._source = source
        self._target = target
        self._event = require_identity(event, "event")
        self._guard = guard
        self._action = action

    @property
    def source(self) -> State[StateID]:
        """The source state of the transition."""
        return self._source

    @property
    def target(self) -> State[StateID]:
        """The target state of the transition."""
        return self._target

    @property
    def event(self) -> EventID:
        return self._event

    @property
    def guard(self) -> Optional[Guard]:
        return self._guard

    @property
    def action(self) -> Optional[Action]:
        return self._action

    def evaluate_guard(self, message: Message[EventID]) -> bool:
        """
        Evaluate the guard for the given message. A transition without a
        guard always passes.

        :param message: The triggering message.
        :return: True if the transition may be taken.
        :raises TransitionError: If the guard raises.
        """
        if self._guard is None:
            return True
        try:
            return bool(self._guard(StateContext(self, message, Stage.GUARD)))
        except TransitionError:
            raise
        except Exception as e:
            raise TransitionError(_describe(e)) from e

    def execute_action(self, message: Message[EventID]) -> None:
        """
        Run the action, if any, for the given message.

        :param message: The triggering message.
        :raises TransitionError: If the action raises.
        """
        if self._action is None:
            return
        try:
            self._action(StateContext(self, message, Stage.ACTION))
        except TransitionError:
            raise
        except Exception as e:
            raise TransitionError(_describe(e)) from e

    def _key(self) -> tuple:
        return (self._source, self._target, self._event)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transition):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"Transition({self._source.id!r} --{self._event!r}--> {self._target.id!r})"


class TransitionBuilder(Generic[StateID, EventID]):
    """
    Accumulates the fields of one transition in order (source, target, event,
    then optional action and guard) and yields an immutable Transition.
    """

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self._source: Optional[State[StateID]] = None
        self._target: Optional[State[StateID]] = None
        self._event: Optional[EventID] = None
        self._action: Optional[Action] = None
        self._guard: Optional[Guard] = None

    @property
    def has_source(self) -> bool:
        return self._source is not None

    @property
    def has_target(self) -> bool:
        return self._target is not None

    @property
    def has_event(self) -> bool:
        return self._event is not None

    def source(self, source: State[StateID]) -> "TransitionBuilder[StateID, EventID]":
        _check_state(source, "source")
        self._source = source
        return self

    def target(self, target: State[StateID]) -> "TransitionBuilder[StateID, EventID]":
        self._require("set target", "source")
        _check_state(target, "target")
        self._target = target
        return self

    def event(self, event: EventID) -> "TransitionBuilder[StateID, EventID]":
        self._require("set event", "source", "target")
        self._event = require_identity(event, "event")
        return self

    def action(self, action: Optional[Action]) -> "TransitionBuilder[StateID, EventID]":
        self._require("set action", "source", "target", "event")
        if action is not None and not callable(action):
            raise ConfigurationError(f"action must be callable, got {action!r}")
        self._action = action
        return self

    def guard(self, guard: Optional[Guard]) -> "TransitionBuilder[StateID, EventID]":
        self._require("set guard", "source", "target", "event")
        if guard is not None and not callable(guard):
            raise ConfigurationError(f"guard must be callable, got {guard!r}")
        self._guard = guard
        return self

    def build(self) -> Transition[StateID, EventID]:
        """
        Produce the transition and reset the builder.

        :raises ConfigurationError: If source, target or event is absent.
        """
        self._require("build transition", "source", "target", "event")
        transition = Transition(self._source, self._target, self._event, guard=self._guard, action=self._action)
        self._reset()
        return transition

    def _require(self, step: str, *fields: str) -> None:
        for name in fields:
            if getattr(self, f"_{name}") is None:
                raise ConfigurationError(f"Cannot {step}: {name} absent")


def _check_state(value: object, role: str) -> None:
    if not isinstance(value, State):
        raise ConfigurationError(f"{role} must be a State, got {value!r}")


def _describe(error: BaseException) -> str:
    text = str(error)
    return text if text else type(error).__name__
