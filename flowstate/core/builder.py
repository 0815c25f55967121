# flowstate/core/builder.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Staged construction of state machines.

Each stage of the builder is its own class exposing only the calls that are
valid at that point, so an out-of-order call fails with AttributeError on the
spot and a missing prerequisite fails with ConfigurationError:

    machine = (
        StateMachineBuilder(name="order")
        .init(State(Order.INIT))
        .transitions()
        .source(State(Order.INIT)).target(State(Order.PENDING)).event(Event.SUBMIT)
        .action(record_submit).guard(None)
        .and_()
        .source(State(Order.PENDING)).target(State(Order.SETTLED)).event(Event.PAYMENT)
        .action(record_payment).guard(payment_ok)
        .done()
        .end(State(Order.SETTLED))
        .build()
    )

Stage objects are single-use. Holding on to an earlier stage and calling it
again raises ConfigurationError.
"""

from __future__ import annotations

import logging
from typing import Generic, List, Optional

from flowstate.core.errors import ConfigurationError
from flowstate.core.state_machine import StateMachine
from flowstate.core.states import State
from flowstate.core.transitions import Transition, TransitionBuilder
from flowstate.interfaces.protocols import DiagnosticHook
from flowstate.interfaces.types import Action, EventID, Guard, StateID

logger = logging.getLogger(__name__)


class _BuildContext(Generic[StateID, EventID]):
    """Configuration accumulated across stages."""

    def __init__(self, name: str, hooks: Optional[List[DiagnosticHook]]) -> None:
        self.name = name
        self.hooks = hooks
        self.initial: Optional[State[StateID]] = None
        self.terminal: Optional[State[StateID]] = None
        self.transitions: List[Transition[StateID, EventID]] = []
        self.transition_builder: Optional[TransitionBuilder[StateID, EventID]] = None

    def current_builder(self) -> TransitionBuilder[StateID, EventID]:
        if self.transition_builder is None:
            raise ConfigurationError("No transition is open")
        return self.transition_builder

    def finalize_transition(self) -> None:
        self.transitions.append(self.current_builder().build())
        self.transition_builder = None


class _Stage(Generic[StateID, EventID]):
    """Base for builder stages; a stage may be advanced from only once."""

    def __init__(self, ctx: _BuildContext[StateID, EventID]) -> None:
        self._ctx = ctx
        self._spent = False

    def _take(self) -> _BuildContext[StateID, EventID]:
        if self._spent:
            raise ConfigurationError(f"{type(self).__name__.lstrip('_')} stage already used")
        self._spent = True
        return self._ctx


class StateMachineBuilder(_Stage[StateID, EventID]):
    """
    Entry point of the staged builder. Only init() is available here.
    """

    def __init__(self, name: str = "statemachine", hooks: Optional[List[DiagnosticHook]] = None) -> None:
        """
        :param name: Label for the built machine, used in diagnostics.
        :param hooks: Diagnostic hooks passed to the built machine.
        """
        super().__init__(_BuildContext(name, hooks))

    def init(self, initial: State[StateID]) -> "TransitionBatchStage[StateID, EventID]":
        """
        Set the initial state.

        :raises ConfigurationError: If initial is not a State.
        """
        if not isinstance(initial, State):
            raise ConfigurationError(f"Initial state must be a State, got {initial!r}")
        ctx = self._take()
        ctx.initial = initial
        return TransitionBatchStage(ctx)


class TransitionBatchStage(_Stage[StateID, EventID]):
    def transitions(self) -> "SourceStage[StateID, EventID]":
        """Open the batch of transitions."""
        ctx = self._take()
        if ctx.initial is None:
            raise ConfigurationError("Initial state absent")
        ctx.transition_builder = TransitionBuilder()
        return SourceStage(ctx)


class SourceStage(_Stage[StateID, EventID]):
    def source(self, source: State[StateID]) -> "TargetStage[StateID, EventID]":
        ctx = self._take()
        ctx.current_builder().source(source)
        return TargetStage(ctx)


class TargetStage(_Stage[StateID, EventID]):
    def target(self, target: State[StateID]) -> "EventStage[StateID, EventID]":
        ctx = self._take()
        ctx.current_builder().target(target)
        return EventStage(ctx)


class EventStage(_Stage[StateID, EventID]):
    def event(self, event: EventID) -> "ActionStage[StateID, EventID]":
        ctx = self._take()
        ctx.current_builder().event(event)
        return ActionStage(ctx)


class ActionStage(_Stage[StateID, EventID]):
    def action(self, action: Optional[Action]) -> "GuardStage[StateID, EventID]":
        """
        :param action: Callable taking a StateContext, or None for no action.
        """
        ctx = self._take()
        ctx.current_builder().action(action)
        return GuardStage(ctx)


class GuardStage(_Stage[StateID, EventID]):
    def guard(self, guard: Optional[Guard]) -> "TransitionEndStage[StateID, EventID]":
        """
        :param guard: Predicate taking a StateContext, or None for no guard.
        """
        ctx = self._take()
        ctx.current_builder().guard(guard)
        return TransitionEndStage(ctx)


class TransitionEndStage(_Stage[StateID, EventID]):
    def and_(self) -> SourceStage[StateID, EventID]:
        """Finalize the current transition and start another."""
        ctx = self._take()
        ctx.finalize_transition()
        ctx.transition_builder = TransitionBuilder()
        return SourceStage(ctx)

    def done(self) -> "MachineEndStage[StateID, EventID]":
        """Finalize the current transition and close the batch."""
        ctx = self._take()
        ctx.finalize_transition()
        return MachineEndStage(ctx)


class MachineEndStage(_Stage[StateID, EventID]):
    def end(self, terminal: State[StateID]) -> "MachineFactoryStage[StateID, EventID]":
        """
        Set the terminal state.

        :raises ConfigurationError: If the initial state or every transition is absent.
        """
        ctx = self._take()
        if ctx.initial is None:
            raise ConfigurationError("Initial state absent")
        if not ctx.transitions:
            raise ConfigurationError("At least one transition is required")
        if not isinstance(terminal, State):
            raise ConfigurationError(f"Terminal state must be a State, got {terminal!r}")
        ctx.terminal = terminal
        return MachineFactoryStage(ctx)


class MachineFactoryStage(_Stage[StateID, EventID]):
    def build(self) -> StateMachine[StateID, EventID]:
        """
        Produce the state machine. Transitions are indexed by event;
        duplicates by (source, target, event) keep only the first.
        """
        ctx = self._take()
        if ctx.initial is None:
            raise ConfigurationError("Initial state absent")
        if ctx.terminal is None:
            raise ConfigurationError("Terminal state absent")
        machine = StateMachine(ctx.initial, ctx.terminal, ctx.transitions, name=ctx.name, hooks=ctx.hooks)
        logger.debug("Built %r with %d transitions", machine, len(machine.all_transitions()))
        return machine
