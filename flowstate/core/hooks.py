# flowstate/core/hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from flowstate.interfaces.types import Rejection

if TYPE_CHECKING:
    from flowstate.core.messages import Message
    from flowstate.core.state_machine import StateMachine
    from flowstate.core.transitions import Transition
    from flowstate.interfaces.protocols import DiagnosticHook

logger = logging.getLogger(__name__)


class HookManager:
    """
    Manages the registration and execution of diagnostic hooks that observe
    rejected events and guard/action failures. Users can attach logging,
    monitoring, or custom side effects without altering core logic.
    """

    def __init__(self, hooks: Optional[List["DiagnosticHook"]] = None) -> None:
        """
        Initialize with an optional list of hook objects.
        """
        self._hooks: List["DiagnosticHook"] = list(hooks) if hooks else []

    @property
    def hooks(self) -> List["DiagnosticHook"]:
        return list(self._hooks)

    def register_hook(self, hook: "DiagnosticHook") -> None:
        """
        Add a new hook to the manager's list of hooks.

        :param hook: An object implementing some or all DiagnosticHook methods.
        """
        self._hooks.append(hook)

    def execute_on_rejected(
        self,
        machine: "StateMachine",
        message: "Message",
        reason: Rejection,
        transition: Optional["Transition"] = None,
    ) -> None:
        """
        Run all hooks' on_rejected logic.
        """
        for hook in self._hooks:
            if hasattr(hook, "on_rejected"):
                hook.on_rejected(machine, message, reason, transition)

    def execute_on_error(
        self,
        machine: "StateMachine",
        message: "Message",
        transition: "Transition",
        error: BaseException,
    ) -> None:
        """
        Run all hooks' on_error logic when a guard or action fails.
        """
        for hook in self._hooks:
            if hasattr(hook, "on_error"):
                hook.on_error(machine, message, transition, error)


class LoggingHook:
    """
    Default diagnostic hook. Reports rejections and failures through the
    standard logging module; handlers are left to the host application.
    """

    def __init__(self, log: Optional[logging.Logger] = None, rejected_level: int = logging.INFO) -> None:
        """
        :param log: Logger to write to; defaults to this module's logger.
        :param rejected_level: Level for ordinary rejections.
        """
        self._log = log or logger
        self._rejected_level = rejected_level

    def on_rejected(
        self,
        machine: "StateMachine",
        message: "Message",
        reason: Rejection,
        transition: Optional["Transition"],
    ) -> None:
        if reason is Rejection.MACHINE_ERROR:
            self._log.warning("%s: event %r not accepted, machine error: %s", machine.name, message.payload, machine.error)
        elif reason is Rejection.NOT_RUNNING:
            self._log.log(
                self._rejected_level,
                "%s: not running, event %r not accepted in terminal state %r",
                machine.name,
                message.payload,
                machine.current_state.id,
            )
        elif reason.is_failure:
            # Already reported through on_error.
            return
        else:
            self._log.log(
                self._rejected_level,
                "%s: event %r not accepted in state %r (%s)",
                machine.name,
                message.payload,
                machine.current_state.id,
                reason.name.lower(),
            )

    def on_error(
        self,
        machine: "StateMachine",
        message: "Message",
        transition: "Transition",
        error: BaseException,
    ) -> None:
        self._log.error(
            "%s: transition failed, source: %r, event: %r, err: %s",
            machine.name,
            transition.source.id,
            message.payload,
            error,
        )
