# tests/unit/test_hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging
from unittest.mock import MagicMock

from flowstate.core.errors import TransitionError
from flowstate.core.hooks import HookManager, LoggingHook
from flowstate.core.messages import Message
from flowstate.core.states import State
from flowstate.core.transitions import Transition
from flowstate.interfaces.types import Rejection
from tests.order_domain import OrderEvent, OrderState


def _machine(current=OrderState.PENDING, error=None):
    machine = MagicMock()
    machine.name = "order"
    machine.current_state = State(current)
    machine.error = error
    return machine


def test_hook_manager_fans_out(dummy_hook):
    other = MagicMock()
    manager = HookManager([dummy_hook])
    manager.register_hook(other)
    machine = _machine()
    msg = Message(OrderEvent.SUBMIT)

    manager.execute_on_rejected(machine, msg, Rejection.NO_TRANSITION)

    dummy_hook.on_rejected.assert_called_once_with(machine, msg, Rejection.NO_TRANSITION, None)
    other.on_rejected.assert_called_once_with(machine, msg, Rejection.NO_TRANSITION, None)
    assert manager.hooks == [dummy_hook, other]


def test_hook_manager_skips_missing_methods():
    class OnlyErrors:
        def __init__(self):
            self.errors = []

        def on_error(self, machine, message, transition, error):
            self.errors.append(str(error))

    hook = OnlyErrors()
    manager = HookManager([hook])
    t = Transition(State(OrderState.INIT), State(OrderState.PENDING), OrderEvent.SUBMIT)

    manager.execute_on_rejected(_machine(), Message(OrderEvent.SUBMIT), Rejection.GUARD_REJECTED, t)
    manager.execute_on_error(_machine(), Message(OrderEvent.SUBMIT), t, TransitionError("bad"))

    assert hook.errors == ["bad"]


def test_logging_hook_logs_rejection(caplog):
    hook = LoggingHook()
    with caplog.at_level(logging.INFO, logger="flowstate"):
        hook.on_rejected(_machine(), Message(OrderEvent.SUBMIT), Rejection.NO_TRANSITION, None)

    assert "not accepted in state <OrderState.PENDING: 2> (no_transition)" in caplog.text


def test_logging_hook_logs_terminal(caplog):
    hook = LoggingHook()
    with caplog.at_level(logging.INFO, logger="flowstate"):
        hook.on_rejected(_machine(OrderState.SETTLED), Message(OrderEvent.PAYMENT), Rejection.NOT_RUNNING, None)

    assert "not running" in caplog.text


def test_logging_hook_logs_sticky_error_as_warning(caplog):
    hook = LoggingHook()
    with caplog.at_level(logging.INFO, logger="flowstate"):
        hook.on_rejected(_machine(error="boom"), Message(OrderEvent.PAYMENT), Rejection.MACHINE_ERROR, None)

    assert caplog.records[0].levelno == logging.WARNING
    assert "machine error: boom" in caplog.text


def test_logging_hook_error_includes_source_event_and_text(caplog):
    hook = LoggingHook()
    t = Transition(State(OrderState.PENDING), State(OrderState.SETTLED), OrderEvent.PAYMENT)
    with caplog.at_level(logging.ERROR, logger="flowstate"):
        hook.on_error(_machine(), Message(OrderEvent.PAYMENT), t, TransitionError("declined"))

    record = caplog.records[0]
    assert record.levelno == logging.ERROR
    assert "source: <OrderState.PENDING: 2>" in record.getMessage()
    assert "event: <OrderEvent.PAYMENT: 2>" in record.getMessage()
    assert "err: declined" in record.getMessage()


def test_logging_hook_does_not_repeat_failures(caplog):
    hook = LoggingHook()
    with caplog.at_level(logging.DEBUG, logger="flowstate"):
        hook.on_rejected(_machine(), Message(OrderEvent.PAYMENT), Rejection.ACTION_FAILED, None)

    assert caplog.records == []


def test_logging_hook_uses_given_logger_and_level(caplog):
    log = logging.getLogger("host.orders")
    hook = LoggingHook(log=log, rejected_level=logging.DEBUG)
    with caplog.at_level(logging.DEBUG, logger="host.orders"):
        hook.on_rejected(_machine(), Message(OrderEvent.SUBMIT), Rejection.UNKNOWN_EVENT, None)

    assert caplog.records[0].name == "host.orders"
    assert caplog.records[0].levelno == logging.DEBUG
