# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest

from flowstate.core.builder import StateMachineBuilder
from flowstate.core.states import State
from tests.order_domain import OrderEvent, OrderState, Recorder, payment_ok


@pytest.fixture
def init_state():
    return State(OrderState.INIT)


@pytest.fixture
def pending_state():
    return State(OrderState.PENDING)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def dummy_hook():
    """A diagnostic hook mock recording on_rejected and on_error calls."""
    hook = MagicMock()
    hook.on_rejected = MagicMock()
    hook.on_error = MagicMock()
    return hook


@pytest.fixture
def order_machine_factory(recorder):
    """Returns a factory building the order lifecycle machine."""

    def _factory(hooks=None):
        return (
            StateMachineBuilder(name="order", hooks=hooks)
            .init(State(OrderState.INIT))
            .transitions()
            .source(State(OrderState.INIT))
            .target(State(OrderState.PENDING))
            .event(OrderEvent.SUBMIT)
            .action(recorder.action("submit"))
            .guard(None)
            .and_()
            .source(State(OrderState.PENDING))
            .target(State(OrderState.SETTLED))
            .event(OrderEvent.PAYMENT)
            .action(recorder.action("pay"))
            .guard(payment_ok)
            .and_()
            .source(State(OrderState.PENDING))
            .target(State(OrderState.FAILED))
            .event(OrderEvent.TIMEOUT)
            .action(recorder.action("timeout"))
            .guard(None)
            .done()
            .end(State(OrderState.SETTLED))
            .build()
        )

    return _factory


@pytest.fixture
def order_machine(order_machine_factory):
    return order_machine_factory(hooks=[])
