"""flowstate: a small embeddable finite state machine engine.

Machines are assembled with a staged builder, driven synchronously with
``send_event`` and observed through transition listeners and diagnostic
hooks. Guards and actions are plain callables receiving a StateContext.
"""

from flowstate.core.builder import StateMachineBuilder
from flowstate.core.errors import ConfigurationError, FSMError, TransitionError
from flowstate.core.hooks import HookManager, LoggingHook
from flowstate.core.listeners import ListenerRegistry
from flowstate.core.messages import Message, MessageBuilder
from flowstate.core.state_machine import StateMachine
from flowstate.core.states import State
from flowstate.core.transitions import StateContext, Transition, TransitionBuilder
from flowstate.interfaces.protocols import DiagnosticHook, Identity, StateMachineListener
from flowstate.interfaces.types import Rejection, Stage

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DiagnosticHook",
    "FSMError",
    "HookManager",
    "Identity",
    "ListenerRegistry",
    "LoggingHook",
    "Message",
    "MessageBuilder",
    "Rejection",
    "Stage",
    "State",
    "StateContext",
    "StateMachine",
    "StateMachineBuilder",
    "StateMachineListener",
    "Transition",
    "TransitionBuilder",
    "TransitionError",
]
