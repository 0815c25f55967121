# flowstate/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Callable, Hashable, TypeVar

if TYPE_CHECKING:
    from flowstate.core.transitions import StateContext

StateID = TypeVar("StateID", bound=Hashable)
EventID = TypeVar("EventID", bound=Hashable)

# Callback Types
Guard = Callable[["StateContext"], bool]
Action = Callable[["StateContext"], Any]
ListenerFunc = Callable[..., None]


class Stage(Enum):
    """Phase of transition evaluation a guard or action is being invoked in."""

    GUARD = auto()
    ACTION = auto()


class Rejection(Enum):
    """
    Reason ``send_event`` returned False.

    MACHINE_ERROR, GUARD_FAILED and ACTION_FAILED accompany a sticky error;
    the others are ordinary, recoverable rejections.
    """

    MACHINE_ERROR = auto()  # Sticky error already set
    NOT_RUNNING = auto()  # Terminal state reached
    UNKNOWN_EVENT = auto()  # No transitions registered for the event
    NO_TRANSITION = auto()  # No transition from the current state
    GUARD_REJECTED = auto()  # Guard returned False
    GUARD_FAILED = auto()  # Guard raised
    ACTION_FAILED = auto()  # Action raised

    @property
    def is_failure(self) -> bool:
        return self in (Rejection.GUARD_FAILED, Rejection.ACTION_FAILED)
