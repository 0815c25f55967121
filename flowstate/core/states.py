# flowstate/core/states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic

from flowstate.interfaces.protocols import require_identity
from flowstate.interfaces.types import StateID


@dataclass(frozen=True)
class State(Generic[StateID]):
    """
    Immutable wrapper around a host-supplied state identity. Two states are
    equal when their identities are equal, so states can be created freely
    wherever they are needed.
    """

    id: StateID

    def __post_init__(self) -> None:
        require_identity(self.id, "state")

    def __repr__(self) -> str:
        return f"State({self.id!r})"
