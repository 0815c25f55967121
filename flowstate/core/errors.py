# flowstate/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details


class FSMError(Exception):
    """
    Base exception class for errors within the flowstate library.
    """


class ConfigurationError(FSMError):
    """
    Raised when a machine, transition or message is assembled incorrectly:
    a required field is missing or a builder step is called out of order.
    Always indicates a defect in the calling code.
    """


class TransitionError(FSMError):
    """
    Raised by a guard or action to signal that a transition cannot be completed.
    The state machine records the message as its sticky error.
    """
