# tests/unit/test_errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from flowstate.core.errors import ConfigurationError, FSMError, TransitionError


def test_error_hierarchy():
    assert issubclass(ConfigurationError, FSMError)
    assert issubclass(TransitionError, FSMError)
    assert not issubclass(ConfigurationError, TransitionError)


def test_exceptions_instantiation():
    e = ConfigurationError("source absent")
    assert str(e) == "source absent"
    e = TransitionError("payment declined")
    assert str(e) == "payment declined"
