# Copyright 2025 Stochnoise Development Team
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Trivial tests on our exceptions."""

import pytest

from stochnoise.exceptions import (
    ConfigurationError,
    PropertyMismatchError,
    SimulationFailedError,
    StateAllocationError,
    StochNoiseError,
    StochNoiseValueError,
)


@pytest.mark.parametrize(
    "exc_type, builtin",
    [
        (StochNoiseValueError, ValueError),
        (ConfigurationError, ValueError),
        (PropertyMismatchError, RuntimeError),
        (StateAllocationError, MemoryError),
        (SimulationFailedError, RuntimeError),
    ],
)
def test_hierarchy(exc_type, builtin):
    assert issubclass(exc_type, StochNoiseError)
    assert issubclass(exc_type, builtin)


def test_property_mismatch_message():
    err = PropertyMismatchError(
        expected=[(0, "00")], received=[(0, "11")], run_id=4
    )
    assert err.run_id == 4
    assert str(err) == (
        "Run 4 recorded the properties [(0, '11')] but every run must "
        "record [(0, '00')]."
    )
    with pytest.raises(StochNoiseError, match="Run 4"):
        raise err


def test_raises_all(helpers):
    with helpers.raises_all(
        [ValueError, StochNoiseError], match="invalid"
    ):
        raise ConfigurationError("invalid configuration")
    # A builtin error alone isn't enough
    with pytest.raises(AssertionError):
        with helpers.raises_all(
            [ValueError, StochNoiseError], match="invalid"
        ):
            raise ValueError("invalid value")
