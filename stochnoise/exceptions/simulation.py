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
"""Errors raised while configuring or running a stochastic simulation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from stochnoise.exceptions.base import StochNoiseError, StochNoiseValueError


class ConfigurationError(StochNoiseValueError):
    """An invalid simulation or noise configuration.

    Raised eagerly, when the offending object is built. Values are never
    clamped into range.
    """

    pass


@dataclass
class PropertyMismatchError(StochNoiseError, RuntimeError):
    """A trajectory recorded properties under a different key scheme.

    Attributes:
        expected: The (ordinal, label) keys every trajectory must produce.
        received: The keys that were actually recorded.
        run_id: The run that produced the offending record.
    """

    expected: Sequence[tuple[int, str]]
    received: Sequence[tuple[int, str]]
    run_id: int

    def __str__(self) -> str:
        return (
            f"Run {self.run_id} recorded the properties {list(self.received)}"
            f" but every run must record {list(self.expected)}."
        )


class StateAllocationError(StochNoiseError, MemoryError):
    """The state engine could not allocate a state."""

    pass


class SimulationFailedError(StochNoiseError, RuntimeError):
    """At least one worker failed; no partial result is returned."""

    pass
