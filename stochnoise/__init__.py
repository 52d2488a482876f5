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
"""Stochastic trajectory sampling of noisy quantum circuits."""

from stochnoise._version import __version__ as __version__
from stochnoise.circuit import Circuit, Operation
from stochnoise.noise_model import ErrorChannel, NoiseEffect, NoiseModel
from stochnoise.result import SampledResult, StochasticResults
from stochnoise.simulation import (
    QutipStateEngine,
    StochasticConfig,
    StochasticNoiseSimulator,
)

# Exposing relevant submodules
from stochnoise import (
    backend as backend,
    exceptions as exceptions,
    simulation as simulation,
)

__all__ = [
    # stochnoise.circuit
    "Circuit",
    "Operation",
    # stochnoise.noise_model
    "ErrorChannel",
    "NoiseEffect",
    "NoiseModel",
    # stochnoise.result
    "SampledResult",
    "StochasticResults",
    # stochnoise.simulation
    "QutipStateEngine",
    "StochasticConfig",
    "StochasticNoiseSimulator",
]
