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
"""Stochastic simulation of noisy circuits."""

from stochnoise.simulation.qutip_engine import QutipStateEngine
from stochnoise.simulation.simconfig import (
    StochasticConfig,
    parse_recorded_properties,
)
from stochnoise.simulation.simulation import (
    StochasticNoiseSimulator,
    available_parallelism,
    partition_runs,
)
from stochnoise.simulation.trajectory import TrajectorySampler

__all__ = [
    "QutipStateEngine",
    "StochasticConfig",
    "StochasticNoiseSimulator",
    "TrajectorySampler",
    "available_parallelism",
    "parse_recorded_properties",
    "partition_runs",
]
