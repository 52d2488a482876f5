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
"""Defines the records produced by trajectories and their statistics."""
from __future__ import annotations

from dataclasses import dataclass

PropertyKey = tuple[int, str]


@dataclass(frozen=True)
class TrajectoryRecord:
    """The outcome of a single noisy trajectory.

    Args:
        run_id: The identifier of the run, fixing its random stream.
        property_keys: The (ordinal, label) keys of the recorded properties.
        property_values: The recorded value of each key, in the same order.
        outcome: The measured bitstring.
        increment: The number of occurrences of ``outcome`` this record
            accounts for.
        approximations: The number of approximation checkpoints that fired.
        wall_time: The time taken by the run, in seconds.
    """

    run_id: int
    property_keys: tuple[PropertyKey, ...]
    property_values: tuple[float, ...]
    outcome: str
    increment: int = 1
    approximations: int = 0
    wall_time: float = 0.0

    def __post_init__(self) -> None:
        if len(self.property_keys) != len(self.property_values):
            raise ValueError(
                f"Run {self.run_id} has {len(self.property_keys)} property "
                f"keys but {len(self.property_values)} values."
            )

    @property
    def properties(self) -> dict[str, float]:
        """The recorded values, by label."""
        return {
            label: value
            for (_, label), value in zip(
                self.property_keys, self.property_values
            )
        }


@dataclass(frozen=True)
class RunStatistics:
    """Statistics of a full stochastic simulation.

    Args:
        runs: The number of trajectories.
        approximation_runs: The approximation checkpoints that fired,
            summed over all trajectories.
        perfect_run_time: The wall time of the noiseless baseline run, in
            seconds.
        stoch_wall_time: The wall time of the parallel phase, in seconds.
        mean_stoch_run_time: The summed wall time of the workers divided by
            the number of trajectories, in seconds.
        parallel_instances: The number of workers.
        step_fidelity: The fidelity target of each approximation.
    """

    runs: int
    approximation_runs: int
    perfect_run_time: float
    stoch_wall_time: float
    mean_stoch_run_time: float
    parallel_instances: int
    step_fidelity: float

    def as_dict(self) -> dict[str, str]:
        """The statistics as strings, by name."""
        return {
            "step_fidelity": str(self.step_fidelity),
            "approximation_runs": str(self.approximation_runs),
            "perfect_run_time": str(self.perfect_run_time),
            "stoch_wall_time": str(self.stoch_wall_time),
            "mean_stoch_run_time": str(self.mean_stoch_run_time),
            "parallel_instances": str(self.parallel_instances),
        }
