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
"""Classes to store the results of a stochastic simulation."""
from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field

import matplotlib.pyplot as plt
import numpy as np

from stochnoise.backend.results import RunStatistics
from stochnoise.math import multinomial

__all__ = ["SampledResult", "StochasticResults"]


@dataclass
class SampledResult:
    """Represents the result of a simulation from a series of samples.

    Args:
        bitstring_counts: The number of times each bitstring was
            measured.
        n_qubits: The length of the bitstrings.
    """

    bitstring_counts: Mapping[str, int]
    n_qubits: int
    n_samples: int = field(init=False)

    def __post_init__(self) -> None:
        self.bitstring_counts = dict(self.bitstring_counts)
        for bitstr, count in self.bitstring_counts.items():
            if len(bitstr) != self.n_qubits or set(bitstr) - {"0", "1"}:
                raise ValueError(
                    f"{bitstr!r} is not a bitstring of length "
                    f"{self.n_qubits}."
                )
            if count < 0:
                raise ValueError(
                    f"The count of {bitstr!r} can't be negative ({count})."
                )
        self.n_samples = sum(self.bitstring_counts.values())

    @property
    def sampling_dist(self) -> dict[str, float]:
        """Sampling distribution of the measured bitstrings.

        Bitstrings are sorted and those never measured are left out.
        """
        if not self.n_samples:
            return {}
        return {
            bitstr: count / self.n_samples
            for bitstr, count in sorted(self.bitstring_counts.items())
            if count != 0
        }

    @property
    def sampling_errors(self) -> dict[str, float]:
        """The sampling error associated to each bitstring's sampling rate.

        Uses the standard error of the mean as a quantifier for sampling error.
        """
        return {
            bitstr: np.sqrt(p * (1 - p) / self.n_samples)
            for bitstr, p in self.sampling_dist.items()
        }

    def get_samples(
        self, n_samples: int, rng: np.random.Generator | None = None
    ) -> Counter[str]:
        """Takes multiple samples from the sampling distribution.

        The bitstrings are sorted lexicographically and each sample is the
        first bitstring whose cumulated rate reaches a uniform draw.

        Args:
            n_samples: Number of samples to return.
            rng: The generator providing the draws. Defaults to a freshly
                seeded generator.

        Returns:
            Samples of bitstrings corresponding to measured states.
        """
        if n_samples <= 0:
            raise ValueError(
                f"'n_samples' must be greater than zero, not {n_samples}."
            )
        dist = self.sampling_dist
        if not dist:
            raise ValueError("Can't sample from a result without samples.")
        bitstrings = list(dist)
        indices = multinomial(n_samples, list(dist.values()), rng=rng)
        return Counter(bitstrings[i] for i in indices)

    def plot_histogram(
        self,
        min_rate: float = 0.001,
        max_n_bitstrings: int | None = None,
        show: bool = True,
    ) -> None:
        """Plots the result in an histogram.

        Args:
            min_rate: The minimum sampling rate a bitstring must have to be
                displayed.
            max_n_bitstrings: An optional limit on the number of bitstrings
                displayed.
            show: Whether or not to call `plt.show()` before returning.
        """
        probs = np.array(
            Counter(self.sampling_dist).most_common(max_n_bitstrings),
            dtype=object,
        )
        if probs.size:
            probs = probs[probs[:, 1] >= min_rate]
        if not probs.size:
            raise ValueError(
                f"No bitstring has a sampling rate of at least {min_rate}."
            )
        errors = self.sampling_errors
        plt.bar(
            probs[:, 0],
            probs[:, 1],
            yerr=[errors[bitstr] for bitstr in probs[:, 0]],
        )
        plt.xticks(rotation="vertical")
        plt.ylabel("Probabilities")
        if show:
            plt.show()


@dataclass(frozen=True)
class StochasticResults:
    """Bundles everything a stochastic simulation produced.

    Args:
        property_means: The mean of each recorded property, by label.
        sampled: The outcome counts, one per trajectory.
        statistics: The run statistics.
    """

    property_means: dict[str, float]
    sampled: SampledResult
    statistics: RunStatistics

    @property
    def expectations(self) -> dict[str, float]:
        """The estimated probability of each recorded basis state."""
        return dict(self.property_means)

    def __str__(self) -> str:
        lines = [f"Runs: {self.statistics.runs}"]
        lines.extend(
            f"P({label}) = {mean:.6g}"
            for label, mean in self.property_means.items()
        )
        return "\n".join(lines)
