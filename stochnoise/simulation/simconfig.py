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
"""Contains the StochasticConfig class setting up a stochastic simulation."""

from __future__ import annotations

import re
import warnings
from dataclasses import dataclass
from typing import Any, Optional, Type, TypeVar

import numpy as np

from stochnoise.backend.results import PropertyKey
from stochnoise.exceptions import ConfigurationError
from stochnoise.noise_model import NoiseModel

T = TypeVar("T", bound="StochasticConfig")

_TOKEN_SEPARATORS = re.compile(r"[,\s]+")
_INDEX_TOKEN = re.compile(r"^[0-9]+$")
_RANGE_TOKEN = re.compile(r"^([0-9]+)-([0-9]+)$")


def parse_recorded_properties(
    properties: str, n_qubits: int
) -> tuple[PropertyKey, ...]:
    """Parses the basis states whose probability each run records.

    ``properties`` holds tokens separated by commas and/or whitespace. Each
    token is either a basis state index ``k`` or an inclusive range ``a-b``.
    The index ``k`` is recorded under the label
    ``np.binary_repr(k, n_qubits)`` and ordinals follow the token order.

    Args:
        properties: The recorded properties (e.g. "0, 3, 4-7").
        n_qubits: The number of qubits of the simulated circuit.

    Returns:
        The (ordinal, label) key of each recorded property.
    """
    tokens = [
        tok for tok in _TOKEN_SEPARATORS.split(properties.strip()) if tok
    ]
    if not tokens:
        warnings.warn(
            "No recorded properties were given, so no property means will "
            "be computed.",
            stacklevel=2,
        )
        return ()
    n_states = 2**n_qubits
    indices: list[int] = []
    for token in tokens:
        if _INDEX_TOKEN.match(token):
            indices.append(int(token))
            continue
        match = _RANGE_TOKEN.match(token)
        if match is None:
            raise ConfigurationError(
                f"Invalid recorded property {token!r}: expected a "
                "non-negative integer or a range 'a-b'."
            )
        start, stop = int(match.group(1)), int(match.group(2))
        if start > stop:
            raise ConfigurationError(
                f"Invalid recorded property range {token!r}: the start must "
                "not exceed the end."
            )
        indices.extend(range(start, stop + 1))

    seen: set[int] = set()
    for index in indices:
        if index >= n_states:
            raise ConfigurationError(
                f"Recorded property {index} is out of range for "
                f"{n_qubits} qubit(s) (at most {n_states - 1})."
            )
        if index in seen:
            raise ConfigurationError(
                f"Recorded property {index} is given more than once."
            )
        seen.add(index)
    return tuple(
        (ordinal, np.binary_repr(index, n_qubits))
        for ordinal, index in enumerate(indices)
    )


@dataclass(frozen=True)
class StochasticConfig:
    """Specifies a stochastic simulation's configuration.

    Note:
        Being a frozen dataclass, the configuration chosen upon instantiation
        cannot be changed later on. Use `dataclasses.replace()` to derive a
        new one.

    Args:
        noise_effects: The enabled noise effects, applied in this order:

            - "A": Amplitude damping.
            - "P": Phase flip.
            - "D": Depolarization.

        noise_probability: The error probability of single qubit gates.
        amplitude_damping_probability: The amplitude damping probability of
            single qubit gates. Defaults to twice ``noise_probability``.
        multi_qubit_factor: Scales the probabilities of gates acting on
            several qubits.
        runs: The number of sampled trajectories.
        step_interval: The number of gates between two approximation
            checkpoints.
        step_fidelity: The fidelity kept by each approximation. No
            approximation is done when it is 1.
        recorded_properties: The basis states whose probability is averaged
            over the runs (see `parse_recorded_properties`).
        max_instances: The maximal number of parallel workers. Defaults to
            the available parallelism of the machine.
    """

    noise_effects: str = "APD"
    noise_probability: float = 0.001
    amplitude_damping_probability: Optional[float] = None
    multi_qubit_factor: float = 2.0
    runs: int = 1000
    step_interval: int = 1
    step_fidelity: float = 1.0
    recorded_properties: str = "0"
    max_instances: Optional[int] = None

    def __post_init__(self) -> None:
        for param in ("runs", "step_interval", "max_instances"):
            value = getattr(self, param)
            if value is None:
                continue
            if not isinstance(value, (int, np.integer)) or isinstance(
                value, bool
            ):
                raise TypeError(
                    f"'{param}' must be an integer, not {type(value)}."
                )
            if value <= 0:
                raise ConfigurationError(
                    f"'{param}' must be greater than zero, not {value}."
                )
            self._change_attribute(param, int(value))
        if not 0 < self.step_fidelity <= 1:
            raise ConfigurationError(
                "'step_fidelity' must be greater than zero and smaller than "
                f"or equal to one, not {self.step_fidelity}."
            )
        if self.step_interval != 1 and self.step_fidelity == 1:
            warnings.warn(
                f"'step_interval' is set to {self.step_interval} but no "
                "approximation happens when 'step_fidelity' is 1.",
                stacklevel=3,
            )
        # Fails early on invalid noise parameters
        self._change_attribute(
            "noise_effects", self.noise_model.effect_codes
        )

    @classmethod
    def from_noise_model(
        cls: Type[T], noise_model: NoiseModel, **kwargs: Any
    ) -> T:
        """Creates a StochasticConfig from a NoiseModel.

        Args:
            noise_model: The noise model to simulate.
            kwargs: The other parameters of the configuration.
        """
        return cls(
            noise_effects=noise_model.effect_codes,
            noise_probability=noise_model.base_probability,
            amplitude_damping_probability=(
                noise_model.amplitude_damping_probability
            ),
            multi_qubit_factor=noise_model.multi_qubit_factor,
            **kwargs,
        )

    @property
    def noise_model(self) -> NoiseModel:
        """The noise model described by this configuration."""
        return NoiseModel(
            base_probability=self.noise_probability,
            amplitude_damping_probability=self.amplitude_damping_probability,
            multi_qubit_factor=self.multi_qubit_factor,
            effects=NoiseModel.parse_effects(self.noise_effects),
        )

    @property
    def approximates(self) -> bool:
        """Whether the trajectories are approximated."""
        return self.step_fidelity < 1

    def property_keys(self, n_qubits: int) -> tuple[PropertyKey, ...]:
        """The keys of the recorded properties for a register size."""
        return parse_recorded_properties(self.recorded_properties, n_qubits)

    def _change_attribute(self, attr_name: str, new_value: Any) -> None:
        object.__setattr__(self, attr_name, new_value)

    def __str__(self) -> str:
        noise_model = self.noise_model
        lines = [
            "Options:",
            "----------",
            f"Number of runs:        {self.runs}",
            f"Noise effects:         {self.noise_effects or 'none'}",
        ]
        if self.noise_effects:
            lines.append(
                f"Error probability:     {noise_model.base_probability}"
            )
            lines.append(
                "Damping probability:   "
                f"{noise_model.amplitude_damping_probability}"
            )
            lines.append(f"Multi-qubit factor:    {self.multi_qubit_factor}")
        if self.approximates:
            lines.append(f"Step fidelity:         {self.step_fidelity}")
            lines.append(f"Step interval:         {self.step_interval}")
        lines.append(f"Recorded properties:   {self.recorded_properties}")
        if self.max_instances is not None:
            lines.append(f"Max. instances:        {self.max_instances}")
        return "\n".join(lines).rstrip()

    def show_config(self) -> None:
        """Prints the configuration."""
        print(self)
