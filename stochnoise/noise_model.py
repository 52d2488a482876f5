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
"""Defines the gate noise model used by the stochastic simulator."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

import numpy as np

from stochnoise.exceptions import ConfigurationError

__all__ = ["ErrorChannel", "NoiseEffect", "NoiseModel"]


class NoiseEffect(str, Enum):
    """The families of gate noise, with their one character code."""

    AMPLITUDE_DAMPING = "A"
    PHASE_FLIP = "P"
    DEPOLARIZING = "D"


class ErrorChannel(Enum):
    """The concrete error applied to a qubit once an error occurred."""

    BIT_FLIP = "X"
    BIT_PHASE_FLIP = "Y"
    PHASE_FLIP = "Z"
    AMPLITUDE_DAMPING = "A"

    @property
    def matrix(self) -> np.ndarray:
        """The unitary applied by a Pauli channel."""
        if self is ErrorChannel.AMPLITUDE_DAMPING:
            raise ValueError(
                "Amplitude damping is not unitary; use "
                "'NoiseModel.damping_operators()' instead."
            )
        return _PAULIS[self.value]


_PAULIS = {
    "X": np.array([[0, 1], [1, 0]], dtype=complex),
    "Y": np.array([[0, -1j], [1j, 0]], dtype=complex),
    "Z": np.array([[1, 0], [0, -1]], dtype=complex),
}

_DEPOLARIZING_CHANNELS = (
    ErrorChannel.BIT_FLIP,
    ErrorChannel.BIT_PHASE_FLIP,
    ErrorChannel.PHASE_FLIP,
)

EffectLike = Union[NoiseEffect, str]


@dataclass(frozen=True)
class NoiseModel:
    """Specifies the probabilistic gate noise applied after each gate.

    After every gate, each qubit it touched is independently subjected to
    every enabled effect, in the order in which the effects were given.
    Gates acting on more than one qubit use probabilities scaled by
    ``multi_qubit_factor``.

    **Supported effects:**

    - **A** (amplitude damping): decay towards state 0 with probability
      ``amplitude_damping_probability``, modelled by the Kraus pair
      ``[[1, 0], [0, sqrt(1 - g)]]`` (no error) and
      ``[[0, sqrt(g)], [0, 0]]`` (error).
    - **P** (phase flip): a Z error with probability ``base_probability``.
    - **D** (depolarizing): with probability ``base_probability`` the qubit
      is replaced by the maximally mixed state, i.e. X, Y or Z errors each
      occur with probability ``base_probability / 4``.

    Note:
        Being a frozen dataclass, a noise model can't be modified after
        creation. Use `dataclasses.replace()` to derive a new one.

    Args:
        base_probability: The error probability of single qubit gates.
        amplitude_damping_probability: The amplitude damping probability of
            single qubit gates. Defaults to twice ``base_probability``.
        multi_qubit_factor: The factor scaling both probabilities for gates
            acting on several qubits.
        effects: The enabled effects, either as a string of effect codes
            (e.g. "APD") or as a sequence of `NoiseEffect`.
    """

    base_probability: float = 0.0
    amplitude_damping_probability: float | None = None
    multi_qubit_factor: float = 2.0
    effects: tuple[NoiseEffect, ...] = field(
        default=(
            NoiseEffect.AMPLITUDE_DAMPING,
            NoiseEffect.PHASE_FLIP,
            NoiseEffect.DEPOLARIZING,
        )
    )

    def __post_init__(self) -> None:
        """Validates the parameters and fills in the defaults."""
        for param in (
            "base_probability",
            "amplitude_damping_probability",
            "multi_qubit_factor",
        ):
            value = getattr(self, param)
            if value is None:
                continue
            try:
                object.__setattr__(self, param, float(value))
            except (TypeError, ValueError):
                raise TypeError(
                    f"{param} should be castable to float, not of type"
                    f" {type(value)}."
                )
        if self.amplitude_damping_probability is None:
            object.__setattr__(
                self,
                "amplitude_damping_probability",
                2 * self.base_probability,
            )
        object.__setattr__(self, "effects", self.parse_effects(self.effects))
        self._validate_probabilities()

    def _validate_probabilities(self) -> None:
        p = self.base_probability
        gamma = self.amplitude_damping_probability
        factor = self.multi_qubit_factor
        for name, value in (
            ("base_probability", p),
            ("amplitude_damping_probability", gamma),
        ):
            if not 0 <= value <= 1:
                raise ConfigurationError(
                    f"'{name}' must be greater than or equal to zero and "
                    f"smaller than or equal to one, not {value}."
                )
        if not factor > 0:
            raise ConfigurationError(
                f"'multi_qubit_factor' must be greater than zero, not "
                f"{factor}."
            )
        if gamma * factor > 1 or p * factor > 1:
            raise ConfigurationError(
                "Error probabilities are faulty: "
                f"single qubit error probability: {p}, "
                f"multi qubit error probability: {p * factor}, "
                f"single qubit amplitude damping probability: {gamma}, "
                f"multi qubit amplitude damping probability: "
                f"{gamma * factor}. Multi qubit probabilities must not "
                "exceed one."
            )

    @staticmethod
    def parse_effects(
        effects: str | tuple[EffectLike, ...] | list[EffectLike],
    ) -> tuple[NoiseEffect, ...]:
        """Converts an effect specification into an ordered tuple.

        Repeated effects are dropped, the first occurrence setting the
        position of the effect.

        Args:
            effects: A string of effect codes or a sequence of effects.

        Returns:
            The enabled effects, in application order.
        """
        parsed: dict[NoiseEffect, None] = {}
        for effect in effects:
            try:
                parsed[NoiseEffect(effect)] = None
            except ValueError:
                raise ConfigurationError(
                    f"Unknown noise effect {effect!r}. Valid effects: "
                    + ", ".join(repr(e.value) for e in NoiseEffect)
                    + "."
                ) from None
        return tuple(parsed)

    @property
    def effect_codes(self) -> str:
        """The enabled effects as a string of codes."""
        return "".join(effect.value for effect in self.effects)

    @property
    def multi_qubit_probability(self) -> float:
        """The error probability of gates acting on several qubits."""
        return self.base_probability * self.multi_qubit_factor

    @property
    def multi_qubit_damping_probability(self) -> float:
        """The amplitude damping probability of multi-qubit gates."""
        return self.amplitude_damping_probability * self.multi_qubit_factor

    @property
    def is_noiseless(self) -> bool:
        """Whether no error can ever occur."""
        return not any(
            self.error_probability(effect, False) > 0
            for effect in self.effects
        )

    def error_probability(
        self, effect: EffectLike, multi_qubit: bool
    ) -> float:
        """The probability mass of the branch in which an error occurs.

        For amplitude damping, the actual probability of a decay depends on
        the state; this is the decay probability of a qubit in state 1.

        Args:
            effect: The noise effect.
            multi_qubit: Whether the gate acted on more than one qubit.
        """
        effect = NoiseEffect(effect)
        if effect is NoiseEffect.AMPLITUDE_DAMPING:
            return (
                self.multi_qubit_damping_probability
                if multi_qubit
                else self.amplitude_damping_probability
            )
        p = (
            self.multi_qubit_probability
            if multi_qubit
            else self.base_probability
        )
        if effect is NoiseEffect.DEPOLARIZING:
            # The identity component of the mixed state is not an error
            return 0.75 * p
        return p

    def branch_probabilities(
        self, effect: EffectLike, multi_qubit: bool
    ) -> tuple[float, float]:
        """The (no error, error) probabilities of an effect.

        Args:
            effect: The noise effect.
            multi_qubit: Whether the gate acted on more than one qubit.
        """
        error = self.error_probability(effect, multi_qubit)
        return 1.0 - error, error

    def damping_operators(
        self, multi_qubit: bool
    ) -> tuple[np.ndarray, np.ndarray]:
        """The Kraus operators of amplitude damping.

        Args:
            multi_qubit: Whether the gate acted on more than one qubit.

        Returns:
            The (no error, error) operators.
        """
        gamma = self.error_probability(
            NoiseEffect.AMPLITUDE_DAMPING, multi_qubit
        )
        no_error = np.array(
            [[1.0, 0.0], [0.0, math.sqrt(1 - gamma)]], dtype=complex
        )
        error = np.array([[0.0, math.sqrt(gamma)], [0.0, 0.0]], dtype=complex)
        return no_error, error

    def select_error_channel(
        self, effect: EffectLike, draw: float, multi_qubit: bool
    ) -> ErrorChannel:
        """Picks the error applied once an effect's error branch was drawn.

        Args:
            effect: The noise effect.
            draw: A uniform draw, lying in the error branch, i.e. in
                ``[0, error_probability(effect, multi_qubit))``.
            multi_qubit: Whether the gate acted on more than one qubit.

        Returns:
            The error channel whose sub-interval contains ``draw``.
        """
        effect = NoiseEffect(effect)
        error_prob = self.error_probability(effect, multi_qubit)
        if not 0 <= draw < error_prob:
            raise ValueError(
                f"The draw {draw} is outside of the error branch "
                f"[0, {error_prob}) of effect {effect.value!r}."
            )
        if effect is NoiseEffect.AMPLITUDE_DAMPING:
            return ErrorChannel.AMPLITUDE_DAMPING
        if effect is NoiseEffect.PHASE_FLIP:
            return ErrorChannel.PHASE_FLIP
        # Three sub-intervals of equal length
        index = min(int(3 * draw / error_prob), 2)
        return _DEPOLARIZING_CHANNELS[index]

    def __str__(self) -> str:
        lines = [
            f"Noise effects:                  {self.effect_codes or 'none'}",
            f"Error probability:              {self.base_probability}",
            "Amplitude damping probability:  "
            f"{self.amplitude_damping_probability}",
            f"Multi-qubit factor:             {self.multi_qubit_factor}",
        ]
        return "\n".join(lines)
