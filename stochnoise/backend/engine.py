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
"""Defines the abstract base class for a state engine."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Callable

import numpy as np

from stochnoise.circuit import Operation

EngineFactory = Callable[[int], "StateEngine"]


class StateEngine(ABC):
    """Base class enforcing an API for the state of a single trajectory.

    A state engine owns the state of one trajectory, starting in the
    all-zero state. It is never shared between trajectories, hence never
    accessed from more than one thread.

    Bitstrings follow the usual convention: the leftmost character is the
    last qubit.
    """

    @property
    @abstractmethod
    def n_qubits(self) -> int:
        """The number of qubits in the state."""
        pass

    @property
    @abstractmethod
    def state(self) -> Any:
        """A handle to the current state."""
        pass

    @abstractmethod
    def apply(self, operation: Operation) -> Any:
        """Applies a gate to the state.

        Args:
            operation: A gate (any operation for which
                `Operation.is_noise_eligible` is true).

        Returns:
            The handle of the updated state.
        """
        pass

    @abstractmethod
    def apply_channel(
        self, kraus_ops: Sequence[np.ndarray], qubit: int, draw: float
    ) -> int:
        """Applies one Kraus operator of a single qubit channel.

        Branch ``k`` is selected when ``draw`` falls between the cumulated
        probabilities of branches ``0..k-1`` and ``0..k``, where the
        probability of a branch is the squared norm of the state after
        applying its operator. The state is renormalized afterwards.

        Args:
            kraus_ops: The 2x2 Kraus operators of the channel.
            qubit: The qubit the channel acts on.
            draw: A uniform draw in [0, 1).

        Returns:
            The index of the applied operator.
        """
        pass

    @abstractmethod
    def measure(
        self,
        rng: np.random.Generator,
        qubits: Sequence[int] | None = None,
    ) -> str:
        """Measures qubits in the computational basis, collapsing the state.

        Args:
            rng: The generator providing the random draws.
            qubits: The qubits to measure, in order. Defaults to measuring
                the whole register at once.

        Returns:
            The outcome of each measured qubit, with the first measured
            qubit as the first character. When measuring the whole
            register, the full bitstring instead.
        """
        pass

    @abstractmethod
    def approximate(self, fidelity: float) -> float:
        """Approximates the state within a fidelity budget.

        Args:
            fidelity: The minimal fidelity, in (0, 1], between the current
                state and its approximation.

        Returns:
            The fidelity actually achieved.
        """
        pass

    @abstractmethod
    def probability(self, bitstring: str) -> float:
        """The probability of measuring the given basis state."""
        pass

    @abstractmethod
    def dispose(self) -> None:
        """Releases the resources held by the state."""
        pass
