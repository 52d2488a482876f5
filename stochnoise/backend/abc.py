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
"""Base class for the simulator interface."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from stochnoise.circuit import Circuit
from stochnoise.math import generate_seed


class Simulator(ABC):
    """The simulator abstract base class.

    Holds the simulated circuit and the master seed from which every random
    stream of a simulation is derived.

    Args:
        circuit: The circuit to simulate.
        seed: The master seed. When left undefined, a seed is drawn from the
            OS entropy pool; it is then fixed for the simulator's lifetime
            and can be read back from `seed`.
    """

    def __init__(self, circuit: Circuit, seed: int | None = None) -> None:
        """Starts a new simulator instance."""
        if not isinstance(circuit, Circuit):
            raise TypeError(
                "'circuit' should be a `Circuit` instance"
                f", not {type(circuit)}."
            )
        if seed is None:
            seed = generate_seed()
        elif not isinstance(seed, int) or isinstance(seed, bool) or seed < 0:
            raise ValueError(
                f"'seed' must be a non-negative integer, not {seed!r}."
            )
        self._circuit = circuit
        self._seed = seed

    @property
    def circuit(self) -> Circuit:
        """The simulated circuit."""
        return self._circuit

    @property
    def seed(self) -> int:
        """The master seed."""
        return self._seed

    @property
    def n_qubits(self) -> int:
        """The number of qubits of the circuit."""
        return self._circuit.n_qubits

    @property
    def n_ops(self) -> int:
        """The number of operations of the circuit."""
        return self._circuit.n_ops

    @property
    def name(self) -> str:
        """A name identifying the simulation."""
        return self._circuit.name

    @abstractmethod
    def simulate(self, shots: int) -> Mapping[str, int]:
        """Samples measurement outcomes of the circuit.

        Args:
            shots: The number of samples.

        Returns:
            The number of occurrences of each measured bitstring.
        """
        pass

    def additional_statistics(self) -> dict[str, str]:
        """Statistics specific to a simulation method."""
        return {}

    def statistics(self) -> dict[str, str]:
        """All statistics of the simulator, as strings."""
        return {
            "name": self.name,
            "n_qubits": str(self.n_qubits),
            "n_ops": str(self.n_ops),
            "seed": str(self.seed),
            **self.additional_statistics(),
        }
