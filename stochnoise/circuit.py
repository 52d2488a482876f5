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
"""Defines the circuit representation consumed by the simulators."""
from __future__ import annotations

import cmath
import math
from dataclasses import dataclass, field
from typing import Iterator, Sequence

import numpy as np

__all__ = ["Circuit", "Operation"]

# Operations acting on the state without being gates
NON_UNITARY = frozenset({"measure", "reset", "barrier"})

_SQRT2_INV = 1 / math.sqrt(2)

_FIXED_GATES: dict[str, np.ndarray] = {
    "i": np.eye(2, dtype=complex),
    "x": np.array([[0, 1], [1, 0]], dtype=complex),
    "y": np.array([[0, -1j], [1j, 0]], dtype=complex),
    "z": np.array([[1, 0], [0, -1]], dtype=complex),
    "h": np.array([[1, 1], [1, -1]], dtype=complex) * _SQRT2_INV,
    "s": np.array([[1, 0], [0, 1j]], dtype=complex),
    "sdg": np.array([[1, 0], [0, -1j]], dtype=complex),
    "t": np.array([[1, 0], [0, cmath.exp(1j * math.pi / 4)]], dtype=complex),
    "tdg": np.array(
        [[1, 0], [0, cmath.exp(-1j * math.pi / 4)]], dtype=complex
    ),
    "sx": np.array([[1 + 1j, 1 - 1j], [1 - 1j, 1 + 1j]], dtype=complex) / 2,
}

_PARAMETRIZED_GATES = {"rx": 1, "ry": 1, "rz": 1, "p": 1}

GATES = frozenset(_FIXED_GATES) | frozenset(_PARAMETRIZED_GATES) | {"swap"}


def _rotation(kind: str, theta: float) -> np.ndarray:
    c, s = math.cos(theta / 2), math.sin(theta / 2)
    if kind == "rx":
        return np.array([[c, -1j * s], [-1j * s, c]], dtype=complex)
    if kind == "ry":
        return np.array([[c, -s], [s, c]], dtype=complex)
    if kind == "rz":
        return np.array(
            [[cmath.exp(-1j * theta / 2), 0], [0, cmath.exp(1j * theta / 2)]],
            dtype=complex,
        )
    # Phase gate
    return np.array([[1, 0], [0, cmath.exp(1j * theta)]], dtype=complex)


@dataclass(frozen=True)
class Operation:
    """A single instruction of a circuit.

    Args:
        kind: The name of the instruction (e.g. "h", "rx", "swap",
            "measure", "reset", "barrier").
        targets: The qubits the instruction acts on.
        controls: The control qubits of a gate. The target matrix is
            applied when all controls are in state 1.
        params: The angles of a parametrized gate.
        clbits: For "measure", the classical bits receiving the outcome of
            each target, in the same order.
    """

    kind: str
    targets: tuple[int, ...]
    controls: tuple[int, ...] = ()
    params: tuple[float, ...] = ()
    clbits: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", self.kind.lower())
        for name in ("targets", "controls", "clbits"):
            object.__setattr__(
                self, name, tuple(int(q) for q in getattr(self, name))
            )
        object.__setattr__(
            self, "params", tuple(float(p) for p in self.params)
        )
        if self.kind not in GATES | NON_UNITARY:
            raise ValueError(f"Unknown operation kind {self.kind!r}.")
        if not self.targets and self.kind != "barrier":
            raise ValueError(f"Operation {self.kind!r} needs a target.")
        if len(set(self.qubits)) != len(self.qubits):
            raise ValueError(
                f"Operation {self.kind!r} uses the same qubit twice: "
                f"{self.qubits}."
            )
        if any(q < 0 for q in self.qubits):
            raise ValueError("Qubit indices must be non-negative.")
        n_params = _PARAMETRIZED_GATES.get(self.kind, 0)
        if len(self.params) != n_params:
            raise ValueError(
                f"Operation {self.kind!r} takes {n_params} parameter(s), "
                f"got {len(self.params)}."
            )
        if self.kind == "swap" and len(self.targets) != 2:
            raise ValueError("'swap' acts on exactly two targets.")
        if self.kind in GATES - {"swap"} and len(self.targets) != 1:
            raise ValueError(
                f"Gate {self.kind!r} acts on a single target; use one "
                "operation per target."
            )
        if self.kind in NON_UNITARY and self.controls:
            raise ValueError(f"{self.kind!r} can't be controlled.")
        if self.kind == "measure" and len(self.clbits) != len(self.targets):
            raise ValueError(
                "A measurement needs one classical bit per target."
            )

    @property
    def qubits(self) -> tuple[int, ...]:
        """Every qubit touched by the operation, controls first."""
        return self.controls + self.targets

    @property
    def arity(self) -> int:
        """The number of qubits touched by the operation."""
        return len(self.qubits)

    @property
    def is_noise_eligible(self) -> bool:
        """Whether gate noise follows this operation."""
        return self.kind not in NON_UNITARY

    def matrix(self) -> np.ndarray:
        """The 2x2 matrix applied to the target of a gate."""
        if self.kind in _FIXED_GATES:
            return _FIXED_GATES[self.kind]
        if self.kind in _PARAMETRIZED_GATES:
            return _rotation(self.kind, self.params[0])
        raise ValueError(
            f"Operation {self.kind!r} has no single-target matrix."
        )


@dataclass
class Circuit:
    """An ordered list of operations on a register of qubits.

    Gate helpers return the circuit itself so that calls can be chained::

        circ = Circuit(2).h(0).cx(0, 1)

    Args:
        n_qubits: The number of qubits.
        n_clbits: The number of classical bits written by measurements.
        name: A name identifying the circuit.
    """

    n_qubits: int
    n_clbits: int = 0
    name: str = "circuit"
    _operations: list[Operation] = field(
        default_factory=list, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.n_qubits <= 0:
            raise ValueError(
                f"'n_qubits' must be greater than zero, not {self.n_qubits}."
            )
        if self.n_clbits < 0:
            raise ValueError(
                "'n_clbits' must be greater than or equal to zero, "
                f"not {self.n_clbits}."
            )

    @property
    def operations(self) -> tuple[Operation, ...]:
        """The operations, in program order."""
        return tuple(self._operations)

    @property
    def n_ops(self) -> int:
        """The number of operations."""
        return len(self._operations)

    @property
    def has_measurements(self) -> bool:
        """Whether the circuit writes into classical bits."""
        return any(op.kind == "measure" for op in self._operations)

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def append(
        self,
        kind: str,
        targets: Sequence[int],
        controls: Sequence[int] = (),
        params: Sequence[float] = (),
        clbits: Sequence[int] = (),
    ) -> Circuit:
        """Appends an operation at the end of the circuit."""
        op = Operation(
            kind, tuple(targets), tuple(controls), tuple(params), tuple(clbits)
        )
        if any(q >= self.n_qubits for q in op.qubits):
            raise ValueError(
                f"{op.kind!r} targets qubits {op.qubits} but the circuit "
                f"only has {self.n_qubits} qubit(s)."
            )
        if any(c >= self.n_clbits for c in op.clbits):
            raise ValueError(
                f"{op.kind!r} writes classical bits {op.clbits} but the "
                f"circuit only has {self.n_clbits} classical bit(s)."
            )
        self._operations.append(op)
        return self

    def i(self, q: int) -> Circuit:
        """Applies an identity gate to qubit `q`."""
        return self.append("i", (q,))

    def x(self, q: int) -> Circuit:
        """Applies a Pauli X gate to qubit `q`."""
        return self.append("x", (q,))

    def y(self, q: int) -> Circuit:
        """Applies a Pauli Y gate to qubit `q`."""
        return self.append("y", (q,))

    def z(self, q: int) -> Circuit:
        """Applies a Pauli Z gate to qubit `q`."""
        return self.append("z", (q,))

    def h(self, q: int) -> Circuit:
        """Applies a Hadamard gate to qubit `q`."""
        return self.append("h", (q,))

    def s(self, q: int) -> Circuit:
        """Applies an S gate to qubit `q`."""
        return self.append("s", (q,))

    def sdg(self, q: int) -> Circuit:
        """Applies the inverse of the S gate to qubit `q`."""
        return self.append("sdg", (q,))

    def t(self, q: int) -> Circuit:
        """Applies a T gate to qubit `q`."""
        return self.append("t", (q,))

    def tdg(self, q: int) -> Circuit:
        """Applies the inverse of the T gate to qubit `q`."""
        return self.append("tdg", (q,))

    def sx(self, q: int) -> Circuit:
        """Applies a square root of X gate to qubit `q`."""
        return self.append("sx", (q,))

    def rx(self, theta: float, q: int) -> Circuit:
        """Rotates qubit `q` by `theta` around the X axis."""
        return self.append("rx", (q,), params=(theta,))

    def ry(self, theta: float, q: int) -> Circuit:
        """Rotates qubit `q` by `theta` around the Y axis."""
        return self.append("ry", (q,), params=(theta,))

    def rz(self, theta: float, q: int) -> Circuit:
        """Rotates qubit `q` by `theta` around the Z axis."""
        return self.append("rz", (q,), params=(theta,))

    def p(self, theta: float, q: int) -> Circuit:
        """Applies a phase of `theta` to state 1 of qubit `q`."""
        return self.append("p", (q,), params=(theta,))

    def cx(self, control: int, target: int) -> Circuit:
        """Applies an X gate to `target` when `control` is 1."""
        return self.append("x", (target,), controls=(control,))

    def cy(self, control: int, target: int) -> Circuit:
        """Applies a Y gate to `target` when `control` is 1."""
        return self.append("y", (target,), controls=(control,))

    def cz(self, control: int, target: int) -> Circuit:
        """Applies a Z gate to `target` when `control` is 1."""
        return self.append("z", (target,), controls=(control,))

    def swap(self, q1: int, q2: int) -> Circuit:
        """Swaps the states of qubits `q1` and `q2`."""
        return self.append("swap", (q1, q2))

    def measure(self, q: int, clbit: int) -> Circuit:
        """Measures qubit `q` into the classical bit `clbit`."""
        return self.append("measure", (q,), clbits=(clbit,))

    def reset(self, q: int) -> Circuit:
        """Resets qubit `q` to state 0."""
        return self.append("reset", (q,))

    def barrier(self, *qubits: int) -> Circuit:
        """Adds a barrier on `qubits`, which applies nothing."""
        return self.append("barrier", qubits)
