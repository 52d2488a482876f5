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
"""Definition of the QutipStateEngine, the reference state engine."""
from __future__ import annotations

import math
from collections.abc import Sequence
from typing import ClassVar

import numpy as np
import qutip

from stochnoise.backend.engine import StateEngine
from stochnoise.circuit import Operation
from stochnoise.exceptions import StateAllocationError
from stochnoise.math import multinomial


def _apply_local(
    amplitudes: np.ndarray,
    n_qubits: int,
    targets: Sequence[int],
    controls: Sequence[int] = (),
    matrix: np.ndarray | None = None,
) -> np.ndarray:
    """Applies a local operation to a register of amplitudes.

    The amplitudes are viewed as a tensor with one axis per qubit, axis 0
    being qubit ``n_qubits - 1``. Only the slice in which every control
    is 1 is updated. With a ``matrix``, the single target is multiplied by
    it; without one, the two targets are swapped.

    Args:
        amplitudes: The amplitudes of the register, in index order.
        n_qubits: The number of qubits of the register.
        targets: The target qubits.
        controls: The control qubits.
        matrix: The 2x2 matrix applied to a single target.

    Returns:
        The new amplitudes, in index order.
    """
    psi = amplitudes.reshape((2,) * n_qubits).copy()
    control_axes = {n_qubits - 1 - c for c in controls}
    index = tuple(
        1 if axis in control_axes else slice(None)
        for axis in range(n_qubits)
    )

    def sub_axis(qubit: int) -> int:
        # Control axes are dropped by the slicing
        axis = n_qubits - 1 - qubit
        return axis - sum(1 for c_axis in control_axes if c_axis < axis)

    block = psi[index]
    if matrix is None:
        q1, q2 = targets
        block = np.swapaxes(block, sub_axis(q1), sub_axis(q2))
    else:
        (target,) = targets
        axis = sub_axis(target)
        block = np.moveaxis(
            np.tensordot(matrix, block, axes=([1], [axis])), 0, axis
        )
    psi[index] = block
    return psi.reshape(-1)


class QutipStateEngine(StateEngine):
    """A trajectory state stored as a dense qutip ket.

    Gates and Kraus operators only act on the axes of the qubits they
    touch; no operator over the whole register is ever built.

    Args:
        n_qubits: The number of qubits, all starting in state 0.
    """

    max_qubits: ClassVar[int] = 20

    def __init__(self, n_qubits: int) -> None:
        """Allocates the all-zero state."""
        if n_qubits <= 0:
            raise ValueError(
                f"'n_qubits' must be greater than zero, not {n_qubits}."
            )
        if n_qubits > self.max_qubits:
            raise StateAllocationError(
                f"Can't allocate a state of {n_qubits} qubits; "
                f"{type(self).__name__} supports at most {self.max_qubits}."
            )
        self._n_qubits = n_qubits
        self._dims = [[2] * n_qubits, [1] * n_qubits]
        try:
            self._state: qutip.Qobj | None = qutip.tensor(
                [qutip.basis(2, 0)] * n_qubits
            )
        except MemoryError as err:
            raise StateAllocationError(
                f"Ran out of memory allocating {n_qubits} qubits."
            ) from err

    @property
    def n_qubits(self) -> int:
        """The number of qubits in the state."""
        return self._n_qubits

    @property
    def state(self) -> qutip.Qobj:
        """The current state, as a ket."""
        if self._state is None:
            raise RuntimeError("The state was already disposed of.")
        return self._state

    def _amplitudes(self) -> np.ndarray:
        return self.state.full().ravel()

    def _set_amplitudes(self, amplitudes: np.ndarray) -> None:
        self._state = qutip.Qobj(amplitudes.reshape(-1, 1), dims=self._dims)

    def _check_qubit(self, qubit: int) -> None:
        if not 0 <= qubit < self._n_qubits:
            raise ValueError(
                f"Qubit {qubit} is out of range for a state of "
                f"{self._n_qubits} qubit(s)."
            )

    def apply(self, operation: Operation) -> qutip.Qobj:
        """Applies a gate to the state."""
        if not operation.is_noise_eligible:
            raise ValueError(
                f"{operation.kind!r} is not a gate and can't be applied."
            )
        for q in operation.qubits:
            self._check_qubit(q)
        matrix = None if operation.kind == "swap" else operation.matrix()
        self._set_amplitudes(
            _apply_local(
                self._amplitudes(),
                self._n_qubits,
                operation.targets,
                controls=operation.controls,
                matrix=matrix,
            )
        )
        return self.state

    def apply_channel(
        self, kraus_ops: Sequence[np.ndarray], qubit: int, draw: float
    ) -> int:
        """Applies one Kraus operator of a single qubit channel."""
        self._check_qubit(qubit)
        if not len(kraus_ops):
            raise ValueError("A channel needs at least one Kraus operator.")
        amps = self._amplitudes()
        cumulated = 0.0
        last_nonzero = None
        for index, kraus in enumerate(kraus_ops):
            branch = _apply_local(
                amps,
                self._n_qubits,
                (qubit,),
                matrix=np.asarray(kraus, dtype=complex),
            )
            weight = float(np.vdot(branch, branch).real)
            if weight <= 0:
                continue
            last_nonzero = (index, branch, weight)
            cumulated += weight
            if draw < cumulated:
                break
        if last_nonzero is None:
            raise ValueError("Every Kraus operator annihilates the state.")
        # Rounding may leave the draw above the last cumulated weight
        index, branch, weight = last_nonzero
        self._set_amplitudes(branch / math.sqrt(weight))
        return index

    def _collapse(self, qubit: int, outcome: int) -> None:
        amps = self._amplitudes()
        bits = (np.arange(amps.size) >> qubit) & 1
        amps[bits != outcome] = 0
        self._set_amplitudes(amps / np.linalg.norm(amps))

    def _prob_one(self, qubit: int) -> float:
        probs = np.abs(self._amplitudes()) ** 2
        bits = (np.arange(probs.size) >> qubit) & 1
        return float(np.sum(probs[bits == 1]) / np.sum(probs))

    def measure(
        self,
        rng: np.random.Generator,
        qubits: Sequence[int] | None = None,
    ) -> str:
        """Measures qubits in the computational basis, collapsing the state.

        Each qubit of ``qubits`` reads 0 when its draw is below the
        probability of 0. The whole register is measured with a single
        draw, the basis states being cumulated in index order.
        """
        if qubits is None:
            probs = np.abs(self._amplitudes()) ** 2
            (index,) = multinomial(1, probs, rng=rng)
            amps = np.zeros(probs.size, dtype=complex)
            amps[index] = 1.0
            self._set_amplitudes(amps)
            return np.binary_repr(index, self._n_qubits)
        outcomes = []
        for q in qubits:
            self._check_qubit(q)
            outcome = int(rng.random() >= 1 - self._prob_one(q))
            self._collapse(q, outcome)
            outcomes.append(str(outcome))
        return "".join(outcomes)

    def approximate(self, fidelity: float) -> float:
        """Drops the least likely basis states within a fidelity budget.

        The smallest amplitudes are set to zero as long as their summed
        probability doesn't exceed ``1 - fidelity``; the state is then
        renormalized. The returned fidelity is one minus the removed
        probability.
        """
        if not 0 < fidelity <= 1:
            raise ValueError(
                f"'fidelity' must be in (0, 1], not {fidelity}."
            )
        if fidelity == 1:
            return 1.0
        amps = self._amplitudes()
        probs = np.abs(amps) ** 2
        probs = probs / probs.sum()
        order = np.argsort(probs, kind="stable")
        cumulated = np.cumsum(probs[order])
        # At least one basis state is always kept
        n_removed = min(
            int(np.searchsorted(cumulated, 1 - fidelity, side="right")),
            probs.size - 1,
        )
        if n_removed == 0:
            return 1.0
        removed = float(cumulated[n_removed - 1])
        amps[order[:n_removed]] = 0
        self._set_amplitudes(amps / np.linalg.norm(amps))
        return 1.0 - removed

    def probability(self, bitstring: str) -> float:
        """The probability of measuring the given basis state."""
        if len(bitstring) != self._n_qubits or set(bitstring) - {"0", "1"}:
            raise ValueError(
                f"{bitstring!r} is not a bitstring of length "
                f"{self._n_qubits}."
            )
        amp = self._amplitudes()[int(bitstring, base=2)]
        return float(np.abs(amp) ** 2)

    def dispose(self) -> None:
        """Releases the state."""
        self._state = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n_qubits={self._n_qubits})"
